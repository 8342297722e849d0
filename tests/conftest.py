#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
pytest 全局配置

提供共享 fixtures、自定义 markers 和测试工具。
异步测试由 pytest-asyncio 驱动 (@pytest.mark.asyncio)。
"""

from datetime import datetime, timezone

import pytest


# 文档默认命名空间
NS = "http://schema.zhufucdev.com/practiso"


# ==================== 自定义 Markers ====================

def pytest_configure(config):
    """注册自定义 markers"""
    config.addinivalue_line("markers", "slow: 耗时较长的测试")


# ==================== 测试工具 ====================

def fixed_time(hour: int = 8) -> datetime:
    """固定的 UTC 时间，便于比较"""
    return datetime(2024, 5, 1, hour, 30, 15, 250000, tzinfo=timezone.utc)


def wrap_quiz(body: str, quiz_attrs: str = 'name="q" creation="2024-05-01T08:00:00Z"') -> bytes:
    """将 quiz 内容包装为完整文档"""
    return (
        f'<archive xmlns="{NS}" creation="2024-05-01T08:00:00Z">'
        f'<quiz {quiz_attrs}>{body}</quiz>'
        f'</archive>'
    ).encode('utf-8')


def wrap_frames(frames: str) -> bytes:
    """将帧元素包装为完整文档"""
    return wrap_quiz(f"<frames>{frames}</frames>")


# ==================== 模型 Fixtures ====================

@pytest.fixture
def simple_quiz():
    """
    "Simple Quiz": 一个文本帧 + 三个选项的选项帧，第三项为正确答案
    """
    from psarchive import Quiz, Text, Options, Option

    return Quiz(
        "Simple Quiz",
        creation_time=fixed_time(),
        frames=[
            Text("It's so sad that Steve Jobs died of ligma. What is ligma?"),
            Options("Ligma definitions", [
                Option(Text("A type of cancer")),
                Option(Text("A serious mental disorder")),
                Option(Text("Ligma balls"), is_key=True),
            ]),
        ],
    )


@pytest.fixture
def rich_quiz():
    """包含图片、嵌套选项、维度和修改时间的题目"""
    from psarchive import Quiz, Text, Image, Options, Option, Dimension

    return Quiz(
        "Rich <Quiz> & \"friends\"",
        creation_time=fixed_time(9),
        modification_time=fixed_time(10),
        frames=[
            Text("  leading and trailing whitespace  \n"),
            Image("figure.png", 640, 480, "A figure"),
            Image("plain.png", 10, 20),
            Options(None, [
                Option(Image("choice.png", 32, 32), priority=2),
                Option(
                    Options("nested", [
                        Option(Text("inner a"), is_key=True, priority=-1),
                        Option(Text("inner b")),
                    ]),
                    priority=1,
                ),
            ]),
        ],
        dimensions=[
            Dimension("algebra", 0.25),
            Dimension("geometry", 1),
            Dimension("history", 0),
        ],
    )


@pytest.fixture
def sample_resources() -> dict:
    """测试资源集"""
    return {
        "figure.png": bytes(range(256)) * 4,
        "choice.png": b"\x89PNG\r\n\x1a\n\x00\x00",
        "empty.bin": b"",
        "中文资源.txt": "这是中文内容测试".encode("utf-8"),
    }


@pytest.fixture
def archive_with_resources(rich_quiz, simple_quiz, sample_resources):
    """带资源的归档"""
    from psarchive import Archive, ResourceArchive

    return Archive(
        [simple_quiz, rich_quiz],
        creation_time=fixed_time(7),
        resources=ResourceArchive(sample_resources),
    )
