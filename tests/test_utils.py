#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
工具函数测试
"""

import io
from datetime import datetime, timedelta, timezone

import pytest

from psarchive.utils import (
    ensure_aware,
    format_timestamp,
    parse_timestamp,
    format_intensity,
    parse_float,
    parse_int,
    read_all,
)

from conftest import fixed_time


class TestTimestamp:
    """时间戳转换"""

    def test_format_utc(self):
        """UTC 时间以 Z 结尾"""
        assert format_timestamp(fixed_time()) == "2024-05-01T08:30:15.250000Z"

    def test_format_whole_seconds(self):
        """整秒不输出小数"""
        value = datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)
        assert format_timestamp(value) == "2024-05-01T08:30:00Z"

    def test_format_converts_offset(self):
        """非 UTC 时区转换为 UTC"""
        value = datetime(2024, 5, 1, 16, 30, tzinfo=timezone(timedelta(hours=8)))
        assert format_timestamp(value) == "2024-05-01T08:30:00Z"

    def test_format_naive_as_utc(self):
        """无时区视为 UTC"""
        assert format_timestamp(datetime(2024, 5, 1)) == "2024-05-01T00:00:00Z"

    @pytest.mark.parametrize("text", [
        "2024-05-01T08:30:15.250000Z",
        "2024-05-01T08:30:15.250000+00:00",
        "2024-05-01T16:30:15.250000+08:00",
        " 2024-05-01T08:30:15.250000z ",
        "2024-05-01T08:30:15.25Z",
        "2024-05-01T08:30:15.250000789Z",
        "2024-05-01T08:30:15.250+0000",
        "2024-05-01T10:30:15.25+02",
        "2024-05-01 08:30:15.250000Z",
    ])
    def test_parse(self, text):
        """多种写法得到同一时刻"""
        assert parse_timestamp(text) == fixed_time()

    def test_parse_naive(self):
        """无时区文本视为 UTC"""
        assert parse_timestamp("2024-05-01T08:30:00").tzinfo is not None

    @pytest.mark.parametrize("text", [
        "", "yesterday", "2024-13-01T00:00:00Z", "2024-05-01T08:30:00.Z",
        "2024-05-01T08:30:00+8", "2024-05-01T08:30:00Zjunk",
    ])
    def test_parse_invalid(self, text):
        """无法解析时抛出 ValueError"""
        with pytest.raises(ValueError):
            parse_timestamp(text)

    def test_ensure_aware_keeps_offset(self):
        """已有时区的时间不变"""
        tz = timezone(timedelta(hours=-5))
        value = datetime(2024, 1, 1, tzinfo=tz)
        assert ensure_aware(value).tzinfo is tz


class TestNumbers:
    """数值转换"""

    @pytest.mark.parametrize("value,expected", [
        (1.0, "1"),
        (0.0, "0"),
        (0.25, "0.25"),
        (0.1, "0.1"),
        (1, "1"),
    ])
    def test_format_intensity(self, value, expected):
        assert format_intensity(value) == expected

    @pytest.mark.parametrize("text,expected", [
        ("0.5", 0.5),
        (" 1 ", 1.0),
        ("1e-3", 0.001),
        ("abc", None),
        ("", None),
        ("nan", None),
    ])
    def test_parse_float(self, text, expected):
        assert parse_float(text) == expected

    @pytest.mark.parametrize("text,expected", [
        ("12", 12),
        ("-1", -1),
        (" 3 ", None),
        ("1_0", None),
        ("+7", 7),
        ("\u0661\u0662", None),
        ("1.5", None),
        ("0x10", None),
        ("", None),
    ])
    def test_parse_int(self, text, expected):
        assert parse_int(text) == expected


class TestReadAll:
    """read_all 测试"""

    @pytest.mark.asyncio
    async def test_sync_stream(self):
        """同步文件对象"""
        data = bytes(range(256)) * 10
        assert await read_all(io.BytesIO(data), chunk_size=100) == data

    @pytest.mark.asyncio
    async def test_async_stream(self):
        """read() 返回 awaitable 的流"""
        class AsyncStream:
            def __init__(self, data):
                self._buffer = io.BytesIO(data)

            async def read(self, size):
                return self._buffer.read(size)

        assert await read_all(AsyncStream(b"hello world"), chunk_size=3) == b"hello world"
