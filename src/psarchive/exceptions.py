#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
psarchive 异常定义

所有异常均继承自 PsArchiveError，便于统一捕获。
"""

from typing import Iterable, Optional, Tuple


class PsArchiveError(Exception):
    """psarchive 基础异常"""
    pass


class ArchiveParseError(PsArchiveError):
    """
    归档解析异常

    所有格式校验失败 (缺失属性、节点类型/数量错误、越界值、未知标签、
    命名空间不匹配、二进制分帧截断) 均抛出此异常。

    location 为从文档根到出错位置的路径段，越靠后越具体。
    异常在嵌套解析中逐层向外传播时，由外层调用方通过 located()
    在前部追加所在上下文。
    """
    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        location: Iterable[object] = ()
    ):
        self.message = message
        self.cause = cause
        self.location: Tuple[str, ...] = tuple(str(seg) for seg in location)
        if self.location:
            super().__init__(f"{message} at {'/'.join(self.location)}")
        else:
            super().__init__(message)

    def located(self, *segments: object) -> 'ArchiveParseError':
        """
        返回在路径前部追加 segments 的新异常

        消息与 cause 保持不变。

        Args:
            *segments: 外层上下文路径段 (如 "<archive>", "<quiz#0>", 索引)

        Returns:
            新的 ArchiveParseError 实例
        """
        return ArchiveParseError(
            self.message,
            self.cause,
            tuple(segments) + self.location
        )
