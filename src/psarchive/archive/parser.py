#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
流式归档解析器

以推送方式逐块接收字节，最后一次性产出完整的 Archive。
文档部分在到达时即送入 lxml 的增量解析器；
分隔符之后的资源部分整体缓存，结束时再解码资源表。
"""

import inspect
import logging
from enum import Enum
from typing import Any, AsyncIterator, List, Optional

from lxml import etree as ET

from ..config import ParserConfig
from ..core.framing import split_at_sentinel, decode_resource_table
from ..core.model import Archive
from ..core.resources import ResourceArchive
from ..document.mapper import DocumentMapper
from ..document.nodes import make_feed_parser
from ..exceptions import ArchiveParseError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


class ReadState(Enum):
    """读取阶段"""
    DOCUMENT = "document"
    RESOURCES = "resources"


class Parser:
    """
    流式归档解析器

    状态机只有两个状态:
    - DOCUMENT: 每个数据块在第一个 NUL 处拆分，之前的部分属于文档；
      找到 NUL 后转入 RESOURCES，且不再返回
    - RESOURCES: 数据块原样追加到资源缓冲区

    Example:
        >>> parser = Parser()
        >>> for chunk in chunks:
        ...     parser.write(chunk)
        >>> archive = parser.result()
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        """
        初始化解析器

        Args:
            config: 解析配置，None 时使用默认配置
        """
        self._config = config or ParserConfig()
        self._mapper = DocumentMapper(parser_config=self._config)
        self._xml = make_feed_parser(self._config)

        # 内部状态
        self._state = ReadState.DOCUMENT
        self._document_size = 0
        self._resource_parts: List[bytes] = []
        self._finished = False
        self._result: Optional[Archive] = None

    @property
    def state(self) -> ReadState:
        return self._state

    @property
    def document_size(self) -> int:
        """已接收的文档字节数"""
        return self._document_size

    @property
    def resource_size(self) -> int:
        """已缓存的资源区字节数"""
        return sum(len(part) for part in self._resource_parts)

    def write(self, chunk: bytes) -> int:
        """
        写入一个数据块

        Args:
            chunk: 按到达顺序传入的字节

        Returns:
            接收的字节数

        Raises:
            ArchiveParseError: 文档部分不是合法的 XML
            RuntimeError: 已调用过 result()
        """
        if self._finished:
            raise RuntimeError("解析器已结束，不能继续写入")
        chunk = bytes(chunk)

        if self._state is ReadState.DOCUMENT:
            document, rest = split_at_sentinel(chunk)
            self._feed(document)
            if rest is not None:
                self._state = ReadState.RESOURCES
                self._resource_parts.append(rest)
                logger.debug(f"找到分隔符，文档共 {self._document_size} 字节")
        else:
            self._resource_parts.append(chunk)

        return len(chunk)

    def _feed(self, data: bytes) -> None:
        if not data:
            return
        self._document_size += len(data)
        try:
            self._xml.feed(data)
        except ET.XMLSyntaxError as e:
            raise ArchiveParseError(f"malformed document: {e}", e) from e

    def _close_document(self) -> Optional[ET._Element]:
        if self._document_size == 0:
            return None
        try:
            return self._xml.close()
        except ET.XMLSyntaxError as e:
            raise ArchiveParseError(f"malformed document: {e}", e) from e

    def result(self) -> Archive:
        """
        结束输入并产出归档

        重复调用返回同一个 Archive。

        Raises:
            ArchiveParseError: 文档或资源表不合法
            RuntimeError: 之前的 result() 已失败
        """
        if self._result is not None:
            return self._result
        if self._finished:
            raise RuntimeError("解析器已失败，无法再次产出结果")
        self._finished = True

        root = self._close_document()
        archive = self._mapper.from_tree(root)

        resources = decode_resource_table(b"".join(self._resource_parts))
        self._resource_parts = []
        archive.resources = ResourceArchive(resources)

        self._result = archive
        return archive


# ==================== 便捷入口 ====================

def parse_bytes(data: bytes, config: Optional[ParserConfig] = None) -> Archive:
    """解析内存中的完整归档字节"""
    parser = Parser(config)
    parser.write(data)
    return parser.result()


async def _iter_chunks(source: Any, chunk_size: int) -> AsyncIterator[bytes]:
    """将异步迭代器、同步迭代器或文件对象统一为异步块序列"""
    if isinstance(source, (bytes, bytearray, memoryview)):
        yield bytes(source)
    elif hasattr(source, "__aiter__"):
        async for chunk in source:
            yield chunk
    elif hasattr(source, "read"):
        while True:
            chunk = source.read(chunk_size)
            if inspect.isawaitable(chunk):
                chunk = await chunk
            if not chunk:
                break
            yield chunk
    else:
        for chunk in source:
            yield chunk


async def _release(source: Any) -> None:
    """尽力释放输入源 (aclose / close)"""
    for method_name in ("aclose", "close"):
        method = getattr(source, method_name, None)
        if not callable(method):
            continue
        try:
            result = method()
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.warning(f"释放输入源失败: {e}")
        return


async def parse_stream(
    source: Any,
    config: Optional[ParserConfig] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Archive:
    """
    从字节流解析归档

    解析失败或被取消时尽力释放输入源，然后继续抛出原异常；
    不提供部分结果。

    Args:
        source: 异步可迭代对象、同步可迭代对象或可读二进制文件对象
        config: 解析配置
        chunk_size: 从文件对象读取时的分块大小

    Returns:
        完整的 Archive
    """
    parser = Parser(config)
    try:
        async for chunk in _iter_chunks(source, chunk_size):
            parser.write(chunk)
        return parser.result()
    except BaseException:
        await _release(source)
        raise
