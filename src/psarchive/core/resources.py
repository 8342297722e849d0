#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
资源集合

按名称管理二进制资源。内容以延迟生产者 (异步可调用对象) 的形式保存，
仅在读取或遍历时才解析为字节。
"""

import inspect
from typing import (
    Any, AsyncIterator, Awaitable, Callable, Dict, Iterator, KeysView,
    Mapping, Optional, Tuple, Union
)

from ..utils import read_all


# 延迟生产者: 无参异步函数，返回资源字节
Producer = Callable[[], Awaitable[bytes]]

ResourceSource = Union[
    bytes, bytearray, memoryview,
    Callable[[], Any],
    Awaitable[bytes],
    Any,  # 可读二进制流
]


def _is_bytes_like(value: Any) -> bool:
    return isinstance(value, (bytes, bytearray, memoryview))


def make_producer(value: ResourceSource) -> Producer:
    """
    将资源来源转换为延迟生产者

    支持:
    - bytes / bytearray / memoryview: 已解析的内容
    - 无参可调用对象: 返回 bytes 或 bytes 的 awaitable，每次读取都会调用
    - awaitable: 待定的解析结果，只等待一次
    - 可读流 (带 read 方法): 读取时一次性读完

    Raises:
        TypeError: 不支持的类型
    """
    if _is_bytes_like(value):
        data = bytes(value)

        async def produce_bytes() -> bytes:
            return data
        return produce_bytes

    if inspect.isawaitable(value):
        pending = value
        resolved = []

        async def produce_pending() -> bytes:
            if not resolved:
                resolved.append(bytes(await pending))
            return resolved[0]
        return produce_pending

    if callable(value):
        supplier = value

        async def produce_supplied() -> bytes:
            result = supplier()
            if inspect.isawaitable(result):
                result = await result
            return bytes(result)
        return produce_supplied

    if hasattr(value, "read"):
        stream = value

        async def produce_stream() -> bytes:
            return await read_all(stream)
        return produce_stream

    raise TypeError(f"不支持的资源类型: {type(value).__name__}")


class ResourceArchive:
    """
    资源集合

    名称唯一，保持插入顺序。集合持有生产者；
    调用方获得解析后的字节后即拥有该字节。
    解析结果不在多次遍历之间缓存。
    """

    def __init__(self, source: Optional[Mapping[str, ResourceSource]] = None):
        """
        初始化资源集合

        Args:
            source: 资源名到资源来源的映射
        """
        self._source: Dict[str, Producer] = {}
        if source:
            for name, value in source.items():
                self.put(name, value)

    def put(self, name: str, value: ResourceSource) -> None:
        """
        添加或替换资源

        Args:
            name: 资源名
            value: 资源来源，见 make_producer()
        """
        self._source[name] = make_producer(value)

    async def get(self, name: str) -> Optional[bytes]:
        """
        按名称读取资源内容

        Returns:
            资源字节，不存在时返回 None
        """
        producer = self._source.get(name)
        if producer is None:
            return None
        return await producer()

    def remove(self, name: str) -> Optional[Producer]:
        """
        移除资源

        Returns:
            被移除的生产者 (未解析)，不存在时返回 None
        """
        return self._source.pop(name, None)

    @property
    def size(self) -> int:
        """资源数量"""
        return len(self._source)

    def keys(self) -> KeysView[str]:
        """所有资源名"""
        return self._source.keys()

    def items(self) -> Iterator[Tuple[str, Producer]]:
        """迭代 (资源名, 生产者)，不解析内容"""
        return iter(list(self._source.items()))

    async def to_dict(self) -> Dict[str, bytes]:
        """解析全部资源"""
        return {name: content async for name, content in self}

    def __len__(self) -> int:
        return len(self._source)

    def __contains__(self, name: object) -> bool:
        return name in self._source

    async def __aiter__(self) -> AsyncIterator[Tuple[str, bytes]]:
        """按插入顺序迭代 (资源名, 内容)，逐项按需解析"""
        for name, producer in list(self._source.items()):
            yield name, await producer()

    def __repr__(self) -> str:
        return f"ResourceArchive({list(self._source)!r})"
