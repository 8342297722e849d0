#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
ResourceArchive 测试

测试资源集合的各种来源、读取、移除与遍历语义。
"""

import asyncio
import io

import pytest

from psarchive import ResourceArchive
from psarchive.core.resources import make_producer


# ==================== 来源类型 ====================

class TestResourceSources:
    """put() 支持的资源来源"""

    @pytest.mark.parametrize("value", [
        b"abc", bytearray(b"abc"), memoryview(b"abc"),
    ])
    @pytest.mark.asyncio
    async def test_bytes_like(self, value):
        """已解析的字节"""
        resources = ResourceArchive()
        resources.put("r", value)
        assert await resources.get("r") == b"abc"

    @pytest.mark.asyncio
    async def test_sync_supplier(self):
        """同步生产函数"""
        resources = ResourceArchive({"r": lambda: b"supplied"})
        assert await resources.get("r") == b"supplied"

    @pytest.mark.asyncio
    async def test_async_supplier(self):
        """异步生产函数"""
        async def supplier():
            await asyncio.sleep(0)
            return b"async"

        resources = ResourceArchive({"r": supplier})
        assert await resources.get("r") == b"async"

    @pytest.mark.asyncio
    async def test_pending_awaitable_awaited_once(self):
        """待定结果只等待一次，重复读取返回同一内容"""
        async def pending():
            return b"pending"

        resources = ResourceArchive()
        resources.put("r", pending())
        assert await resources.get("r") == b"pending"
        assert await resources.get("r") == b"pending"

    @pytest.mark.asyncio
    async def test_stream(self):
        """可读流在读取时一次性读完"""
        stream = io.BytesIO(b"x" * 200_000)
        resources = ResourceArchive({"r": stream})
        assert await resources.get("r") == b"x" * 200_000

    def test_unsupported_type(self):
        """不支持的类型"""
        with pytest.raises(TypeError):
            make_producer(12345)


# ==================== 基本操作 ====================

class TestResourceOperations:
    """get / remove / size / keys"""

    @pytest.mark.asyncio
    async def test_get_missing(self):
        """不存在时返回 None"""
        assert await ResourceArchive().get("missing") is None

    def test_size_and_keys(self):
        """数量与键保持插入顺序"""
        resources = ResourceArchive({"b": b"1", "a": b"2"})
        resources.put("c", b"3")
        assert resources.size == 3
        assert len(resources) == 3
        assert list(resources.keys()) == ["b", "a", "c"]
        assert "a" in resources
        assert "z" not in resources

    @pytest.mark.asyncio
    async def test_put_replaces(self):
        """同名资源被替换"""
        resources = ResourceArchive({"r": b"old"})
        resources.put("r", b"new")
        assert resources.size == 1
        assert await resources.get("r") == b"new"

    @pytest.mark.asyncio
    async def test_remove_returns_unresolved_producer(self):
        """remove 返回未解析的生产者"""
        calls = []

        def supplier():
            calls.append(1)
            return b"lazy"

        resources = ResourceArchive({"r": supplier})
        producer = resources.remove("r")

        assert calls == []
        assert resources.size == 0
        assert await producer() == b"lazy"
        assert calls == [1]

    def test_remove_missing(self):
        """移除不存在的资源返回 None"""
        assert ResourceArchive().remove("missing") is None


# ==================== 遍历 ====================

class TestResourceIteration:
    """异步遍历"""

    @pytest.mark.asyncio
    async def test_iterates_in_order(self):
        """按插入顺序逐项解析"""
        resources = ResourceArchive({"one": b"1", "two": lambda: b"2"})
        collected = [(name, content) async for name, content in resources]
        assert collected == [("one", b"1"), ("two", b"2")]

    @pytest.mark.asyncio
    async def test_no_cache_between_passes(self):
        """多次遍历会重新调用生产者"""
        calls = []

        def supplier():
            calls.append(1)
            return b"data"

        resources = ResourceArchive({"r": supplier})
        await resources.to_dict()
        await resources.to_dict()
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_producer_error_propagates(self):
        """生产者异常原样抛出"""
        def broken():
            raise OSError("disk gone")

        resources = ResourceArchive({"r": broken})
        with pytest.raises(OSError, match="disk gone"):
            await resources.to_dict()

    def test_items_does_not_resolve(self):
        """items() 只返回生产者"""
        calls = []
        resources = ResourceArchive({"r": lambda: calls.append(1) or b""})
        names = [name for name, _ in resources.items()]
        assert names == ["r"]
        assert calls == []
