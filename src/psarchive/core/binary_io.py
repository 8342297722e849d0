#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
二进制 I/O 封装

提供 BinaryWriter 和 BinaryReader 类，封装资源区的底层读写，
使上层模块不需要直接处理游标和 struct 细节。
资源区整数均为 Big-Endian。
"""

import struct
from typing import BinaryIO, Tuple, Any

from .schema import SENTINEL, LENGTH_FORMAT


class BinaryWriter:
    """
    二进制写入器

    封装写操作，提供类型化的写入方法。
    """

    def __init__(self, file: BinaryIO):
        """
        初始化写入器

        Args:
            file: 可写的二进制文件对象 (如 io.BytesIO)
        """
        self._file = file
        self._position = 0

    @property
    def position(self) -> int:
        """已写入的字节数"""
        return self._position

    # ==================== 原始写入 ====================

    def write_bytes(self, data: bytes) -> int:
        """
        写入原始字节

        Returns:
            写入的字节数
        """
        self._file.write(data)
        self._position += len(data)
        return len(data)

    def write_struct(self, fmt: str, *values: Any) -> int:
        """按 struct 格式写入"""
        return self.write_bytes(struct.pack(fmt, *values))

    # ==================== 类型化写入 ====================

    def write_i32(self, value: int) -> int:
        """写入有符号 32 位整数 (Big-Endian)"""
        return self.write_struct(LENGTH_FORMAT, value)

    # ==================== 字符串写入 ====================

    def write_cstring(self, s: str) -> int:
        """
        写入 NUL 结尾字符串

        格式: [UTF-8 字节][0x00]

        Raises:
            ValueError: 字符串包含 NUL
        """
        encoded = s.encode('utf-8')
        if SENTINEL in encoded:
            raise ValueError(f"字符串不能包含 NUL: {s!r}")
        return self.write_bytes(encoded) + self.write_bytes(SENTINEL)


class BinaryReader:
    """
    二进制读取器

    在内存缓冲区上按游标读取，提供类型化的读取方法。
    越界读取抛出 EOFError。
    """

    def __init__(self, buffer: bytes):
        """
        初始化读取器

        Args:
            buffer: 完整的字节缓冲区
        """
        self._buffer = bytes(buffer)
        self._position = 0

    @property
    def position(self) -> int:
        """当前读取位置"""
        return self._position

    @property
    def remaining(self) -> int:
        """剩余字节数"""
        return len(self._buffer) - self._position

    @property
    def at_end(self) -> bool:
        """是否已读到缓冲区末尾"""
        return self._position >= len(self._buffer)

    # ==================== 原始读取 ====================

    def read_bytes(self, size: int) -> bytes:
        """
        读取指定字节数

        Raises:
            EOFError: 剩余字节不足
        """
        if size < 0 or size > self.remaining:
            raise EOFError(
                f"缓冲区结束: 期望读取 {size} 字节，实际只有 {self.remaining} 字节"
            )
        data = self._buffer[self._position:self._position + size]
        self._position += size
        return data

    def read_struct(self, fmt: str) -> Tuple[Any, ...]:
        """按 struct 格式读取"""
        return struct.unpack(fmt, self.read_bytes(struct.calcsize(fmt)))

    # ==================== 类型化读取 ====================

    def read_i32(self) -> int:
        """读取有符号 32 位整数 (Big-Endian)"""
        return self.read_struct(LENGTH_FORMAT)[0]

    # ==================== 字符串读取 ====================

    def read_cstring(self) -> bytes:
        """
        读取 NUL 结尾的字节串 (不含 NUL)

        Raises:
            EOFError: 找不到结束符
        """
        end = self._buffer.find(SENTINEL, self._position)
        if end < 0:
            raise EOFError(f"缓冲区结束: 位置 {self._position} 之后没有 NUL 结束符")
        data = self._buffer[self._position:end]
        self._position = end + 1
        return data
