#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
二进制分帧编解码

字节流格式:
    <文档字节> 0x00 <资源表字节>

文档中不含 NUL，流中第一个 NUL 即为分界；没有 NUL 时整个流都是文档。

资源表由若干条记录顺序拼接，无计数前缀、无结束标记:
    <资源名 UTF-8> 0x00 <长度: i32 Big-Endian> <内容>
"""

import io
import logging
from typing import Dict, Iterable, Optional, Tuple

from .binary_io import BinaryReader, BinaryWriter
from .schema import SENTINEL, MAX_RESOURCE_SIZE
from ..exceptions import ArchiveParseError

logger = logging.getLogger(__name__)


def split_at_sentinel(chunk: bytes) -> Tuple[bytes, Optional[bytes]]:
    """
    在第一个 NUL 处拆分数据块

    Args:
        chunk: 文档阶段收到的数据块

    Returns:
        (NUL 之前的部分, NUL 之后的部分)；没有 NUL 时第二项为 None
    """
    index = chunk.find(SENTINEL)
    if index < 0:
        return chunk, None
    return chunk[:index], chunk[index + 1:]


# ==================== 编码 ====================

def write_record_header(writer: BinaryWriter, name: str, size: int) -> int:
    """
    写入资源记录头: 资源名、NUL、长度

    Returns:
        写入的字节数

    Raises:
        ValueError: 资源名包含 NUL 或内容超过 i32 上限
    """
    if size > MAX_RESOURCE_SIZE:
        raise ValueError(
            f"资源 '{name}' 过大: {size} 字节，上限 {MAX_RESOURCE_SIZE}"
        )
    start = writer.position
    writer.write_cstring(name)
    writer.write_i32(size)
    return writer.position - start


def write_record(writer: BinaryWriter, name: str, content: bytes) -> int:
    """写入单条资源记录，返回写入的字节数"""
    return write_record_header(writer, name, len(content)) + writer.write_bytes(content)


def encode_record_header(name: str, size: int) -> bytes:
    """编码资源记录头"""
    buffer = io.BytesIO()
    write_record_header(BinaryWriter(buffer), name, size)
    return buffer.getvalue()


def encode_record(name: str, content: bytes) -> bytes:
    """编码单条资源记录"""
    buffer = io.BytesIO()
    write_record(BinaryWriter(buffer), name, content)
    return buffer.getvalue()


def encode_resource_table(resources: Iterable[Tuple[str, bytes]]) -> bytes:
    """
    编码资源表

    Args:
        resources: 按顺序排列的 (资源名, 内容)

    Returns:
        资源表字节 (不含前导分隔符)
    """
    buffer = io.BytesIO()
    writer = BinaryWriter(buffer)
    for name, content in resources:
        write_record(writer, name, content)
    return buffer.getvalue()


# ==================== 解码 ====================

def decode_resource_table(buffer: bytes) -> Dict[str, bytes]:
    """
    解码资源表

    逐条读取直到缓冲区恰好耗尽；同名资源以后出现者为准。

    Args:
        buffer: 分隔符之后的全部字节

    Returns:
        按出现顺序排列的 {资源名: 内容}

    Raises:
        ArchiveParseError: 记录截断、长度为负或资源名不是合法 UTF-8
    """
    reader = BinaryReader(buffer)
    resources: Dict[str, bytes] = {}

    while not reader.at_end:
        record_start = reader.position
        try:
            raw_name = reader.read_cstring()
            size = reader.read_i32()
            if size < 0:
                raise ArchiveParseError(
                    f"资源记录长度为负: {size} (偏移 {record_start})"
                )
            content = reader.read_bytes(size)
        except EOFError as e:
            raise ArchiveParseError(
                f"资源记录截断 (偏移 {record_start})", e
            ) from e

        try:
            name = raw_name.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ArchiveParseError(
                f"资源名不是合法的 UTF-8 (偏移 {record_start})", e
            ) from e

        if name in resources:
            logger.warning(f"资源表中存在重名资源 '{name}'，保留最后一条")
        resources[name] = content

    logger.debug(f"资源表解码完成: {len(resources)} 条, {len(buffer)} 字节")
    return resources
