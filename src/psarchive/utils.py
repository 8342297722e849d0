#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
psarchive 工具函数

提供时间戳与数值的文本转换、流读取等通用功能。
"""

import inspect
import math
import re
from datetime import datetime, timezone
from typing import Any, Optional


# ISO-8601 时间戳: 小数秒位数不限；时区为 Z、±HH、±HHMM 或 ±HH:MM
_TIMESTAMP = re.compile(
    r'(?P<base>\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(?::\d{2})?)'
    r'(?:\.(?P<fraction>\d+))?'
    r'(?P<offset>[Zz]|[+-]\d{2}(?::?\d{2})?)?',
    re.ASCII
)

# 十进制整数: 可选符号 + ASCII 数字，不允许空白与下划线
_INTEGER = re.compile(r'[+-]?[0-9]+')


def now() -> datetime:
    """当前 UTC 时间 (带时区)"""
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """
    补全时区信息

    无时区的 datetime 视为 UTC。

    Args:
        value: 原始时间

    Returns:
        带时区的时间
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def format_timestamp(value: datetime) -> str:
    """
    格式化为 ISO-8601 字符串

    统一转换为 UTC，以 Z 结尾；小数秒为 0 时省略。

    Examples:
        >>> format_timestamp(datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc))
        '2024-05-01T08:30:00Z'
    """
    text = ensure_aware(value).astimezone(timezone.utc).isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def parse_timestamp(text: str) -> datetime:
    """
    解析 ISO-8601 字符串

    接受 Z 后缀与 ±HHMM 时区；小数秒超过微秒精度时截断。
    无时区时视为 UTC。

    Examples:
        >>> parse_timestamp("2024-05-01T08:30:00.123456789Z").microsecond
        123456

    Raises:
        ValueError: 无法解析
    """
    match = _TIMESTAMP.fullmatch(text.strip())
    if match is None:
        raise ValueError(f"无法解析的时间戳: {text!r}")

    normalized = match.group('base')
    fraction = match.group('fraction')
    if fraction:
        normalized += '.' + fraction[:6].ljust(6, '0')
    offset = match.group('offset')
    if offset and offset not in ('Z', 'z'):
        digits = offset[1:].replace(':', '')
        normalized += f"{offset[0]}{digits[:2]}:{digits[2:] or '00'}"
    return ensure_aware(datetime.fromisoformat(normalized))


def format_intensity(value: float) -> str:
    """
    格式化强度值

    整数值不带小数部分，其余使用可往返的最短表示。

    Examples:
        >>> format_intensity(1.0)
        '1'
        >>> format_intensity(0.25)
        '0.25'
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def parse_float(text: str) -> Optional[float]:
    """解析浮点数，失败或 NaN 时返回 None"""
    try:
        value = float(text.strip())
    except ValueError:
        return None
    if math.isnan(value):
        return None
    return value


def parse_int(text: str) -> Optional[int]:
    """解析十进制整数 (不允许空白与下划线)，失败时返回 None"""
    if _INTEGER.fullmatch(text) is None:
        return None
    return int(text)


async def read_all(stream: Any, chunk_size: int = 64 * 1024) -> bytes:
    """
    读取流中全部剩余数据

    支持同步文件对象 (read() 返回 bytes) 和异步流 (read() 返回 awaitable)。

    Args:
        stream: 可读二进制流
        chunk_size: 分块大小，默认 64KB

    Returns:
        读取到的全部字节
    """
    parts = []
    while True:
        chunk = stream.read(chunk_size)
        if inspect.isawaitable(chunk):
            chunk = await chunk
        if not chunk:
            break
        parts.append(bytes(chunk))
    return b"".join(parts)
