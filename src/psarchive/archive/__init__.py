#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
psarchive 编解码入口

提供归档的流式解析与序列化。
"""

from .composer import Composer, compose
from .parser import Parser, ReadState, parse_bytes, parse_stream

__all__ = [
    "Composer",
    "compose",
    "Parser",
    "ReadState",
    "parse_bytes",
    "parse_stream",
]
