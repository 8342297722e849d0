#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
psarchive 核心模块

提供数据模型、资源集合、二进制 I/O 封装和分帧编解码。
"""

from .binary_io import BinaryReader, BinaryWriter
from .resources import ResourceArchive, make_producer
from .model import (
    Frame, Text, Image, Options, Option, Dimension, Quiz, Archive,
    AnyFrame
)
from .framing import (
    split_at_sentinel, encode_record, encode_resource_table,
    decode_resource_table
)

__all__ = [
    "BinaryReader",
    "BinaryWriter",
    "ResourceArchive",
    "make_producer",
    # 数据模型
    "Frame",
    "Text",
    "Image",
    "Options",
    "Option",
    "Dimension",
    "Quiz",
    "Archive",
    "AnyFrame",
    # 分帧
    "split_at_sentinel",
    "encode_record",
    "encode_resource_table",
    "decode_resource_table",
]
