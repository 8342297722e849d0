#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
psarchive - 题目归档 (psarchive) 编解码库

归档由 XML 文档与其后以 NUL 分隔的二进制资源表组成。
"""

__version__ = "0.1.0"

# 异常类
from .exceptions import PsArchiveError, ArchiveParseError

# 配置
from .config import ParserConfig, ComposerConfig

# 数据模型
from .core import (
    Archive,
    Quiz,
    Frame,
    Text,
    Image,
    Options,
    Option,
    Dimension,
    ResourceArchive,
)

# 编解码
from .archive import (
    Parser,
    ReadState,
    Composer,
    parse_bytes,
    parse_stream,
    compose,
)

__all__ = [
    # 版本
    "__version__",
    # 异常
    "PsArchiveError",
    "ArchiveParseError",
    # 配置
    "ParserConfig",
    "ComposerConfig",
    # 数据模型
    "Archive",
    "Quiz",
    "Frame",
    "Text",
    "Image",
    "Options",
    "Option",
    "Dimension",
    "ResourceArchive",
    # 编解码
    "Parser",
    "ReadState",
    "Composer",
    "parse_bytes",
    "parse_stream",
    "compose",
]
