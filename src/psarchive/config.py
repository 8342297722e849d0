#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
解析器与编排器配置

均为不可变 dataclass，传入 None 时使用默认值。
"""

from dataclasses import dataclass

from .core.schema import NAMESPACE


# options 嵌套深度上限 (options → item → options ...)
DEFAULT_MAX_DEPTH = 32


@dataclass(frozen=True)
class ParserConfig:
    """
    Parser 配置

    Attributes:
        validate_namespace: 根元素声明命名空间时是否校验其值
        namespace: 期望的命名空间
        max_depth: options 帧最大嵌套层数，超出视为格式错误
        huge_tree: 透传给 lxml，解除其树深度与文本长度限制
    """
    validate_namespace: bool = True
    namespace: str = NAMESPACE
    max_depth: int = DEFAULT_MAX_DEPTH
    huge_tree: bool = False


@dataclass(frozen=True)
class ComposerConfig:
    """
    Composer 配置

    Attributes:
        pretty_print: 输出带缩进的文档 (缩进空白在解析时被忽略)
        xml_declaration: 是否输出 <?xml ...?> 声明
        namespace: 写入根元素的默认命名空间
    """
    pretty_print: bool = False
    xml_declaration: bool = False
    namespace: str = NAMESPACE
