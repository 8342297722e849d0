#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
通用文档节点工具

lxml 以 text / tail 表示文本，这里将其还原为有序的子节点序列:
每个子节点要么是元素，要么是文本 (str)。
注释与处理指令在读取元素列表时被忽略。
"""

import re
from typing import List, Optional, Union

from lxml import etree as ET

from ..config import ComposerConfig, ParserConfig
from ..exceptions import ArchiveParseError


Node = Union[str, ET._Element]

# XML 1.0 Char 产生式之外的字符
_ILLEGAL_XML_CHAR = re.compile(
    '[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]'
)


# ==================== 节点判定 ====================

def is_element(node: Node) -> bool:
    """是否为普通元素 (排除注释、处理指令、实体)"""
    return isinstance(node, ET._Element) and isinstance(node.tag, str)


def is_ignorable(node: Node) -> bool:
    """是否为注释或处理指令"""
    return isinstance(node, (ET._Comment, ET._ProcessingInstruction))


def local_name(element: ET._Element) -> str:
    """不含命名空间的标签名"""
    return ET.QName(element).localname


def namespace_of(element: ET._Element) -> Optional[str]:
    """元素的命名空间，未声明时为 None"""
    return ET.QName(element).namespace


def qualified(namespace: Optional[str], tag: str) -> str:
    """构造 lxml 的 {namespace}tag 形式"""
    if namespace:
        return f"{{{namespace}}}{tag}"
    return tag


# ==================== 子节点读取 ====================

def child_nodes(element: ET._Element) -> List[Node]:
    """
    按文档顺序列出子节点

    Args:
        element: 父元素

    Returns:
        元素与文本交替的列表，文本以 str 表示
    """
    nodes: List[Node] = []
    if element.text:
        nodes.append(element.text)
    for child in element:
        nodes.append(child)
        if child.tail:
            nodes.append(child.tail)
    return nodes


def element_children(element: ET._Element) -> List[ET._Element]:
    """
    读取子元素列表

    纯空白文本被跳过，注释与处理指令被忽略；
    其他文本或节点视为结构错误，位置为其在子节点中的序号。

    Raises:
        ArchiveParseError: 出现非空白文本或未知节点
    """
    elements = []
    for index, node in enumerate(child_nodes(element)):
        if isinstance(node, str):
            if node.strip():
                raise ArchiveParseError(
                    f'unexpected text "{node.strip()}"', None, (index,)
                )
        elif is_element(node):
            elements.append(node)
        elif not is_ignorable(node):
            raise ArchiveParseError(
                f"unexpected node {type(node).__name__}", None, (index,)
            )
    return elements


def single_text(element: ET._Element) -> Optional[str]:
    """
    读取唯一的文本子节点

    Returns:
        文本内容；没有子节点、有多个子节点或子节点不是文本时返回 None
    """
    nodes = [node for node in child_nodes(element) if not is_ignorable(node)]
    if len(nodes) != 1 or not isinstance(nodes[0], str):
        return None
    return nodes[0]


# ==================== 写入 ====================

def check_xml_chars(value: str, where: str) -> str:
    """
    校验字符串能否写入 XML 文档

    Args:
        value: 文本或属性值
        where: 出错时用于描述位置，如 "<text>"

    Returns:
        原字符串

    Raises:
        ValueError: 含有 XML 不允许的字符 (如 \\x00、\\x07)
    """
    match = _ILLEGAL_XML_CHAR.search(value)
    if match:
        raise ValueError(
            f"{where} 含有 XML 不允许的字符 {match.group()!r} (位置 {match.start()})"
        )
    return value


# ==================== 解析与渲染 ====================

def make_feed_parser(config: ParserConfig) -> ET.XMLParser:
    """
    创建可增量 feed 的 XML 解析器

    不解析外部实体、不访问网络，编码固定为 UTF-8。
    """
    return ET.XMLParser(
        encoding='utf-8',
        resolve_entities=False,
        no_network=True,
        huge_tree=config.huge_tree,
    )


def render(root: ET._Element, config: ComposerConfig) -> bytes:
    """
    渲染为 UTF-8 文档字节

    文本与属性值中的特殊字符由 lxml 转义。
    """
    return ET.tostring(
        root,
        encoding='utf-8',
        xml_declaration=config.xml_declaration,
        pretty_print=config.pretty_print,
    )
