#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
psarchive 文档层

提供 Archive 与 XML 元素树之间的双向映射。
"""

from .mapper import DocumentMapper
from .nodes import child_nodes, element_children, local_name, render

__all__ = [
    "DocumentMapper",
    "child_nodes",
    "element_children",
    "local_name",
    "render",
]
