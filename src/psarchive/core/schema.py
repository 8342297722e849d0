#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
psarchive 格式常量

定义文档标签、属性名、命名空间和二进制分隔符。
"""

# ==================== 分隔符 ====================

# 文档区与资源区之间的分隔字节，同时用作资源名结束符
SENTINEL = b'\x00'

# 资源长度前缀: 有符号 32 位 (Big-Endian)
LENGTH_FORMAT = '>i'
MAX_RESOURCE_SIZE = 0x7FFFFFFF

# ==================== 命名空间 ====================

NAMESPACE = "http://schema.zhufucdev.com/practiso"

# ==================== 标签 ====================

ARCHIVE_TAG = "archive"
QUIZ_TAG = "quiz"
FRAMES_TAG = "frames"
TEXT_TAG = "text"
IMAGE_TAG = "image"
OPTIONS_TAG = "options"
ITEM_TAG = "item"
DIMENSION_TAG = "dimension"

# ==================== 属性 ====================

ATTR_NAME = "name"
ATTR_CREATION = "creation"
ATTR_MODIFICATION = "modification"
ATTR_SRC = "src"
ATTR_WIDTH = "width"
ATTR_HEIGHT = "height"
ATTR_ALT = "alt"
ATTR_PRIORITY = "priority"
ATTR_KEY = "key"

# key 属性仅在字面值为 "true" 时视为正确答案
KEY_TRUE = "true"
