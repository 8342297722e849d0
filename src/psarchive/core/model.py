#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
psarchive 数据模型

定义 Archive、Quiz、Frame (Text / Image / Options)、Option、Dimension。
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, List, Optional, Union

from .resources import ResourceArchive
from .schema import TEXT_TAG, IMAGE_TAG, OPTIONS_TAG
from ..utils import now, ensure_aware


# ==================== Frame ====================

class Frame:
    """
    帧基类

    帧类型集合由格式固定: Text、Image、Options。
    TAG 为对应的文档标签，用于序列化与解析时分派。
    每种帧都提供 name (显示名)，可能为 None。
    """
    TAG: ClassVar[str] = ""


@dataclass
class Text(Frame):
    """纯文本帧"""
    TAG: ClassVar[str] = TEXT_TAG

    content: str

    @property
    def name(self) -> Optional[str]:
        return None


@dataclass
class Image(Frame):
    """
    图片帧

    filename 引用 ResourceArchive 中的资源名。
    width / height 为 -1 表示未知，但序列化形式中二者必须存在。
    """
    TAG: ClassVar[str] = IMAGE_TAG

    filename: str
    width: int = -1
    height: int = -1
    alt_text: Optional[str] = None

    @property
    def name(self) -> Optional[str]:
        return self.alt_text


@dataclass
class Option:
    """
    选项

    content 可以是任意帧，包括嵌套的 Options。
    priority 用于排序/加权，不要求唯一。
    """
    content: 'AnyFrame'
    is_key: bool = False
    priority: int = 0


@dataclass
class Options(Frame):
    """选项帧"""
    TAG: ClassVar[str] = OPTIONS_TAG

    name: Optional[str] = None
    content: List[Option] = field(default_factory=list)


AnyFrame = Union[Text, Image, Options]


# ==================== Dimension ====================

@dataclass
class Dimension:
    """
    维度标签

    intensity 必须位于闭区间 [0, 1]，否则构造时立即抛出 ValueError。
    """
    name: str
    intensity: float = 1.0

    def __post_init__(self):
        if math.isnan(self.intensity) or not 0 <= self.intensity <= 1:
            raise ValueError(
                f"an intensity of {self.intensity} is out of bound"
            )


# ==================== Quiz ====================

@dataclass
class Quiz:
    """
    题目

    frames 的顺序即呈现顺序。
    """
    name: str
    creation_time: datetime = field(default_factory=now)
    modification_time: Optional[datetime] = None
    frames: List[AnyFrame] = field(default_factory=list)
    dimensions: List[Dimension] = field(default_factory=list)

    def __post_init__(self):
        self.creation_time = ensure_aware(self.creation_time)
        if self.modification_time is not None:
            self.modification_time = ensure_aware(self.modification_time)


# ==================== Archive ====================

@dataclass
class Archive:
    """
    归档

    相等比较仅涉及 content 与 creation_time；
    resources 的内容需异步解析，应单独比较。
    """
    content: List[Quiz] = field(default_factory=list)
    creation_time: datetime = field(default_factory=now)
    resources: ResourceArchive = field(
        default_factory=ResourceArchive, compare=False
    )

    def __post_init__(self):
        self.creation_time = ensure_aware(self.creation_time)
