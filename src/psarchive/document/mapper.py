#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
文档映射

Archive 与 XML 元素树之间的双向转换:
- to_tree(): 数据模型 → 元素树
- from_tree(): 元素树 → 数据模型 (逐层校验)

解析错误在逐层返回时由外层追加位置，最终得到从根到出错点的完整路径，
例如 <archive>/<quiz#0>/<frames>/1/<options>/<item#2>/<text>。
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from lxml import etree as ET

from .nodes import (
    check_xml_chars, element_children, local_name, namespace_of, qualified,
    single_text
)
from ..config import ComposerConfig, ParserConfig
from ..core.model import (
    Archive, Dimension, Image, Option, Options, Quiz, Text, AnyFrame
)
from ..core.schema import (
    ARCHIVE_TAG, QUIZ_TAG, FRAMES_TAG, ITEM_TAG, DIMENSION_TAG,
    ATTR_NAME, ATTR_CREATION, ATTR_MODIFICATION, ATTR_SRC, ATTR_WIDTH,
    ATTR_HEIGHT, ATTR_ALT, ATTR_PRIORITY, ATTR_KEY, KEY_TRUE
)
from ..exceptions import ArchiveParseError
from ..utils import (
    format_timestamp, parse_timestamp, format_intensity, parse_float,
    parse_int
)

logger = logging.getLogger(__name__)


def _tag(name: str, index: Optional[int] = None) -> str:
    """位置路径段: <name> 或 <name#index>"""
    if index is None:
        return f"<{name}>"
    return f"<{name}#{index}>"


class DocumentMapper:
    """
    文档映射器

    序列化使用 ComposerConfig，解析使用 ParserConfig。
    """

    def __init__(
        self,
        parser_config: Optional[ParserConfig] = None,
        composer_config: Optional[ComposerConfig] = None
    ):
        self._parser_config = parser_config or ParserConfig()
        self._composer_config = composer_config or ComposerConfig()
        self._namespace = self._composer_config.namespace or None

        self._frame_writers: Dict[type, Callable[[AnyFrame, ET._Element], None]] = {
            Text: self._write_text,
            Image: self._write_image,
            Options: self._write_options,
        }
        self._frame_parsers: Dict[str, Callable[[ET._Element, int], AnyFrame]] = {
            Text.TAG: self._parse_text,
            Image.TAG: self._parse_image,
            Options.TAG: self._parse_options,
        }

    # ==================== 序列化 ====================

    def _sub(self, parent: ET._Element, tag: str) -> ET._Element:
        return ET.SubElement(parent, qualified(self._namespace, tag))

    @staticmethod
    def _set(element: ET._Element, attr: str, value: str) -> None:
        """写入字符串属性，先校验字符合法性"""
        where = f"{_tag(local_name(element))} 的属性 {attr}"
        element.set(attr, check_xml_chars(value, where))

    def to_tree(self, archive: Archive) -> ET._Element:
        """
        将归档转换为元素树

        Args:
            archive: 归档

        Returns:
            根元素 <archive>
        """
        nsmap = {None: self._namespace} if self._namespace else None
        root = ET.Element(qualified(self._namespace, ARCHIVE_TAG), nsmap=nsmap)
        root.set(ATTR_CREATION, format_timestamp(archive.creation_time))
        for quiz in archive.content:
            self._write_quiz(quiz, root)
        return root

    def _write_quiz(self, quiz: Quiz, parent: ET._Element) -> None:
        element = self._sub(parent, QUIZ_TAG)
        self._set(element, ATTR_NAME, quiz.name)
        element.set(ATTR_CREATION, format_timestamp(quiz.creation_time))
        if quiz.modification_time is not None:
            element.set(ATTR_MODIFICATION, format_timestamp(quiz.modification_time))

        frames = self._sub(element, FRAMES_TAG)
        for frame in quiz.frames:
            self.write_frame(frame, frames)

        for dimension in quiz.dimensions:
            dim = self._sub(element, DIMENSION_TAG)
            self._set(dim, ATTR_NAME, dimension.name)
            dim.text = format_intensity(dimension.intensity)

    def write_frame(self, frame: AnyFrame, parent: ET._Element) -> None:
        """
        写入单个帧

        Raises:
            TypeError: 不是 Text / Image / Options
        """
        writer = self._frame_writers.get(type(frame))
        if writer is None:
            raise TypeError(f"未知的帧类型: {type(frame).__name__}")
        writer(frame, parent)

    def _write_text(self, frame: Text, parent: ET._Element) -> None:
        element = self._sub(parent, frame.TAG)
        element.text = check_xml_chars(frame.content, _tag(frame.TAG))

    def _write_image(self, frame: Image, parent: ET._Element) -> None:
        element = self._sub(parent, frame.TAG)
        self._set(element, ATTR_SRC, frame.filename)
        element.set(ATTR_WIDTH, str(frame.width))
        element.set(ATTR_HEIGHT, str(frame.height))
        if frame.alt_text is not None:
            self._set(element, ATTR_ALT, frame.alt_text)

    def _write_options(self, frame: Options, parent: ET._Element) -> None:
        element = self._sub(parent, frame.TAG)
        if frame.name is not None:
            self._set(element, ATTR_NAME, frame.name)
        for option in frame.content:
            item = self._sub(element, ITEM_TAG)
            item.set(ATTR_PRIORITY, str(option.priority))
            if option.is_key:
                item.set(ATTR_KEY, KEY_TRUE)
            self.write_frame(option.content, item)

    # ==================== 解析 ====================

    def from_tree(self, root: Optional[ET._Element]) -> Archive:
        """
        将元素树转换为归档 (不含资源)

        Args:
            root: 文档根元素

        Returns:
            Archive 实例，resources 为空

        Raises:
            ArchiveParseError: 任何结构或取值错误
        """
        if root is None or local_name(root) != ARCHIVE_TAG:
            raise ArchiveParseError(
                f"missing {_tag(ARCHIVE_TAG)} as document element"
            )

        config = self._parser_config
        namespace = namespace_of(root)
        if config.validate_namespace and namespace and namespace != config.namespace:
            raise ArchiveParseError(
                f"unexpected xml namespace: {namespace}", None, (_tag(ARCHIVE_TAG),)
            )

        try:
            if not root.get(ATTR_CREATION):
                raise ArchiveParseError(f"missing attribute {ATTR_CREATION}")
            creation_time = self._timestamp(root, ATTR_CREATION)
        except ArchiveParseError as e:
            raise e.located(_tag(ARCHIVE_TAG)) from e

        try:
            elements = element_children(root)
            quizzes = []
            for index, element in enumerate(elements):
                if local_name(element) != QUIZ_TAG:
                    raise ArchiveParseError(
                        f"unexpected element {_tag(local_name(element))}, "
                        f"only {_tag(QUIZ_TAG)} expected",
                        None,
                        (index,)
                    )
                quizzes.append(self._parse_quiz(element, index))
        except ArchiveParseError as e:
            raise e.located(_tag(ARCHIVE_TAG)) from e

        logger.debug(f"文档解析完成: {len(quizzes)} 个 quiz")
        return Archive(content=quizzes, creation_time=creation_time)

    @staticmethod
    def _timestamp(element: ET._Element, attr: str) -> Optional[datetime]:
        """读取时间戳属性，属性缺失时返回 None"""
        value = element.get(attr)
        if not value:
            return None
        try:
            return parse_timestamp(value)
        except ValueError as e:
            raise ArchiveParseError(f"unexpected {attr} time {value}", e) from e

    def _parse_quiz(self, element: ET._Element, index: int) -> Quiz:
        """解析 <quiz>，错误位置以 <quiz#index> 开头"""
        try:
            return self._parse_quiz_body(element)
        except ArchiveParseError as e:
            raise e.located(_tag(QUIZ_TAG, index)) from e

    def _parse_quiz_body(self, element: ET._Element) -> Quiz:
        name = element.get(ATTR_NAME)
        if name is None:
            raise ArchiveParseError(f"missing attribute {ATTR_NAME}")
        if not element.get(ATTR_CREATION):
            raise ArchiveParseError(f"missing attribute {ATTR_CREATION}")

        creation_time = self._timestamp(element, ATTR_CREATION)
        modification_time = self._timestamp(element, ATTR_MODIFICATION)

        frames_elements: List[ET._Element] = []
        dimension_elements: List[ET._Element] = []
        for index, child in enumerate(element_children(element)):
            tag = local_name(child)
            if tag == FRAMES_TAG:
                frames_elements.append(child)
            elif tag == DIMENSION_TAG:
                dimension_elements.append(child)
            else:
                raise ArchiveParseError(
                    f"unexpected element {_tag(tag)}", None, (index,)
                )

        if not frames_elements:
            raise ArchiveParseError(f"missing {_tag(FRAMES_TAG)}")
        if len(frames_elements) > 1:
            raise ArchiveParseError(f"too many {_tag(FRAMES_TAG)}")

        try:
            frame_elements = element_children(frames_elements[0])
        except ArchiveParseError as e:
            raise e.located(_tag(FRAMES_TAG)) from e

        frames = []
        for f_index, frame_element in enumerate(frame_elements):
            try:
                frames.append(self.parse_frame(frame_element))
            except ArchiveParseError as e:
                raise e.located(_tag(FRAMES_TAG), f_index) from e

        dimensions = []
        for d_index, dimension_element in enumerate(dimension_elements):
            try:
                dimensions.append(self.parse_dimension(dimension_element))
            except ArchiveParseError as e:
                raise e.located(_tag(DIMENSION_TAG, d_index)) from e

        return Quiz(
            name,
            creation_time=creation_time,
            modification_time=modification_time,
            frames=frames,
            dimensions=dimensions,
        )

    def parse_frame(self, element: ET._Element, depth: int = 0) -> AnyFrame:
        """
        按标签分派解析单个帧

        Args:
            element: 帧元素
            depth: 当前 options 嵌套层数

        Raises:
            ArchiveParseError: 未知帧类型或帧内容不合法
        """
        tag = local_name(element)
        parser = self._frame_parsers.get(tag)
        if parser is None:
            raise ArchiveParseError("unexpected frame type", None, (_tag(tag),))
        return parser(element, depth)

    def _parse_text(self, element: ET._Element, depth: int) -> Text:
        location = (_tag(Text.TAG),)
        if len(element) == 0 and not element.text:
            raise ArchiveParseError("unexpected empty text content", None, location)
        content = single_text(element)
        if content is None:
            raise ArchiveParseError("unexpected manifold tag content", None, location)
        return Text(content)

    def _parse_image(self, element: ET._Element, depth: int) -> Image:
        location = (_tag(Image.TAG),)
        width_str = element.get(ATTR_WIDTH)
        height_str = element.get(ATTR_HEIGHT)
        src = element.get(ATTR_SRC)
        if not width_str or not height_str:
            raise ArchiveParseError("unexpected image of unknown size", None, location)
        if not src:
            raise ArchiveParseError(
                "unexpected image of empty or no resource names", None, location
            )
        width = parse_int(width_str)
        height = parse_int(height_str)
        if width is None or height is None:
            raise ArchiveParseError(
                f"unexpected image size {width_str}x{height_str}", None, location
            )
        return Image(src, width, height, element.get(ATTR_ALT))

    def _parse_options(self, element: ET._Element, depth: int) -> Options:
        location = _tag(Options.TAG)
        max_depth = self._parser_config.max_depth
        if depth >= max_depth:
            raise ArchiveParseError(
                f"options nested deeper than {max_depth} levels", None, (location,)
            )

        try:
            items = element_children(element)
        except ArchiveParseError as e:
            raise e.located(location) from e

        options = []
        for index, item in enumerate(items):
            item_tag = local_name(item)
            if item_tag != ITEM_TAG:
                raise ArchiveParseError(
                    f"unexpected node, only {_tag(ITEM_TAG)} expected",
                    None,
                    (location, index, _tag(item_tag))
                )
            item_location = (location, _tag(ITEM_TAG, index))

            try:
                inner = element_children(item)
            except ArchiveParseError as e:
                raise e.located(*item_location) from e
            if not inner:
                raise ArchiveParseError("empty item", None, item_location)
            if len(inner) > 1:
                raise ArchiveParseError("manifold item content", None, item_location)

            priority_str = item.get(ATTR_PRIORITY)
            if not priority_str:
                raise ArchiveParseError(
                    f"missing attribute {ATTR_PRIORITY}", None, item_location
                )
            priority = parse_int(priority_str)
            if priority is None:
                raise ArchiveParseError(
                    f"unexpected priority value {priority_str}", None, item_location
                )
            is_key = item.get(ATTR_KEY) == KEY_TRUE

            try:
                content = self.parse_frame(inner[0], depth + 1)
            except ArchiveParseError as e:
                raise e.located(*item_location) from e

            options.append(Option(content, is_key=is_key, priority=priority))

        return Options(element.get(ATTR_NAME), options)

    def parse_dimension(self, element: ET._Element) -> Dimension:
        """
        解析 <dimension>

        越界强度以模型抛出的 ValueError 作为 cause。
        """
        name = element.get(ATTR_NAME)
        if not name:
            raise ArchiveParseError(f"missing attribute {ATTR_NAME}")
        if len(element) == 0 and not element.text:
            raise ArchiveParseError("unexpected dimension of empty intensity")
        content = single_text(element)
        if content is None:
            raise ArchiveParseError("unexpected manifold dimension")
        intensity = parse_float(content)
        if intensity is None:
            raise ArchiveParseError(f"unexpected intensity of {content.strip()}")
        try:
            return Dimension(name, intensity)
        except ValueError as e:
            raise ArchiveParseError(str(e), e) from e
