#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
归档编排器

将 Archive 序列化为字节流: 先输出文档，资源非空时再输出分隔符与资源表。
"""

import logging
from typing import AsyncIterator, BinaryIO, Optional

from ..config import ComposerConfig
from ..core.binary_io import BinaryWriter
from ..core.framing import encode_record_header
from ..core.model import Archive
from ..core.schema import SENTINEL
from ..document.mapper import DocumentMapper
from ..document.nodes import render

logger = logging.getLogger(__name__)


class Composer:
    """
    归档编排器

    输出为单次、按需拉取的异步字节块序列。
    资源在轮到它时才解析，生产者抛出的异常原样向上传播。
    """

    def __init__(self, archive: Archive, config: Optional[ComposerConfig] = None):
        """
        初始化编排器

        Args:
            archive: 要序列化的归档
            config: 输出配置，None 时使用默认配置
        """
        self._archive = archive
        self._config = config or ComposerConfig()
        self._mapper = DocumentMapper(composer_config=self._config)

    @property
    def archive(self) -> Archive:
        return self._archive

    def document(self) -> bytes:
        """
        序列化文档部分 (UTF-8)

        Raises:
            ValueError: 文本或属性值含有 XML 不允许的字符 (如 \\x07)，
                消息中指明所在元素
            TypeError: 帧不是 Text / Image / Options
        """
        return render(self._mapper.to_tree(self._archive), self._config)

    async def source(self) -> AsyncIterator[bytes]:
        """
        逐块产出归档字节

        资源集合为空时不输出分隔符，也不输出资源区。

        Yields:
            文档、分隔符、每条资源的记录头与内容
        """
        document = self.document()
        yield document

        resources = self._archive.resources
        if len(resources) == 0:
            logger.debug(f"编排完成: 文档 {len(document)} 字节，无资源")
            return

        yield SENTINEL
        for name, producer in resources.items():
            content = await producer()
            yield encode_record_header(name, len(content))
            yield content
        logger.debug(f"编排完成: 文档 {len(document)} 字节，资源 {len(resources)} 条")

    async def compose(self) -> bytes:
        """产出完整的归档字节"""
        return b"".join([chunk async for chunk in self.source()])

    async def write_to(self, file: BinaryIO) -> int:
        """
        写入二进制文件对象

        Args:
            file: 可写的二进制文件对象

        Returns:
            写入的总字节数
        """
        writer = BinaryWriter(file)
        async for chunk in self.source():
            writer.write_bytes(chunk)
        return writer.position


async def compose(archive: Archive, config: Optional[ComposerConfig] = None) -> bytes:
    """将归档序列化为字节"""
    return await Composer(archive, config).compose()
