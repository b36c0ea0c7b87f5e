# coding=utf-8
# Copyright (C) 2016 The Qt Company Ltd.
# SPDX-License-Identifier: LicenseRef-Qt-Commercial OR GPL-3.0-only WITH Qt-GPL-exception-1.0

from __future__ import annotations

import logging
from typing import Final

from qtpy.QtCore import QByteArray, QDataStream

from catalog import Catalog, CatalogEntry, ContextSeparator, FileFormat, Headers, ParseResult, contextKey, \
    parseHeaderBlock, registerFileFormat
from fmt import FMT

# the magic number as read from a little-endian stream
magicLittleEndian: Final[int] = 0x950412de
magicBigEndian: Final[int] = 0xde120495

headerSize: Final[int] = 7 * 4
tableEntrySize: Final[int] = 2 * 4

# separates the singular from the plural forms in both tables
PluralSeparator: Final[str] = '\0'


class FormatError(ValueError):
    pass


def fromBytes(data: bytes) -> tuple[str, bool]:
    utf8_fail: bool = False
    try:
        out: str = data.decode(encoding='utf-8', errors='strict')
    except UnicodeDecodeError:
        out = data.decode(encoding='utf-8', errors='replace')
        utf8_fail = True
    return out, utf8_fail


class MO:
    """
    Reads a compiled gettext catalog:

        quint32 magic;              0x950412de in the file's byte order
        quint32 revision;           only 0 is known
        quint32 count;
        quint32 originalsOffset;    -> count * (quint32 length, quint32 offset)
        quint32 translationsOffset; -> count * (quint32 length, quint32 offset)
        quint32 hashTableSize;      unused here
        quint32 hashTableOffset;    unused here

    Offsets are absolute.  The strings themselves live wherever the tables
    point; they are not length-prefixed and need not be NUL-terminated.
    """

    def __init__(self, data: bytes) -> None:
        self.m_data: bytes = data
        self.m_byteArray: QByteArray = QByteArray(data)
        self.m_stream: QDataStream = QDataStream(self.m_byteArray)
        self.m_stream.setByteOrder(QDataStream.ByteOrder.LittleEndian)
        self.m_utf8Fail: bool = False

    def readUInt32(self) -> int:
        value: int = self.m_stream.readUInt32()
        if self.m_stream.status() != QDataStream.Status.Ok:
            raise FormatError(FMT.tr('MO-Format error: unexpected end of data'))
        return value

    def seek(self, pos: int) -> None:
        if pos > len(self.m_data) or not self.m_stream.device().seek(pos):
            raise FormatError(FMT.tr('MO-Format error: offset %1 is out of range').arg(pos))

    def readTable(self, offset: int, count: int) -> list[str]:
        if offset + count * tableEntrySize > len(self.m_data):
            raise FormatError(FMT.tr('MO-Format error: string table at %1 is truncated').arg(offset))
        self.seek(offset)

        # (length, offset) pairs
        spans: list[tuple[int, int]] = [(self.readUInt32(), self.readUInt32()) for _ in range(count)]

        strings: list[str] = []
        length: int
        start: int
        for length, start in spans:
            if start + length > len(self.m_data):
                raise FormatError(FMT.tr('MO-Format error: string at %1 runs past the end of data').arg(start))
            string: str
            utf8_fail: bool
            string, utf8_fail = fromBytes(self.m_data[start:start + length])
            self.m_utf8Fail = self.m_utf8Fail or utf8_fail
            strings.append(string)
        return strings

    def read(self) -> ParseResult:
        if len(self.m_data) < 4:
            raise FormatError(FMT.tr('Invalid MO file: bad magic number'))
        magic: int = self.readUInt32()
        if magic == magicBigEndian:
            self.m_stream.setByteOrder(QDataStream.ByteOrder.BigEndian)
        elif magic != magicLittleEndian:
            raise FormatError(FMT.tr('Invalid MO file: bad magic number'))

        version: int = self.readUInt32()
        if version != 0:
            raise FormatError(FMT.tr('Unsupported MO file version: %1').arg(version))

        count: int = self.readUInt32()
        originals_offset: int = self.readUInt32()
        translations_offset: int = self.readUInt32()
        # hash table size and offset
        self.readUInt32()
        self.readUInt32()

        originals: list[str] = self.readTable(originals_offset, count)
        translations: list[str] = self.readTable(translations_offset, count)

        catalog: Catalog = {}
        headers: Headers = Headers()
        original: str
        translation: str
        for original, translation in zip(originals, translations):
            if not original:
                parseHeaderBlock(translation, headers)
                continue

            # the plural source text after the NUL is not needed for lookups
            source: str = original.split(PluralSeparator, 1)[0]
            context: str | None = None
            if ContextSeparator in source:
                context, _, source = source.partition(ContextSeparator)
            catalog[contextKey(context, source)] = CatalogEntry(context, translation.split(PluralSeparator))

        if self.m_utf8Fail:
            logging.warning('MO data contains invalid UTF-8 sequences')
        logging.debug(f'Read {len(catalog)} message(s) and {len(headers)} header(s) from MO data')
        return ParseResult(catalog, headers)


def parseMO(data: bytes | bytearray | memoryview) -> ParseResult:
    return MO(bytes(data)).read()


def initMO() -> None:
    fmt: FileFormat = FileFormat()
    fmt.extension = 'mo'
    fmt.fileType = FileFormat.FileType.TranslationBinary
    fmt.priority = 0
    fmt.untranslatedDescription = 'Compiled GNU Gettext translations'
    fmt.loader = parseMO

    registerFileFormat(fmt)


initMO()
