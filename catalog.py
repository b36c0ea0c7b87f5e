# coding=utf-8
# Copyright (C) 2016 The Qt Company Ltd.
# SPDX-License-Identifier: LicenseRef-Qt-Commercial OR GPL-3.0-only WITH Qt-GPL-exception-1.0

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Final, NamedTuple, TypeAlias

from fmt import FMT

# separates the context from the source text in a lookup key, as in MO files
ContextSeparator: Final[str] = '\x04'


@dataclass
class CatalogEntry:
    context: str | None = None
    translations: list[str] = field(default_factory=list)

    def translation(self, index: int = 0) -> str:
        if 0 <= index < len(self.translations):
            return self.translations[index]
        return ''

    def isPlural(self) -> bool:
        return len(self.translations) > 1

    def copy(self) -> CatalogEntry:
        return CatalogEntry(self.context, list(self.translations))


Catalog: TypeAlias = dict[str, CatalogEntry]


def contextKey(context: str | None, sourceText: str) -> str:
    if context is None:
        return sourceText
    return context + ContextSeparator + sourceText


class Headers(dict[str, str]):
    """
    Header fields of a catalog, keyed by the lowercased field name.

    The fields the library knows about have their own accessors;
    anything else is reachable through `header()`.
    """

    ContentType: Final[str] = 'content-type'
    Language: Final[str] = 'language'
    PluralForms: Final[str] = 'plural-forms'

    def header(self, name: str) -> str | None:
        return self.get(name.strip().casefold())

    def setHeader(self, name: str, value: str) -> None:
        self[name.strip().casefold()] = value

    def contentType(self) -> str | None:
        return self.get(Headers.ContentType)

    def language(self) -> str | None:
        return self.get(Headers.Language)

    def pluralForms(self) -> str | None:
        return self.get(Headers.PluralForms)

    def copy(self) -> Headers:
        return Headers(self)


def parseHeaderBlock(block: str, headers: Headers) -> Headers:
    line: str
    for line in block.split('\n'):
        name: str
        sep: str
        value: str
        name, sep, value = line.strip().partition(':')
        name = name.strip()
        value = value.strip()
        # lines like ': value' or 'Key:' carry nothing
        if sep and name and value:
            headers.setHeader(name, value)
    return headers


class ParseResult(NamedTuple):
    catalog: Catalog
    headers: Headers


class PluralRule(NamedTuple):
    pluralCount: int
    classify: Callable[[int], int]


def defaultClassify(n: int) -> int:
    return 0 if n == 1 else 1


# English/Germanic: singular for exactly one, plural otherwise
defaultPluralRule: Final[PluralRule] = PluralRule(2, defaultClassify)


class FileFormat:
    Loader = Callable[[bytes], ParseResult]

    class FileType(enum.Enum):
        TranslationSource = enum.auto()
        TranslationBinary = enum.auto()

    def __init__(self) -> None:
        self.untranslatedDescription: str | None = None
        self.loader: FileFormat.Loader | None = None
        self.priority: int = -1  # 0 = highest, -1 = invisible
        self.extension: str = ''  # such as "po", "mo"
        self.fileType: FileFormat.FileType = FileFormat.FileType.TranslationSource

    def description(self) -> str:
        """ human-readable description """
        return FMT.tr(self.untranslatedDescription)


_theFormats: list[FileFormat] = []


def registerFileFormat(fmt: FileFormat) -> None:
    formats: list[FileFormat] = registeredFileFormats()
    i: int
    for i in range(len(formats)):
        if fmt.extension == formats[i].extension:
            formats[i] = fmt
            return
        if fmt.fileType == formats[i].fileType and fmt.priority < formats[i].priority:
            formats.insert(i, fmt)
            return
    formats.append(fmt)


def registeredFileFormats() -> list[FileFormat]:
    return _theFormats


def findFileFormat(extension: str) -> FileFormat | None:
    fmt: FileFormat
    for fmt in registeredFileFormats():
        if fmt.extension.casefold() == extension.casefold():
            return fmt
    return None


def guessFormat(filename: str | Path, fmt: str = 'auto') -> str:
    if not isinstance(filename, Path):
        filename = Path(filename)

    if fmt != 'auto':
        return fmt

    _fmt: FileFormat
    for _fmt in registeredFileFormats():
        if filename.suffix.casefold() == '.' + _fmt.extension.casefold():
            return _fmt.extension

    # textual catalogs are the common case
    return 'po'
