# coding=utf-8
# Copyright (C) 2016 The Qt Company Ltd.
# SPDX-License-Identifier: LicenseRef-Qt-Commercial OR GPL-3.0-only WITH Qt-GPL-exception-1.0

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from catalog import Catalog, CatalogEntry, FileFormat, Headers, ParseResult, PluralRule, contextKey, \
    defaultPluralRule, findFileFormat, guessFormat
from fmt import FMT, QString
from mo import parseMO
from pluralforms import compilePluralForms
from po import parsePO

ReadFunction = Callable[[Path], bytes]


class LoadError(Exception):
    pass


class Translator:
    """
    Holds one loaded catalog and answers lookups against it.

    Every lookup is total: a missing or empty translation falls back to the
    text the caller passed in.  Loading replaces the previous catalog as a
    whole; a load that fails leaves the previous catalog in place.
    """

    def __init__(self, locale: str = 'en', domain: str = 'messages') -> None:
        self.m_locale: str = locale or 'en'
        self.m_domain: str = domain or 'messages'
        self.m_catalog: Catalog = {}
        self.m_headers: Headers = Headers()
        self.m_pluralRule: PluralRule = defaultPluralRule

    # loading

    def setParseResult(self, result: ParseResult) -> None:
        rule: PluralRule = compilePluralForms(result.headers.pluralForms())
        self.m_catalog = result.catalog
        self.m_headers = result.headers
        self.m_pluralRule = rule
        logging.debug(f'Loaded {len(self.m_catalog)} message(s) for {self.m_locale}/{self.m_domain}, '
                      f'{self.m_pluralRule.pluralCount} plural form(s)')

    def load(self, data: str | bytes | bytearray | memoryview) -> None:
        if isinstance(data, str):
            self.setParseResult(parsePO(data))
        elif isinstance(data, (bytes, bytearray, memoryview)):
            self.setParseResult(parseMO(data))
        else:
            raise TypeError(FMT.tr('Cannot load a catalog from %1').arg(type(data).__name__))

    def loadPoFromString(self, content: str) -> None:
        self.setParseResult(parsePO(content))

    def loadMoFromBuffer(self, data: bytes | bytearray | memoryview) -> None:
        self.setParseResult(parseMO(data))

    def loadFile(self, filename: str | Path, read: ReadFunction | None = None, fmt: str = 'auto') -> None:
        if read is None:
            raise LoadError(FMT.tr('File loading requires a read function, '
                                   'such as `lambda p: Path(p).read_bytes()`'))
        filename = Path(filename)
        fmt_extension: str = guessFormat(filename, fmt)
        f: FileFormat | None = findFileFormat(fmt_extension)
        if f is None or f.loader is None:
            raise LoadError(FMT.tr('Unknown format %1 for file %2').arg(fmt_extension, filename))

        try:
            data: bytes = read(filename)
        except OSError as ex:
            raise LoadError(FMT.tr('Cannot read %1: %2').arg(filename, ex)) from ex

        self.setParseResult(f.loader(data))

    def clearTranslations(self) -> None:
        self.m_catalog = {}
        self.m_headers = Headers()
        self.m_pluralRule = defaultPluralRule

    # lookups

    def findEntry(self, context: str | None, sourceText: str) -> CatalogEntry | None:
        return self.m_catalog.get(contextKey(context, sourceText))

    def pluralTranslation(self, entry: CatalogEntry | None, count: int) -> str:
        if entry is None or not entry.translations:
            return ''
        index: int = self.m_pluralRule.classify(count)
        # the catalog may hold fewer forms than nplurals announces
        index = min(max(index, 0), len(entry.translations) - 1)
        return entry.translation(index)

    def gettext(self, message: str) -> str:
        entry: CatalogEntry | None = self.findEntry(None, message)
        if entry is not None and entry.translation():
            return entry.translation()
        return message

    _ = gettext

    def ngettext(self, singular: str, plural: str, count: int) -> str:
        translation: str = self.pluralTranslation(self.findEntry(None, singular), count)
        if translation:
            return QString(translation).withCount(count)
        return QString(singular if count == 1 else plural).withCount(count)

    def pgettext(self, context: str, message: str) -> str:
        entry: CatalogEntry | None = self.findEntry(context, message)
        if entry is not None and entry.translation():
            return entry.translation()
        return self.gettext(message)

    def npgettext(self, context: str, singular: str, plural: str, count: int) -> str:
        translation: str = self.pluralTranslation(self.findEntry(context, singular), count)
        if translation:
            return QString(translation).withCount(count)
        return self.ngettext(singular, plural, count)

    # inspection

    def getHeaders(self) -> Headers:
        return self.m_headers.copy()

    def getTranslations(self) -> Catalog:
        return {key: entry.copy() for key, entry in self.m_catalog.items()}

    def pluralRule(self) -> PluralRule:
        return self.m_pluralRule

    def messageCount(self) -> int:
        return len(self.m_catalog)

    def dump(self) -> None:
        key: str
        entry: CatalogEntry
        for key, entry in self.m_catalog.items():
            logging.debug(
                f'\nKey               : {key!r}'
                f'\nContext           : {entry.context}'
                f'\nTranslations      : {entry.translations}'
            )

    # labels; stored only, the catalog does not depend on them

    def setLocale(self, locale: str) -> None:
        self.m_locale = locale

    def getLocale(self) -> str:
        return self.m_locale

    def setDomain(self, domain: str) -> None:
        self.m_domain = domain

    def getDomain(self) -> str:
        return self.m_domain
