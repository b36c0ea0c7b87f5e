# coding=utf-8
# Copyright (C) 2016 The Qt Company Ltd.
# SPDX-License-Identifier: LicenseRef-Qt-Commercial OR GPL-3.0-only WITH Qt-GPL-exception-1.0

from __future__ import annotations

import logging
import re
from typing import Final

from catalog import Catalog, CatalogEntry, FileFormat, Headers, ParseResult, contextKey, parseHeaderBlock, \
    registerFileFormat

msgstrPattern: Final[re.Pattern[str]] = re.compile(r'^msgstr(?:\[(\d+)\])?\s+(".*")$')

# no language has anywhere near this many plural forms
maxPluralForms: Final[int] = 100

# the order matters: '\\' goes last
escapes: Final[tuple[tuple[str, str], ...]] = (
    ('\\n', '\n'),
    ('\\t', '\t'),
    ('\\r', '\r'),
    ('\\"', '"'),
    ('\\\\', '\\'),
)


def parseString(value: str) -> str:
    if len(value) < 2 or not value.startswith('"') or not value.endswith('"'):
        return value
    value = value[1:-1]
    escaped: str
    unescaped: str
    for escaped, unescaped in escapes:
        value = value.replace(escaped, unescaped)
    return value


class PendingEntry:
    def __init__(self, context: str | None = None) -> None:
        self.m_context: str | None = context
        self.m_sourceText: str | None = None
        self.m_pluralSourceText: str | None = None
        self.m_translations: list[str] = []
        # the field a continuation line appends to
        self.m_lastField: str | None = None if context is None else 'msgctxt'
        self.m_lastIndex: int = 0

    def context(self) -> str | None:
        return self.m_context

    def sourceText(self) -> str | None:
        return self.m_sourceText

    def setSourceText(self, sourceText: str) -> None:
        self.m_sourceText = sourceText
        self.m_lastField = 'msgid'

    def pluralSourceText(self) -> str | None:
        return self.m_pluralSourceText

    def setPluralSourceText(self, pluralSourceText: str) -> None:
        self.m_pluralSourceText = pluralSourceText
        self.m_lastField = 'msgid_plural'

    def setTranslation(self, index: int, translation: str) -> None:
        if index >= len(self.m_translations):
            self.m_translations.extend([''] * (index + 1 - len(self.m_translations)))
        self.m_translations[index] = translation
        self.m_lastField = 'msgstr'
        self.m_lastIndex = index

    def appendContinuation(self, text: str) -> bool:
        match self.m_lastField:
            case 'msgctxt':
                self.m_context += text
            case 'msgid':
                self.m_sourceText += text
            case 'msgid_plural':
                self.m_pluralSourceText += text
            case 'msgstr':
                self.m_translations[self.m_lastIndex] += text
            case _:
                return False
        return True

    def isComplete(self) -> bool:
        return self.m_sourceText is not None and bool(self.m_translations)

    def toEntry(self) -> CatalogEntry:
        return CatalogEntry(self.m_context, list(self.m_translations))


class PO:
    def __init__(self) -> None:
        self.m_catalog: Catalog = {}
        self.m_entry: PendingEntry = PendingEntry()

    def finalizeEntry(self) -> None:
        entry: PendingEntry = self.m_entry
        if entry.isComplete():
            self.m_catalog[contextKey(entry.context(), entry.sourceText())] = entry.toEntry()
        elif entry.sourceText() is not None or entry.context() is not None:
            logging.debug(f'Dropping untranslated entry {entry.context()!r}/{entry.sourceText()!r}')

    def startEntry(self, context: str | None = None) -> None:
        self.finalizeEntry()
        self.m_entry = PendingEntry(context)

    def readLine(self, line: str, lineNumber: int) -> None:
        if line.startswith('msgctxt '):
            self.startEntry(parseString(line[len('msgctxt '):].strip()))
        elif line.startswith('msgid '):
            # msgctxt belongs to the very next msgid; anything else begins a new entry
            if self.m_entry.context() is None or self.m_entry.sourceText() is not None:
                self.startEntry()
            self.m_entry.setSourceText(parseString(line[len('msgid '):].strip()))
        elif line.startswith('msgid_plural '):
            self.m_entry.setPluralSourceText(parseString(line[len('msgid_plural '):].strip()))
        elif line.startswith('msgstr'):
            mo: re.Match[str] | None = msgstrPattern.match(line)
            if mo is None:
                logging.debug(f'Malformed msgstr at line {lineNumber}: {line!r}')
                return
            index: int = int(mo.group(1), 10) if mo.group(1) is not None else 0
            if index >= maxPluralForms:
                logging.debug(f'Ignoring plural form {index} at line {lineNumber}')
                return
            self.m_entry.setTranslation(index, parseString(mo.group(2)))
        elif line.startswith('"'):
            if not self.m_entry.appendContinuation(parseString(line)):
                logging.debug(f'Continuation without a keyword at line {lineNumber}')
        else:
            logging.debug(f'Ignoring line {lineNumber}: {line!r}')

    def read(self, text: str) -> ParseResult:
        i: int
        line: str
        for i, line in enumerate(text.split('\n'), start=1):
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            self.readLine(line, i)
        self.finalizeEntry()

        headers: Headers = Headers()
        header_entry: CatalogEntry | None = self.m_catalog.pop('', None)
        if header_entry is not None:
            parseHeaderBlock(header_entry.translation(), headers)

        return ParseResult(self.m_catalog, headers)


def parsePO(text: str) -> ParseResult:
    return PO().read(text)


def loadPO(data: bytes) -> ParseResult:
    return parsePO(data.decode('utf-8-sig', errors='replace'))


def initPO() -> None:
    fmt: FileFormat = FileFormat()
    fmt.extension = 'po'
    fmt.fileType = FileFormat.FileType.TranslationSource
    fmt.priority = 0
    fmt.untranslatedDescription = 'GNU Gettext localization files'
    fmt.loader = loadPO

    registerFileFormat(fmt)


initPO()
