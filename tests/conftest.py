# coding=utf-8

from __future__ import annotations

import struct
from typing import Callable

import pytest

RUSSIAN_PLURAL_FORMS = (
    "nplurals=3; plural=(n%10==1 && n%100!=11 ? 0 : "
    "n%10>=2 && n%10<=4 && (n%100<10 || n%100>=20) ? 1 : 2);"
)

RUSSIAN_PO = r'''
# Russian translation
msgid ""
msgstr ""
"Content-Type: text/plain; charset=UTF-8\n"
"Language: ru\n"
"Plural-Forms: nplurals=3; plural=(n%10==1 && n%100!=11 ? 0 : n%10>=2 && n%10<=4 && (n%100<10 || n%100>=20) ? 1 : 2);\n"

msgid "Hello, world!"
msgstr "Привет, мир!"

msgid "One file"
msgid_plural "%d files"
msgstr[0] "%d файл"
msgstr[1] "%d файла"
msgstr[2] "%d файлов"

msgctxt "button"
msgid "Save"
msgstr "Сохранить"

msgctxt "menu"
msgid "Save"
msgstr "Сохранить как"

msgctxt "menu"
msgid "One item"
msgid_plural "%d items"
msgstr[0] "%d пункт меню"
msgstr[1] "%d пункта меню"
msgstr[2] "%d пунктов меню"

msgid "Thank you"
msgstr "Спасибо"
'''

# the same catalog as RUSSIAN_PO, as (original, translation) pairs of an MO file
RUSSIAN_MO_MESSAGES = [
    ("", "Content-Type: text/plain; charset=UTF-8\nLanguage: ru\nPlural-Forms: " + RUSSIAN_PLURAL_FORMS + "\n"),
    ("Hello, world!", "Привет, мир!"),
    ("One file\0%d files", "%d файл\0%d файла\0%d файлов"),
    ("button\x04Save", "Сохранить"),
    ("menu\x04Save", "Сохранить как"),
    ("menu\x04One item\0%d items", "%d пункт меню\0%d пункта меню\0%d пунктов меню"),
    ("Thank you", "Спасибо"),
]


def build_mo(messages: list[tuple[str, str]], big_endian: bool = False, version: int = 0) -> bytes:
    """Lay out a compiled catalog the way msgfmt does, without a hash table."""
    order = ">" if big_endian else "<"
    count = len(messages)
    originals_offset = 28
    translations_offset = originals_offset + 8 * count
    pool_offset = translations_offset + 8 * count

    pool = b""
    tables: list[tuple[int, int]] = []
    for column in (0, 1):
        for message in messages:
            encoded = message[column].encode("utf-8")
            tables.append((len(encoded), pool_offset + len(pool)))
            pool += encoded + b"\0"

    header = struct.pack(
        order + "7I", 0x950412DE, version, count, originals_offset, translations_offset, 0, 0
    )
    table_bytes = b"".join(struct.pack(order + "2I", length, offset) for length, offset in tables)
    return header + table_bytes + pool


@pytest.fixture
def mo_builder() -> Callable[..., bytes]:
    return build_mo


@pytest.fixture
def russian_po() -> str:
    return RUSSIAN_PO


@pytest.fixture
def russian_mo() -> bytes:
    return build_mo(RUSSIAN_MO_MESSAGES)
