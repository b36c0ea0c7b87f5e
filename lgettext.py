#!/bin/env python3
# coding=utf-8
# Copyright (C) 2016 The Qt Company Ltd.
# SPDX-License-Identifier: LicenseRef-Qt-Commercial OR GPL-3.0-only WITH Qt-GPL-exception-1.0

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from qtpy.QtCore import QCoreApplication, QLocale, qVersion

from catalog import FileFormat, Headers, registeredFileFormats
from mo import FormatError
from translator import LoadError, Translator


def printOut(out: str) -> None:
    sys.stdout.write(out + '\n')


def printErr(out: str) -> None:
    sys.stderr.write(out + '\n')


def guessLocaleFromFileName(filename: Path) -> str:
    """ tries `ru.po`, `app_pt_BR.mo`, then `ru/LC_MESSAGES/app.mo` """
    fmt: FileFormat
    for fmt in registeredFileFormats():
        if filename.suffix.casefold() == '.' + fmt.extension.casefold():
            filename = filename.with_suffix('')
            break
    name: str
    for name in (filename.name, *(p.name for p in filename.parents)):
        while name:
            locale: QLocale = QLocale(name)
            if locale.language() != QLocale.Language.C:
                return locale.name()
            if '_' in name:
                name = name[name.index('_') + 1:]
            else:
                break
    return ''


def printHeaders(headers: Headers) -> None:
    key: str
    value: str
    for key, value in sorted(headers.items()):
        printOut(f'{key}: {value}')


def lookup(tor: Translator, args: argparse.Namespace) -> str:
    if args.plural is not None:
        if args.context is not None:
            return tor.npgettext(args.context, args.message, args.plural, args.n)
        return tor.ngettext(args.message, args.plural, args.n)
    if args.context is not None:
        return tor.pgettext(args.context, args.message)
    return tor.gettext(args.message)


def main(argv: Sequence[str] | None = None) -> int:
    app: QCoreApplication = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    ap: argparse.ArgumentParser = argparse.ArgumentParser(prog='lgettext', add_help=False, description="""\
lgettext loads a GNU gettext catalog, either a textual PO file or a compiled \
MO file, and looks up messages in it the way an application would.""")
    ap.add_argument('-help', action='help', help='Display this information and exit.')
    ap.add_argument('-version', action='version', version=f'lgettext version {qVersion()}',
                    help='Display the version of lgettext and exit.')
    ap.add_argument('-context', metavar='<context>', help='Look the message up in the given context.')
    ap.add_argument('-plural', metavar='<text>', help='The plural source text of the message.')
    ap.add_argument('-n', type=int, default=1, metavar='<count>',
                    help='The count to choose the plural form for. Default: 1')
    ap.add_argument('-locale', metavar='<code>',
                    help='The locale of the catalog. Guessed from the file name if not specified.')
    ap.add_argument('-domain', default='messages', metavar='<name>', help='The text domain. Default: messages')
    ap.add_argument('-headers', action='store_true', help='Print the catalog headers.')
    ap.add_argument('-dump', action='store_true', help='Log every message of the catalog.')
    ap.add_argument('-format', default='auto', choices=['auto', 'po', 'mo'],
                    help='The catalog format. Guessed from the file extension by default.')
    ap.add_argument('catalog', metavar='catalog-file', type=Path)
    ap.add_argument('message', nargs='?')
    args: argparse.Namespace = ap.parse_args(argv)

    if args.dump:
        logging.basicConfig(level=logging.DEBUG, format='%(message)s')

    tor: Translator = Translator(args.locale or guessLocaleFromFileName(args.catalog), args.domain)
    try:
        tor.loadFile(args.catalog, Path.read_bytes, args.format)
    except (LoadError, FormatError) as ex:
        printErr(f'lgettext error: {ex}')
        return 1

    if args.headers:
        printHeaders(tor.getHeaders())
    if args.dump:
        tor.dump()
    if args.message is not None:
        printOut(lookup(tor, args))
    elif not args.headers and not args.dump:
        printOut(f"{tor.messageCount()} message(s) in '{args.catalog}' "
                 f'({tor.getLocale()}, {tor.pluralRule().pluralCount} plural form(s))')

    return 0


if __name__ == '__main__':
    sys.exit(main())
