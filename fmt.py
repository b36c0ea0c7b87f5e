# coding=utf-8
# Copyright (C) 2016 The Qt Company Ltd.
# SPDX-License-Identifier: LicenseRef-Qt-Commercial OR GPL-3.0-only WITH Qt-GPL-exception-1.0

from __future__ import annotations

from typing import Any

from qtpy.QtCore import QCoreApplication


class QString(str):
    def arg(self, *args: Any) -> QString:
        s: QString = self
        # replace the highest markers first so that '%1' does not eat into '%10'
        for i, a in reversed(list(enumerate(args, start=1))):
            s = QString(s.replace(f'%{i}', str(a)))
        return s

    def withCount(self, count: int) -> QString:
        """ every literal `%d` becomes the decimal form of `count` """
        return QString(self.replace('%d', str(count)))


class FMT:
    @staticmethod
    def tr(sourceText: str, disambiguation: str | None = None, n: int = -1) -> QString:
        return QString(QCoreApplication.translate('Gettext', sourceText, disambiguation, n))
