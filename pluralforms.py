# coding=utf-8
# Copyright (C) 2016 The Qt Company Ltd.
# SPDX-License-Identifier: LicenseRef-Qt-Commercial OR GPL-3.0-only WITH Qt-GPL-exception-1.0

from __future__ import annotations

import logging
import math
import operator
import re
import warnings
from typing import Callable, Final, Iterator, NamedTuple, Union

from catalog import PluralRule, defaultClassify, defaultPluralRule
from fmt import FMT

"""
  A `Plural-Forms` header looks like

      nplurals=3; plural=(n%10==1 && n%100!=11 ? 0 : n%10>=2 && n%10<=4 && (n%100<10 || n%100>=20) ? 1 : 2);

  The `plural` part is a C expression over the single variable `n`.  It comes
  from catalog data, so it is never handed to `eval`: every character outside
  the grammar is stripped first, then the remainder is parsed into a small tree
  and the tree is interpreted.
"""

npluralsPattern: Final[re.Pattern[str]] = re.compile(r'nplurals\s*=\s*(\d+)')
pluralPattern: Final[re.Pattern[str]] = re.compile(r'plural\s*=\s*([^;]+)')
disallowedPattern: Final[re.Pattern[str]] = re.compile(r'[^0-9n()?:!<>=&|%+\-*/ ]')

tokenPattern: Final[re.Pattern[str]] = re.compile(r"""
        (?P<WHITESPACES>[ ]+)                  | # spaces only survive sanitizing
        (?P<NUMBER>[0-9]+)                     | # decimal integer
        (?P<NAME>n)                            | # the only variable
        (?P<PARENTHESIS>[()])                  |
        (?P<OPERATOR>\|\||&&|[=!<>]=|[-+*/%<>!?:])
                                                 # ||, &&, ==, !=, <=, >=,
                                                 # -, +, *, /, %, <, >, !, ?, :
        | (?P<INVALID>.)                         # a lone '=', '&' or '|'
    """, re.VERBOSE)


class PluralFormsError(ValueError):
    pass


def cDivide(a: int, b: int) -> int:
    """ integer division truncating toward zero, as C does """
    q: int = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def cRemainder(a: int, b: int) -> int:
    return a - b * cDivide(a, b)


binaryOperators: Final[dict[str, Callable[[int, int], int]]] = {
    '==': lambda a, b: int(a == b),
    '!=': lambda a, b: int(a != b),
    '<': lambda a, b: int(a < b),
    '>': lambda a, b: int(a > b),
    '<=': lambda a, b: int(a <= b),
    '>=': lambda a, b: int(a >= b),
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': cDivide,
    '%': cRemainder,
}

# lowest priority first; all of them are left-associative
binaryPriorities: Final[tuple[tuple[str, ...], ...]] = (
    ('||',),
    ('&&',),
    ('==', '!='),
    ('<', '>', '<=', '>='),
    ('+', '-'),
    ('*', '/', '%'),
)


class Number(NamedTuple):
    value: int

    def evaluate(self, n: int) -> int:
        return self.value


class Variable(NamedTuple):
    name: str = 'n'

    def evaluate(self, n: int) -> int:
        return n


class Not(NamedTuple):
    operand: Node

    def evaluate(self, n: int) -> int:
        return int(not self.operand.evaluate(n))


class LogicalOperation(NamedTuple):
    op: str
    left: Node
    right: Node

    def evaluate(self, n: int) -> int:
        left: int = self.left.evaluate(n)
        if self.op == '&&':
            return int(bool(left) and bool(self.right.evaluate(n)))
        return int(bool(left) or bool(self.right.evaluate(n)))


class BinaryOperation(NamedTuple):
    op: str
    left: Node
    right: Node

    def evaluate(self, n: int) -> int:
        return binaryOperators[self.op](self.left.evaluate(n), self.right.evaluate(n))


class Conditional(NamedTuple):
    condition: Node
    ifTrue: Node
    ifFalse: Node

    def evaluate(self, n: int) -> int:
        if self.condition.evaluate(n):
            return self.ifTrue.evaluate(n)
        return self.ifFalse.evaluate(n)


Node = Union[Number, Variable, Not, LogicalOperation, BinaryOperation, Conditional]


def sanitize(expression: str) -> str:
    return disallowedPattern.sub('', expression)


def tokenize(expression: str) -> Iterator[str]:
    for mo in tokenPattern.finditer(expression):
        kind: str | None = mo.lastgroup
        if kind == 'WHITESPACES':
            continue
        value: str = mo.group(kind)
        if kind == 'INVALID':
            raise PluralFormsError(FMT.tr('invalid token in plural form: %1').arg(value))
        yield value
    yield ''


class PluralParser:
    """ recursive descent over the tokens of a sanitized expression """

    def __init__(self, expression: str) -> None:
        self.m_tokens: list[str] = list(tokenize(expression))
        self.m_pos: int = 0

    def peek(self) -> str:
        return self.m_tokens[self.m_pos]

    def next(self) -> str:
        token: str = self.m_tokens[self.m_pos]
        if token:
            self.m_pos += 1
        return token

    def expect(self, token: str) -> None:
        found: str = self.next()
        if found != token:
            raise self.error(found)

    @staticmethod
    def error(token: str) -> PluralFormsError:
        if token:
            return PluralFormsError(FMT.tr('unexpected token in plural form: %1').arg(token))
        return PluralFormsError(FMT.tr('unexpected end of plural form'))

    def parse(self) -> Node:
        tree: Node = self.parseConditional()
        if self.peek():
            raise self.error(self.peek())
        return tree

    def parseConditional(self) -> Node:
        condition: Node = self.parseBinary(0)
        if self.peek() != '?':
            return condition
        self.next()
        if_true: Node = self.parseConditional()
        self.expect(':')
        if_false: Node = self.parseConditional()
        return Conditional(condition, if_true, if_false)

    def parseBinary(self, priority: int) -> Node:
        if priority == len(binaryPriorities):
            return self.parseUnary()
        left: Node = self.parseBinary(priority + 1)
        while self.peek() in binaryPriorities[priority]:
            op: str = self.next()
            right: Node = self.parseBinary(priority + 1)
            if op in ('&&', '||'):
                left = LogicalOperation(op, left, right)
            else:
                left = BinaryOperation(op, left, right)
        return left

    def parseUnary(self) -> Node:
        if self.peek() == '!':
            self.next()
            return Not(self.parseUnary())
        return self.parsePrimary()

    def parsePrimary(self) -> Node:
        token: str = self.next()
        if token == '(':
            tree: Node = self.parseConditional()
            if self.next() != ')':
                raise PluralFormsError(FMT.tr('unbalanced parenthesis in plural form'))
            return tree
        if token == 'n':
            return Variable()
        if token.isdigit():
            return Number(int(token, 10))
        raise self.error(token)


def parsePluralExpression(expression: str) -> Node:
    return PluralParser(sanitize(expression)).parse()


def makeClassifier(tree: Node, pluralCount: int) -> Callable[[int], int]:
    def classify(n: int) -> int:
        index: int
        try:
            index = math.floor(tree.evaluate(n))
        except (ArithmeticError, RecursionError) as ex:
            logging.debug(f'Plural expression failed for n={n} ({ex}), using the default rule')
            index = defaultClassify(n)
        return min(max(index, 0), pluralCount - 1)

    return classify


def compilePluralForms(pluralForms: str | None) -> PluralRule:
    if not pluralForms:
        return defaultPluralRule

    nplurals_match: re.Match[str] | None = npluralsPattern.search(pluralForms)
    plural_match: re.Match[str] | None = pluralPattern.search(pluralForms)
    if nplurals_match is None or plural_match is None:
        warnings.warn(FMT.tr('Incomplete plural forms "%1", using default').arg(pluralForms), stacklevel=2)
        return defaultPluralRule

    plural_count: int = int(nplurals_match.group(1), 10)
    if plural_count < 1:
        warnings.warn(FMT.tr('Invalid plural count %1, using default').arg(plural_count), stacklevel=2)
        return defaultPluralRule

    try:
        tree: Node = parsePluralExpression(plural_match.group(1).strip())
    except (PluralFormsError, RecursionError) as ex:
        warnings.warn(FMT.tr('Failed to parse plural forms, using default: %1').arg(ex), stacklevel=2)
        return defaultPluralRule

    return PluralRule(plural_count, makeClassifier(tree, plural_count))
