# -*- encoding: utf-8 -*-
# @File   : consts.py
# @Time   : 2024/11/02 22:51:44
# @Author : Kariko Lin

import os
from enum import Enum, IntEnum, IntFlag
from typing import Callable, Iterable


class CommentCharacter(IntFlag):
    SEMICOLON = 1
    HASH = 2
    SEMICOLON_OR_HASH = 3

    @property
    def chars(self) -> str:
        pairs = ((CommentCharacter.SEMICOLON, ';'), (CommentCharacter.HASH, '#'))
        return ''.join(c for f, c in pairs if f in self)


class SeparatorCharacter(IntFlag):
    COLON = 1
    EQUAL = 2
    COLON_OR_EQUAL = 3

    @property
    def chars(self) -> str:
        pairs = ((SeparatorCharacter.COLON, ':'), (SeparatorCharacter.EQUAL, '='))
        return ''.join(c for f, c in pairs if f in self)

    @property
    def preferred(self) -> str:
        """The one used when writing new entries."""
        return ':' if self == SeparatorCharacter.COLON else '='


class ParsingMethod(IntEnum):
    PRESERVE_ORIGINAL = 0
    REFORMAT_FILE = 1
    QUICK_SCAN = 2

    @property
    def cached(self) -> bool:
        return self < ParsingMethod.QUICK_SCAN


class LineBreakerStyle(str, Enum):
    AUTO = 'auto'
    CR = '\r'  # classic Mac. Works, but better not.
    LF = '\n'
    CRLF = '\r\n'
    DEFAULT = 'default'

    @property
    def chars(self) -> str:
        match self:
            case LineBreakerStyle.CR | LineBreakerStyle.LF | LineBreakerStyle.CRLF:
                return self.value
            case _:
                return os.linesep

    @classmethod
    def detect(cls, content: str) -> 'LineBreakerStyle':
        """Guess by counting `\\r` and `\\n` throughout `content`.

        When both counts are within 20% of each other, it's CRLF
        (or mixed, whatever; CRLF is the safe bet).
        """
        r, n = content.count('\r'), content.count('\n')
        if r == n == 0:
            return cls.DEFAULT
        if abs(n - r) * 100 < max(n, r) * 20:
            return cls.CRLF
        return cls.LF if n > r else cls.CR

    @classmethod
    def parse(cls, text: str) -> 'LineBreakerStyle':
        """From a self-describing setting like `new_line = \\r\\n`."""
        if text in ('\r\n', '\n', '\r'):
            return cls(text)
        match text.strip().lower():
            case 'crlf' | 'windows':
                return cls.CRLF
            case 'lf' | 'posix' | 'unix':
                return cls.LF
            case 'cr' | 'mac':
                return cls.CR
            case 'auto':
                return cls.AUTO
            case _:
                return cls.DEFAULT


class Comparison(IntEnum):
    CURRENT_CULTURE = 0
    CURRENT_CULTURE_IGNORE_CASE = 1
    INVARIANT_CULTURE = 2
    INVARIANT_CULTURE_IGNORE_CASE = 3
    ORDINAL = 4
    ORDINAL_IGNORE_CASE = 5

    @property
    def ignore_case(self) -> bool:
        return self % 2 == 1

    @property
    def comparer(self) -> 'StringComparer':
        # no locale tables here: culture modes fold with casefold().
        if not self.ignore_case:
            return StringComparer(self, lambda s: s)
        if self == Comparison.ORDINAL_IGNORE_CASE:
            return StringComparer(self, str.lower)
        return StringComparer(self, str.casefold)

    @classmethod
    def parse(cls, text: str) -> 'Comparison':
        """Accepts both `ordinal_ignore_case` and `OrdinalIgnoreCase`."""
        name = ''.join(c for c in text if c.isalnum()).lower()
        for i in cls:
            if i.name.replace('_', '').lower() == name:
                return i
        raise ValueError(f'unknown string comparison: {text!r}')


class StringComparer:
    """Equality and normalization of section/key names."""
    __slots__ = ('comparison', 'fold')

    def __init__(
        self, comparison: Comparison, fold: Callable[[str], str]
    ) -> None:
        self.comparison = comparison
        self.fold = fold

    def equals(self, a: str | None, b: str | None) -> bool:
        if a is None or b is None:
            return a is b
        return a == b or self.fold(a) == self.fold(b)

    def unique(self, names: Iterable[str]) -> list[str]:
        """Folded names, first seen first, without duplicates."""
        return list(dict.fromkeys(self.fold(i) for i in names))

    def __repr__(self) -> str:
        return f'StringComparer({self.comparison.name})'


_TRUTHY = ('1', 'true', 'yes', 'on')
_FALSY = ('0', 'false', 'no', 'off')


def parse_bool(text: str | None) -> bool | None:
    """`None` when `text` reads as neither."""
    if text is None:
        return None
    match text.strip().lower():
        case t if t in _TRUTHY:
            return True
        case f if f in _FALSY:
            return False
        case _:
            return None
