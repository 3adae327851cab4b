# -*- encoding: utf-8 -*-
# @File   : settings.py
# @Time   : 2024/11/03 10:26:09
# @Author : Kariko Lin

"""INI dialect, i.e. how a file is parsed and written back.

A settings instance is frozen once built. To tweak, clone it:

    ```python
    mine = DEFAULT_SETTINGS.clone(read_only=True, comparison=Comparison.ORDINAL)
    ```

Files may describe themselves with a few global keys, e.g.:

    ```ini
    encoding = gbk
    str_compare = ordinal
    entry_delimiter = :
    ```
"""

import logging
from dataclasses import dataclass, replace
from functools import cached_property
from os import PathLike
from re import Pattern

from .consts import (
    CommentCharacter, SeparatorCharacter, ParsingMethod,
    LineBreakerStyle, Comparison, StringComparer, parse_bool
)
from .dialect import compile_dialect
from ..escaping import RESERVED_ESCAPES

__all__ = [
    'IniFileSettings', 'InvalidSettingsError',
    'DEFAULT_SETTINGS', 'INTERNAL_SETTINGS'
]


class InvalidSettingsError(ValueError):
    """The dialect described can't be turned into a working parser."""
    pass


@dataclass(frozen=True, kw_only=True)
class IniFileSettings:
    comment_character: CommentCharacter = CommentCharacter.SEMICOLON_OR_HASH
    separator_character: SeparatorCharacter = SeparatorCharacter.COLON_OR_EQUAL
    parsing_method: ParsingMethod = ParsingMethod.PRESERVE_ORIGINAL
    comparison: Comparison = Comparison.INVARIANT_CULTURE_IGNORE_CASE
    allow_escape_characters: bool = False
    custom_escape_characters: str = ''
    allow_comments_in_entries: bool = True
    add_missing_entries: bool = False
    read_only: bool = False
    line_breaker: LineBreakerStyle = LineBreakerStyle.AUTO
    concurrent: bool = False
    deferred_writes: bool = False

    def __post_init__(self) -> None:
        if not self.comment_character:
            raise InvalidSettingsError('no comment character selected')
        if not self.separator_character:
            raise InvalidSettingsError('no separator character selected')
        reserved = (RESERVED_ESCAPES + '\r\n'
                    + self.comment_character.chars
                    + self.separator_character.chars)
        if clash := ''.join(
            c for c in self.custom_escape_characters if c in reserved
        ):
            raise InvalidSettingsError(
                f'{clash!r} can\'t be used as custom escape characters')
        if self.deferred_writes and not self.concurrent:
            raise InvalidSettingsError(
                'deferred writes only work with the concurrent parser')

    def clone(self, **changes) -> 'IniFileSettings':
        return replace(self, **changes)

    @property
    def comparer(self) -> StringComparer:
        return self.comparison.comparer

    @cached_property
    def pattern(self) -> Pattern[str]:
        """The token classifier of this dialect, compiled once."""
        return compile_dialect(self)

    # self-describing files below.

    @classmethod
    def from_content(
        cls, content: str, base: 'IniFileSettings | None' = None
    ) -> 'IniFileSettings':
        """Settings from well-known global keys of `content`.

        Missing keys keep what `base` (`DEFAULT_SETTINGS`) says.
        Unreadable values are logged and ignored.
        """
        # parser depends on settings, not vice versa.
        from .parser import IniRegexParser

        base = base or DEFAULT_SETTINGS
        changes = {}
        with IniRegexParser(content, INTERNAL_SETTINGS) as scan:
            for key, field in (
                ('add_missing', 'add_missing_entries'),
                ('read_only', 'read_only'),
                ('allow_escape', 'allow_escape_characters'),
                ('allow_inline_comments', 'allow_comments_in_entries'),
            ):
                if (raw := scan.get_value(None, key)) is None:
                    continue
                if (flag := parse_bool(raw)) is None:
                    logging.warning(f'{key} = {raw}: not a boolean, ignored.')
                    continue
                changes[field] = flag

            if (raw := scan.get_value(None, 'new_line')) is not None:
                changes['line_breaker'] = LineBreakerStyle.parse(raw)

            if (raw := scan.get_value(None, 'str_compare')) is not None:
                try:
                    changes['comparison'] = Comparison.parse(raw)
                except ValueError as e:
                    logging.warning(f'{e}, keeping {base.comparison.name}.')

            if (raw := scan.get_value(None, 'entry_delimiter')) is not None:
                flag = SeparatorCharacter(0)
                for i in SeparatorCharacter:
                    if len(i.chars) == 1 and i.chars in raw:
                        flag |= i
                if flag:
                    changes['separator_character'] = flag
                else:
                    logging.warning(f'entry_delimiter = {raw}: no ":" or "=".')

        # `comment_char = #` would read as an empty value otherwise.
        with IniRegexParser(content, INTERNAL_SETTINGS.clone(
            allow_comments_in_entries=False
        )) as scan:
            if (raw := scan.get_value(None, 'comment_char')) is not None:
                flag = CommentCharacter(0)
                for i in CommentCharacter:
                    if len(i.chars) == 1 and i.chars in raw:
                        flag |= i
                if flag:
                    changes['comment_character'] = flag
                else:
                    logging.warning(f'comment_char = {raw}: no ";" or "#".')

        try:
            return base.clone(**changes)
        except InvalidSettingsError as e:
            logging.warning(f'self-described settings rejected: {e}')
            return base

    @classmethod
    def from_file(
        cls, filename: str | PathLike[str],
        base: 'IniFileSettings | None' = None
    ) -> 'IniFileSettings':
        # deferred, file.py imports this module.
        from .file import read_text

        return cls.from_content(read_text(filename)[0], base)


DEFAULT_SETTINGS = IniFileSettings()
"""Shared default dialect. Frozen, so `clone()` it to change anything."""

INTERNAL_SETTINGS = IniFileSettings(
    parsing_method=ParsingMethod.QUICK_SCAN,
    comparison=Comparison.ORDINAL_IGNORE_CASE,
    allow_escape_characters=True,
)
"""Quick pre-scan of files, for self-described settings and encoding."""
