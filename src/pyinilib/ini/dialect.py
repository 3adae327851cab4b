# -*- encoding: utf-8 -*-
# @File   : dialect.py
# @Time   : 2024/11/03 00:20:31
# @Author : Kariko Lin

"""Compiles an INI dialect into one token classifier.

Every maximal run of text not starting with whitespace is exactly one of
(first alternative wins):

    ```ini
    ; comment, or # comment (whichever markers the dialect allows)
    [ section name ]
    key = value ; inline comment (when allowed)
    anything else: undefined
    ```

plus line breaks and horizontal whitespace in between.
The `text` alternative must start and end on non-whitespace, hence the
look-around pair. Nothing here ever fails to match a non-blank line.
"""

from re import Pattern
from re import compile as regex
from re import escape as _esc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .settings import IniFileSettings

__all__ = ['build_pattern', 'compile_dialect', 'GROUPS']

# horizontal whitespace, i.e. `\s` without line breaks.
_HWS = r'[^\S\r\n]'
# anything on the current line.
_ANY = r'[^\r\n]'

GROUPS = (
    'comment', 'comment_open', 'comment_body',
    'section', 'section_name',
    'entry', 'key', 'delimiter', 'value',
    'undefined', 'linebreak', 'whitespace',
)


def _charset(chars: str, negate: bool = False, extra: str = '') -> str:
    return '[%s%s%s]' % ('^' if negate else '',
                         ''.join(_esc(c) for c in chars), extra)


def _comment(markers: str) -> str:
    return (f'(?P<comment>(?P<comment_open>{_charset(markers)}+)'
            f'{_HWS}*(?P<comment_body>{_ANY}*))')


def _section() -> str:
    # name may be empty (`[]`), but never ends in whitespace.
    name = r'(?:[^\]\r\n]*[^\]\s])?'
    return (rf'(?P<section>\[{_HWS}*(?P<section_name>{name}){_HWS}*\])')


def _entry(separators: str, value_stops: str) -> str:
    key = (_charset(separators, True, r'\r\n\[\]') + '*'
           + _charset(separators, True, r'\s\[\]'))
    value = _charset(value_stops, True, r'\r\n') + '*'
    delimiter = '|'.join(_esc(c) for c in separators)
    return (f'(?P<entry>(?P<key>{key}){_HWS}*'
            f'(?P<delimiter>{delimiter}){_HWS}*(?P<value>{value}))')


def build_pattern(
    comment_markers: str,
    separators: str,
    inline_comments: bool = True
) -> str:
    """Pattern source for the given marker and separator chars."""
    if not comment_markers or not separators:
        raise ValueError('comment markers and separators must not be empty')
    if set(comment_markers) & set(separators):
        raise ValueError(
            f'{comment_markers!r} and {separators!r} share a character')
    stops = comment_markers if inline_comments else ''
    text = '|'.join((
        _comment(comment_markers),
        _section(),
        _entry(separators, stops),
        f'(?P<undefined>{_ANY}+)',
    ))
    return (rf'(?=\S)(?P<text>{text})(?<=\S)'
            r'|(?P<linebreak>\r\n|\n|\r)'
            rf'|(?P<whitespace>{_HWS}+)')


def compile_dialect(settings: 'IniFileSettings') -> Pattern[str]:
    return regex(build_pattern(
        settings.comment_character.chars,
        settings.separator_character.chars,
        settings.allow_comments_in_entries))
