# -*- encoding: utf-8 -*-
# @File   : escaping.py
# @Time   : 2024/11/02 22:13:05
# @Author : Kariko Lin

"""Backslash escaping for values stored in line-oriented text.

    ```ini
    motd = Hello,\\tworld!\\r\\nSee you.
    bell = \\x07 ; or \\u0007, or \\cG
    ```

`unescape()` never raises: a broken hex escape degrades to `?`,
an unknown escape is kept as is (backslash included).
"""

from typing import Callable, Mapping

__all__ = ['escape', 'unescape', 'SUBSTITUTE_CHAR', 'RESERVED_ESCAPES']

SUBSTITUTE_CHAR = '?'
# letters that already mean something after a backslash.
RESERVED_ESCAPES = '\\0abnrftvxuc'

_ESCAPES = {
    '\\': '\\\\',
    '\0': '\\0',
    '\a': '\\a',
    '\b': '\\b',
    '\n': '\\n',
    '\r': '\\r',
    '\f': '\\f',
    '\t': '\\t',
    '\v': '\\v',
}
_UNESCAPES = {v[1]: k for k, v in _ESCAPES.items()}

# a substitution is either a literal, or something to call each time,
# like a timestamp.
Substitution = str | Callable[[], str]


def escape(text: str, custom: str = '') -> str:
    """Escape control chars, backslashes and each char of `custom`."""
    if not text:
        return text
    buf: list[str] = []
    for c in text:
        if c in _ESCAPES:
            buf.append(_ESCAPES[c])
        elif c in custom:
            buf.append('\\' + c)
        else:
            buf.append(c)
    return ''.join(buf)


def _unhex(digits: str) -> str:
    code = 0
    for d in digits:
        if d in '0123456789':
            r = ord(d) - 0x30
        elif d in 'ABCDEF':
            r = ord(d) - 0x37
        elif d in 'abcdef':
            r = ord(d) - 0x57
        else:
            return SUBSTITUTE_CHAR
        code = (code << 4) + r
    return chr(code)


def _control(c: str) -> str:
    # \cA .. \cZ, plus the few punctuations below 0x60 (\c[, \c@ ...)
    if 'a' <= c <= 'z':
        c = c.upper()
    code = ord(c) - 0x40
    if not 0 <= code < 0x20:
        return SUBSTITUTE_CHAR
    return chr(code)


def unescape(
    text: str,
    custom: str = '',
    substitutions: Mapping[str, Substitution] | None = None
) -> str:
    """Reverse `escape()`.

    Besides the canonical forms, `\\xHH`, `\\uHHHH` and `\\cX` are
    understood. `substitutions` maps an escape letter to its expansion,
    e.g. `{'l': os.linesep}` for `\\l`.
    """
    pos = text.find('\\')
    if pos < 0:
        return text
    buf = [text[:pos]]
    length = len(text)
    while pos < length:
        c = text[pos]
        if c != '\\':
            buf.append(c)
            pos += 1
            continue
        if pos + 1 >= length:
            # dangling backslash
            buf.append('\\')
            break
        c = text[pos + 1]
        match c:
            case _ if c in _UNESCAPES:
                buf.append(_UNESCAPES[c])
                pos += 2
            case 'u' if pos + 6 <= length:
                buf.append(_unhex(text[pos + 2:pos + 6]))
                pos += 6
            case 'x' if pos + 4 <= length:
                buf.append(_unhex(text[pos + 2:pos + 4]))
                pos += 4
            case 'c' if pos + 3 <= length:
                buf.append(_control(text[pos + 2]))
                pos += 3
            case _ if c in custom:
                buf.append(c)
                pos += 2
            case _ if substitutions and c in substitutions:
                sub = substitutions[c]
                buf.append(sub() if callable(sub) else sub)
                pos += 2
            case _:
                buf.append('\\' + c)
                pos += 2
    return ''.join(buf)
