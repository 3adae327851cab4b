# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2024/11/04 00:12:37
# @Author : Kariko Lin

"""INI parsers working right on the text.

`IniRegexParser` never rebuilds the file: it reads through the token
stream, and writes by splicing the exact spans it has to change.
Comments, blank lines and whatever it doesn't understand stay untouched.

    ```ini
    ; edited with set_value(None, 'key', 'new')
    key = new   ; <- only `val` became `new` here
    ```

`IniDictionary` (see `ini.model`) is the reformatting alternative.
"""

import logging
from abc import ABCMeta, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from queue import Queue
from re import compile as regex
from threading import RLock, Thread
from typing import Iterable, Iterator, Sequence

from .consts import LineBreakerStyle
from .settings import IniFileSettings, DEFAULT_SETTINGS
from .tokens import Token, TokenKind, TokenBuffer, TokenIterator
from ..escaping import escape, unescape

__all__ = ['IniFileParser', 'IniRegexParser', 'IniConcurrentRegexParser']

_EOL = regex(r'\r\n|\n|\r')
_INDEXED = (TokenKind.SECTION, TokenKind.ENTRY)


class IniFileParser(metaclass=ABCMeta):
    """Query/edit surface shared by every parsing strategy.

    `section` of `None` or `''` means the global scope, entries before
    any header. Writes on a read-only dialect do nothing at all.
    """

    def __init__(
        self, content: str = '', settings: IniFileSettings | None = None
    ) -> None:
        self._settings = settings or DEFAULT_SETTINGS
        self._comparer = self._settings.comparer
        self._closed = False
        self._line_break = self._resolve_line_break(content or '')

    @property
    def settings(self) -> IniFileSettings:
        return self._settings

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def line_break(self) -> str:
        """Chars written after each new line."""
        return self._line_break

    def _resolve_line_break(self, content: str) -> str:
        style = self._settings.line_breaker
        if style == LineBreakerStyle.AUTO:
            style = LineBreakerStyle.detect(content)
        return style.chars

    @property
    @abstractmethod
    def content(self) -> str:
        raise NotImplementedError

    @content.setter
    @abstractmethod
    def content(self, value: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def sections(self) -> list[str]:
        """Header names, first seen first. Global scope not included."""
        raise NotImplementedError

    @abstractmethod
    def keys(self, section: str | None) -> list[str]:
        raise NotImplementedError

    @abstractmethod
    def get_values(
        self, section: str | None, key: str | None = None
    ) -> list[str]:
        """Values of `key`, or of the whole section if `key` is empty."""
        raise NotImplementedError

    @abstractmethod
    def _lookup(self, section: str | None, key: str) -> str | None:
        raise NotImplementedError

    @abstractmethod
    def _replace_first(self, section: str | None, key: str, value: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def _replace_all(
        self, section: str | None, key: str, values: list[str]
    ) -> None:
        raise NotImplementedError

    def get_value(
        self, section: str | None, key: str, default: str | None = None
    ) -> str | None:
        self._check_open()
        self._check_key(key)
        if (value := self._lookup(section, key)) is not None:
            return value
        if default and self._settings.add_missing_entries:
            self.set_value(section, key, default)
        return default

    def set_value(self, section: str | None, key: str, value: str | None) -> None:
        """Replace the first `key` found. Empty `value` drops every `key`."""
        self._check_open()
        self._check_key(key)
        if not value:
            self.set_values(section, key, [])
            return
        if self._skip_write('set_value', section, key):
            return
        self._replace_first(section, key, value)

    def set_values(
        self, section: str | None, key: str, values: Sequence[str]
    ) -> None:
        """Make `key` hold exactly `values`, in order."""
        self._check_open()
        self._check_key(key)
        if isinstance(values, str):
            raise TypeError(
                'set_values() expects a sequence of str, not str itself')
        if self._skip_write('set_values', section, key):
            return
        self._replace_all(section, key, [i or '' for i in values])

    def flush(self) -> None:
        """Wait for pending writes, if any strategy defers them."""
        self._check_open()

    def close(self) -> None:
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def __str__(self) -> str:
        return self.content

    # helpers below.

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError('I/O operation on closed parser.')

    @staticmethod
    def _check_key(key: str) -> None:
        if not key:
            raise ValueError(f'key must be a non-empty str, got {key!r}')

    def _skip_write(self, op: str, section: str | None, key: str) -> bool:
        if self._settings.read_only:
            logging.debug(f'read only, {op}([{section or ""}] {key}) skipped.')
            return True
        return False

    @staticmethod
    def _is_global(section: str | None) -> bool:
        return not section

    def _encode(self, value: str) -> str:
        if not self._settings.allow_escape_characters:
            return value
        return escape(value, self._settings.custom_escape_characters)

    def _decode(self, value: str) -> str:
        if not self._settings.allow_escape_characters:
            return value
        return unescape(value, self._settings.custom_escape_characters, {
            'l': self._line_break,
            'D': lambda: datetime.now().strftime('%x %X'),
            'd': lambda: datetime.now().strftime('%x'),
        })

    def _entry_line(self, key: str, value: str) -> str:
        return f'{key}{self._settings.separator_character.preferred}{value}'


@dataclass
class _Scope:
    """What a walk over one section found, for inserting new lines."""
    entries: list[Token] = field(default_factory=list)
    header: Token | None = None
    first_header: Token | None = None


class IniRegexParser(IniFileParser):
    """Format-preserving editor on top of the token stream.

    With `ParsingMethod.QUICK_SCAN` nothing gets cached and each query
    walks the text over again, otherwise header/entry tokens are kept
    in a `TokenBuffer` until the content changes.
    """

    def __init__(
        self, content: str = '', settings: IniFileSettings | None = None
    ) -> None:
        super().__init__(content, settings)
        self._content = content or ''
        pattern = self._settings.pattern
        self._tokens: TokenBuffer | TokenIterator = (
            TokenBuffer(pattern, self._content, _INDEXED)
            if self._settings.parsing_method.cached
            else TokenIterator(pattern, self._content, _INDEXED))

    @property
    def cached(self) -> bool:
        return isinstance(self._tokens, TokenBuffer)

    @property
    def content(self) -> str:
        return self._content

    @content.setter
    def content(self, value: str) -> None:
        self._check_open()
        self._swap(value or '')
        if self._settings.line_breaker == LineBreakerStyle.AUTO:
            self._line_break = self._resolve_line_break(self._content)

    def _swap(self, value: str) -> None:
        self._content = value
        self._tokens.update(value)

    # reading.

    def _in_scope(
        self, section: str | None,
        tokens: Iterable[Token],
        found: _Scope | None = None
    ) -> Iterator[Token]:
        """Entries under `section`, which may be split into several blocks.

        The global scope ends at the first header.
        """
        is_global = self._is_global(section)
        inside = is_global
        for i in tokens:
            if i.kind == TokenKind.SECTION:
                if found is not None and found.first_header is None:
                    found.first_header = i
                if is_global:
                    return
                inside = self._comparer.equals(i.name, section)
                if inside and found is not None and found.header is None:
                    found.header = i
            elif inside:
                if found is not None:
                    found.entries.append(i)
                yield i

    def sections(self) -> list[str]:
        self._check_open()
        return self._comparer.unique(
            i.name for i in self._tokens if i.kind == TokenKind.SECTION)

    def keys(self, section: str | None) -> list[str]:
        self._check_open()
        return self._comparer.unique(
            i.key for i in self._in_scope(section, self._tokens))

    def get_values(
        self, section: str | None, key: str | None = None
    ) -> list[str]:
        self._check_open()
        return [
            self._decode(i.value)
            for i in self._in_scope(section, self._tokens)
            if not key or self._comparer.equals(i.key, key)
        ]

    def _lookup(self, section: str | None, key: str) -> str | None:
        for i in self._in_scope(section, self._tokens):
            if self._comparer.equals(i.key, key):
                return self._decode(i.value)
        return None

    # writing.

    def _write_source(self) -> tuple[str, Iterable[Token]]:
        """The text writes are computed against, and its tokens."""
        return self._content, self._tokens

    def _commit(self, content: str) -> None:
        self._swap(content)

    def _replace_first(self, section: str | None, key: str, value: str) -> None:
        content, tokens = self._write_source()
        found = _Scope()
        for i in self._in_scope(section, tokens, found):
            if self._comparer.equals(i.key, key):
                start, end = i.span('value')
                self._commit(_splice(content, [(start, end, self._encode(value))]))
                return
        self._commit(_splice(content, [
            self._insertion(content, section, key, [value], found)]))

    def _replace_all(
        self, section: str | None, key: str, values: list[str]
    ) -> None:
        content, tokens = self._write_source()
        found = _Scope()
        matches = [
            i for i in self._in_scope(section, tokens, found)
            if self._comparer.equals(i.key, key)
        ]
        edits: list[tuple[int, int, str]] = []
        for n, i in enumerate(matches):
            if n < len(values):
                start, end = i.span('value')
                edits.append((start, end, self._encode(values[n])))
            else:
                edits.append(self._removal(content, i))
        if len(values) > len(matches):
            edits.append(self._insertion(
                content, section, key, values[len(matches):], found))
        if edits:
            self._commit(_splice(content, edits))

    def _removal(self, content: str, token: Token) -> tuple[int, int, str]:
        """The whole line when the entry leads it, the entry alone if not."""
        start = max(content.rfind('\n', 0, token.start),
                    content.rfind('\r', 0, token.start)) + 1
        if content[start:token.start].strip():
            return token.start, token.end, ''
        eol = _EOL.search(content, token.end)
        return start, eol.end() if eol else len(content), ''

    def _insertion(
        self, content: str, section: str | None, key: str,
        values: list[str], found: _Scope
    ) -> tuple[int, int, str]:
        """New `key` lines after the last entry (or header) of `section`."""
        lb = self._line_break
        lines = ''.join(
            self._entry_line(key, self._encode(i)) + lb for i in values)
        anchor = found.entries[-1] if found.entries else found.header

        if anchor is not None:
            if eol := _EOL.search(content, anchor.end):
                return eol.end(), eol.end(), lines
            return len(content), len(content), lb + lines

        if self._is_global(section):
            if found.first_header is not None:
                pos = found.first_header.start
                return pos, pos, lines
            prefix = lb if content and content[-1] not in '\r\n' else ''
            return len(content), len(content), prefix + lines

        # a brand new section at the very end, after a blank line.
        if not content:
            prefix = ''
        elif content[-1] in '\r\n':
            prefix = lb
        else:
            prefix = lb * 2
        return (len(content), len(content),
                f'{prefix}[{section}]{lb}{lines}')

    def close(self) -> None:
        super().close()
        self._swap('')


def _splice(content: str, edits: list[tuple[int, int, str]]) -> str:
    """Apply `(start, end, text)` replacements made against `content`.

    Edits are taken in offset order, each one shifting the later ones.
    """
    offset = 0
    for start, end, text in sorted(edits, key=lambda x: x[0]):
        content = content[:start + offset] + text + content[end + offset:]
        offset += len(text) - (end - start)
    return content


class IniConcurrentRegexParser(IniRegexParser):
    """线程安全版的`IniRegexParser`。

    所有读写共用一把`RLock`。开启`deferred_writes`后，写操作算好新文本即返回，
    真正的替换交给后台线程排队完成；在此之前读到的仍是旧内容。
    需要“写完即读”的话，先`flush()`。
    """

    def __init__(
        self, content: str = '', settings: IniFileSettings | None = None
    ) -> None:
        self._lock = RLock()
        super().__init__(content, settings)
        # latest text written, maybe not applied yet.
        self._latest = self._content
        self._queued_seq = 0
        self._applied_seq = 0
        self._queue: Queue[tuple[int, str] | None] | None = None
        self._worker: Thread | None = None
        if self._settings.deferred_writes:
            self._queue = Queue()
            self._worker = Thread(
                target=self.__apply_swaps, name='ini-swap', daemon=True)
            self._worker.start()

    def __apply_swaps(self) -> None:
        assert self._queue is not None
        while (item := self._queue.get()) is not None:
            seq, text = item
            with self._lock:
                # superseded by a direct `content` assignment otherwise.
                if seq > self._applied_seq:
                    self._swap(text)
                    self._applied_seq = seq
            self._queue.task_done()
        self._queue.task_done()

    @property
    def pending(self) -> bool:
        """Whether some writes have returned but aren't visible yet."""
        with self._lock:
            return self._applied_seq < self._queued_seq

    @property
    def content(self) -> str:
        with self._lock:
            return self._content

    @content.setter
    def content(self, value: str) -> None:
        with self._lock:
            self._check_open()
            value = value or ''
            self._swap(value)
            self._latest = value
            self._applied_seq = self._queued_seq
            if self._settings.line_breaker == LineBreakerStyle.AUTO:
                self._line_break = self._resolve_line_break(value)

    def _write_source(self) -> tuple[str, Iterable[Token]]:
        if self._queue is None:
            return super()._write_source()
        return self._latest, TokenIterator(
            self._settings.pattern, self._latest, _INDEXED)

    def _commit(self, content: str) -> None:
        self._latest = content
        if self._queue is None:
            self._swap(content)
            return
        self._queued_seq += 1
        self._queue.put((self._queued_seq, content))

    def sections(self) -> list[str]:
        with self._lock:
            return super().sections()

    def keys(self, section: str | None) -> list[str]:
        with self._lock:
            return super().keys(section)

    def get_values(
        self, section: str | None, key: str | None = None
    ) -> list[str]:
        with self._lock:
            return super().get_values(section, key)

    def get_value(
        self, section: str | None, key: str, default: str | None = None
    ) -> str | None:
        with self._lock:
            return super().get_value(section, key, default)

    def set_value(self, section: str | None, key: str, value: str | None) -> None:
        with self._lock:
            super().set_value(section, key, value)

    def set_values(
        self, section: str | None, key: str, values: Sequence[str]
    ) -> None:
        with self._lock:
            super().set_values(section, key, values)

    def flush(self) -> None:
        self._check_open()
        if self._queue is not None:
            self._queue.join()

    def close(self) -> None:
        if self._closed:
            return
        if self._queue is not None and self._worker is not None:
            self._queue.put(None)
            self._worker.join()
            self._queue = None
        with self._lock:
            super().close()
