# -*- encoding: utf-8 -*-
# @File   : tokens.py
# @Time   : 2024/11/03 01:02:48
# @Author : Kariko Lin

"""Lazy token stream over INI text.

Two ways of walking a content:
- `TokenIterator` re-runs the classifier from the very beginning each
time it's iterated. Nothing kept, O(len) per walk.
- `TokenBuffer` runs it once and keeps the (filtered) tokens,
until `update()` is called with new content.

Tokens are views: they keep the `re.Match` and slice the content
only when asked for `key`, `value`, etc.
"""

from enum import Enum
from re import Match, Pattern
from typing import Iterable, Iterator

from ..abstract import TokenSource

__all__ = [
    'TokenKind', 'Token', 'StaleTokenError',
    'scan', 'TokenIterator', 'TokenBuffer', 'FilteredView'
]


class StaleTokenError(RuntimeError):
    """Tokens of an outdated content were about to be read."""
    pass


class TokenKind(str, Enum):
    COMMENT = 'comment'
    SECTION = 'section'
    ENTRY = 'entry'
    UNDEFINED = 'undefined'
    LINE_BREAK = 'linebreak'
    WHITESPACE = 'whitespace'


# the `text` alternatives first, in the order they are tried.
_KINDS_BY_PRIORITY = tuple(TokenKind)


class Token:
    __slots__ = ('kind', 'match')

    def __init__(self, kind: TokenKind, match: Match[str]):
        self.kind = kind
        self.match = match

    @classmethod
    def from_match(cls, match: Match[str]) -> 'Token':
        for kind in _KINDS_BY_PRIORITY:
            if match.start(kind.value) != -1:
                return cls(kind, match)
        # the classifier always has one alternative matched.
        raise ValueError(f'unclassified match {match!r}')

    @property
    def start(self) -> int:
        return self.match.start()

    @property
    def end(self) -> int:
        return self.match.end()

    @property
    def text(self) -> str:
        return self.match.group()

    def span(self, group: str) -> tuple[int, int]:
        """(-1, -1) when the group doesn't apply to this kind."""
        return self.match.span(group)

    @property
    def name(self) -> str | None:
        """Section name, `''` for a literal `[]`."""
        if self.kind != TokenKind.SECTION:
            return None
        return self.match.group('section_name')

    @property
    def key(self) -> str | None:
        return self.match.group('key')

    @property
    def delimiter(self) -> str | None:
        return self.match.group('delimiter')

    @property
    def value(self) -> str | None:
        """Raw (still escaped) value of an entry, or body of a comment."""
        match self.kind:
            case TokenKind.ENTRY:
                return self.match.group('value')
            case TokenKind.COMMENT:
                return self.match.group('comment_body')
            case _:
                return None

    def __repr__(self) -> str:
        return f'<{self.kind.value} {self.start}:{self.end} {self.text!r}>'


def scan(pattern: Pattern[str], content: str) -> Iterator[Token]:
    """Classify `content` lazily, one match at a time."""
    for m in pattern.finditer(content):
        yield Token.from_match(m)


class TokenIterator(TokenSource[Token]):
    """Non-caching source. Each walk starts over from the content start."""

    def __init__(
        self, pattern: Pattern[str], content: str,
        kinds: Iterable[TokenKind] = ()
    ) -> None:
        self._pattern = pattern
        self._kinds = frozenset(kinds)
        self._content = content
        self._generation = 0
        self._walk: Iterator[Token] | None = None
        self._current: Token | None = None

    @property
    def generation(self) -> int:
        return self._generation

    def update(self, content: str) -> None:
        self._content = content
        self._generation += 1
        self._walk = None
        self._current = None

    def reset_seek(self) -> None:
        self._walk = scan(self._pattern, self._content)
        self._current = None
        self.next()

    @property
    def seekable(self) -> bool:
        return self._current is not None

    def next(self) -> None:
        if self._walk is None:
            return
        for token in self._walk:
            if not self._kinds or token.kind in self._kinds:
                self._current = token
                return
        self._current = None
        self._walk = None

    @property
    def current(self) -> Token:
        if self._current is None:
            raise IndexError('token stream exhausted or not started')
        return self._current


class FilteredView:
    """Index-based, kind-filtered view into a `TokenBuffer`.

    Bound to the buffer generation it was created at;
    reading it after the buffer got updated raises `StaleTokenError`.
    """
    __slots__ = ('_buffer', '_kinds', '_generation')

    def __init__(self, buffer: 'TokenBuffer', kinds: frozenset[TokenKind]):
        self._buffer = buffer
        self._kinds = kinds
        self._generation = buffer.generation

    @property
    def stale(self) -> bool:
        return self._generation != self._buffer.generation

    def __iter__(self) -> Iterator[Token]:
        i = 0
        while True:
            if self.stale:
                raise StaleTokenError(
                    f'buffer moved on to generation {self._buffer.generation}'
                    f' (view made at {self._generation})')
            if i >= len(self._buffer):
                return
            token = self._buffer[i]
            i += 1
            if not self._kinds or token.kind in self._kinds:
                yield token


class TokenBuffer(TokenSource[Token]):
    """Caching source: tokens of one content, kept until `update()`.

    Append-only storage, doubling from `MIN_CAPACITY`,
    never above `MAX_CAPACITY` elements.
    """
    MIN_CAPACITY = 16
    MAX_CAPACITY = 0x7FEFFFFF

    def __init__(
        self, pattern: Pattern[str], content: str,
        kinds: Iterable[TokenKind] = ()
    ) -> None:
        self._pattern = pattern
        self._kinds = frozenset(kinds)
        self._items: list[Token | None] = [None] * self.MIN_CAPACITY
        self._size = 0
        self._generation = 0
        self._seek = 0
        self._seek_generation = 0
        self._fill(content)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def capacity(self) -> int:
        return len(self._items)

    def _ensure_capacity(self, capacity: int) -> None:
        if capacity <= len(self._items):
            return
        if capacity > self.MAX_CAPACITY:
            raise OverflowError(
                f'more than {self.MAX_CAPACITY} tokens in one content')
        size = min(max(len(self._items) * 2, self.MIN_CAPACITY),
                   self.MAX_CAPACITY)
        size = max(size, capacity)
        self._items.extend([None] * (size - len(self._items)))

    def append(self, token: Token) -> None:
        if self._size == len(self._items):
            self._ensure_capacity(self._size + 1)
        self._items[self._size] = token
        self._size += 1

    def clear(self) -> None:
        for i in range(self._size):
            self._items[i] = None
        self._size = 0

    def _fill(self, content: str) -> None:
        for token in scan(self._pattern, content):
            if not self._kinds or token.kind in self._kinds:
                self.append(token)

    def update(self, content: str) -> None:
        """Re-tokenize in place, reusing the storage already grown."""
        self._generation += 1
        self.clear()
        self._fill(content)

    def filter(self, *kinds: TokenKind) -> None:
        """Drop, in place, every token not of `kinds`."""
        keep = frozenset(kinds)
        n = 0
        for i in range(self._size):
            token = self._items[i]
            if token.kind in keep:
                self._items[n] = token
                n += 1
        for i in range(n, self._size):
            self._items[i] = None
        self._size = n
        self._kinds = keep
        self._generation += 1

    def view(self, *kinds: TokenKind) -> FilteredView:
        return FilteredView(self, frozenset(kinds))

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, index: int) -> Token:
        if not -self._size <= index < self._size:
            raise IndexError(index)
        return self._items[index % self._size]

    def reset_seek(self) -> None:
        self._seek = 0
        self._seek_generation = self._generation

    @property
    def seekable(self) -> bool:
        return self._seek < self._size

    def next(self) -> None:
        if self.seekable:
            self._seek += 1

    @property
    def current(self) -> Token:
        if self._seek_generation != self._generation:
            raise StaleTokenError('buffer updated while being walked')
        return self[self._seek]

    def __iter__(self) -> Iterator[Token]:
        return iter(self.view())
