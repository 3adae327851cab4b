# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2024/11/04 21:30:52
# @Author : Kariko Lin

"""Basically INI structure, for the reformatting strategy.

Comments, blank lines and unknown lines are dropped while reading,
so `IniDictionary.content` is always regenerated from scratch.
"""

from collections.abc import MutableMapping
from typing import Iterable, Iterator, Sequence
from warnings import warn

from .consts import StringComparer, Comparison
from .parser import IniFileParser
from .settings import IniFileSettings
from .tokens import TokenKind, scan

__all__ = ['IniSection', 'IniDictionary']


class IniSection(MutableMapping[str, str]):
    """INI 小节字典。同一个键允许出现多次，值按出现顺序保存。

    以字典方式访问时只看第一个值；想拿到全部值请用`self.getall()`。
    键名按小节的`StringComparer`规整（忽略大小写时一律小写）。
    """

    def __init__(
        self, section_name: str | None, /,
        comparer: StringComparer | None = None
    ) -> None:
        self._name = section_name
        self._fold = (comparer or Comparison.ORDINAL.comparer).fold
        self._data: dict[str, list[str]] = {}

    @property
    def name(self) -> str | None:
        """`None` for the global scope."""
        return self._name

    def __getitem__(self, key: str) -> str:
        values = self._data.get(self._fold(key))
        if not values:
            raise KeyError(key)
        return values[0]

    def __setitem__(self, key: str, value: str) -> None:
        key = self._fold(key)
        if len(self._data.get(key, ())) > 1:
            warn(f'{self}: "{key}" holds {len(self._data[key])} values, '
                 'all but the one assigned are dropped.')
        self._data[key] = [value]

    def __delitem__(self, key: str) -> None:
        del self._data[self._fold(key)]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._fold(key) in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __str__(self) -> str:
        return '(global)' if self._name is None else f'[{self._name}]'

    def __repr__(self) -> str:
        return '%s { .keys = %d, .values = %d }' % (
            self, len(self._data), sum(len(i) for i in self._data.values()))

    def add(self, key: str, value: str) -> None:
        """Append one more value to `key`, like a duplicated line."""
        self._data.setdefault(self._fold(key), []).append(value)

    def getall(self, key: str) -> list[str]:
        return list(self._data.get(self._fold(key), ()))

    def setall(self, key: str, values: Iterable[str]) -> None:
        """Replace every value of `key`. No values means no `key` at all."""
        key = self._fold(key)
        if values := list(values):
            self._data[key] = values
        else:
            self._data.pop(key, None)

    def pairs(self) -> Iterator[tuple[str, str]]:
        """Every (key, value), duplicates included, in file order per key."""
        for k, vals in self._data.items():
            for v in vals:
                yield k, v

    def to_dict(self) -> dict[str, list[str]]:
        return {k: list(v) for k, v in self._data.items()}


class IniDictionary(IniFileParser):
    """Reformatting strategy: section -> key -> values, all in memory.

    Reads once, then answers from the dicts. `content` writes the whole
    thing out again: global entries first, then each section, one blank
    line in between.
    """

    def __init__(
        self, content: str = '', settings: IniFileSettings | None = None
    ) -> None:
        super().__init__(content, settings)
        self._sections: dict[str | None, IniSection] = {}
        self.__load(content or '')

    def __load(self, content: str) -> None:
        self._sections.clear()
        this_sect = self.header
        for i in scan(self._settings.pattern, content):
            match i.kind:
                case TokenKind.SECTION:
                    this_sect = self.setdefault(i.name)
                case TokenKind.ENTRY:
                    this_sect.add(i.key, self._decode(i.value))
                case _:
                    pass

    @property
    def header(self) -> IniSection:
        """游离于任何小节之外的键值对。"""
        return self.setdefault(None)

    def setdefault(self, section: str | None) -> IniSection:
        key = None if section is None else self._comparer.fold(section)
        if key not in self._sections:
            self._sections[key] = IniSection(key, self._comparer)
        return self._sections[key]

    def section(self, section: str | None) -> IniSection | None:
        """`None` and `''` both give the global scope, if there is one."""
        if self._is_global(section):
            return self._sections.get(None)
        return self._sections.get(self._comparer.fold(section))

    def __iter__(self) -> Iterator[IniSection]:
        return iter(self._sections.values())

    @property
    def content(self) -> str:
        self._check_open()
        lb = self._line_break
        blocks: list[str] = []
        for sect in self._sections.values():
            lines = [] if sect.name is None else [f'[{sect.name}]']
            lines.extend(
                self._entry_line(k, self._encode(v)) for k, v in sect.pairs())
            if lines:
                blocks.append(lb.join(lines) + lb)
        return lb.join(blocks)

    @content.setter
    def content(self, value: str) -> None:
        self._check_open()
        self._line_break = self._resolve_line_break(value or '')
        self.__load(value or '')

    def sections(self) -> list[str]:
        self._check_open()
        return [i for i in self._sections if i is not None]

    def keys(self, section: str | None) -> list[str]:
        self._check_open()
        sect = self.section(section)
        return [] if sect is None else list(sect)

    def get_values(
        self, section: str | None, key: str | None = None
    ) -> list[str]:
        self._check_open()
        if (sect := self.section(section)) is None:
            return []
        if key:
            return sect.getall(key)
        return [v for _, v in sect.pairs()]

    def _lookup(self, section: str | None, key: str) -> str | None:
        sect = self.section(section)
        return sect.get(key) if sect is not None else None

    def _stored(self, value: str) -> str:
        """What reading `value` back from `content` would give."""
        return self._decode(self._encode(value).strip())

    def _replace_first(self, section: str | None, key: str, value: str) -> None:
        value = self._stored(value)
        sect = self.setdefault(None if self._is_global(section) else section)
        values = sect.getall(key)
        if values:
            values[0] = value
            sect.setall(key, values)
        else:
            sect.add(key, value)

    def _replace_all(
        self, section: str | None, key: str, values: Sequence[str]
    ) -> None:
        if not values and self.section(section) is None:
            return
        sect = self.setdefault(None if self._is_global(section) else section)
        sect.setall(key, [self._stored(v) for v in values])

    def close(self) -> None:
        super().close()
        self._sections.clear()
