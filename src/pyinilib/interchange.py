# -*- encoding: utf-8 -*-
# @File   : interchange.py
# @Time   : 2024/11/07 20:05:44
# @Author : Kariko Lin

"""INI structure to/from JSON and YAML.

Both share one shape, global entries under `""`:

    ```yaml
    "":
      encoding: utf-8
    db:
      host: localhost
      mirror: [a.example, b.example]  # duplicated keys
    ```

A literal `[]` section is kept under `"[]"`, since no real section name
may hold a `]`. Comments are not carried over, as in `IniDictionary`.
"""

import json
from typing import Any

import yaml

from .abstract import FileHandler
from .ini.consts import ParsingMethod
from .ini.model import IniDictionary, IniSection
from .ini.settings import IniFileSettings, DEFAULT_SETTINGS

__all__ = ['IniJsonHandler', 'IniYamlHandler', 'to_mapping', 'from_mapping']

GLOBAL_KEY = ''
EMPTY_SECTION_KEY = '[]'


def _section_key(section: IniSection) -> str:
    match section.name:
        case None:
            return GLOBAL_KEY
        case '':
            return EMPTY_SECTION_KEY
        case name:
            return name


def to_mapping(instance: IniDictionary) -> dict[str, dict[str, Any]]:
    ret: dict[str, dict[str, Any]] = {}
    for sect in instance:
        if sect.name is None and not sect:
            continue
        ret[_section_key(sect)] = {
            k: v[0] if len(v) == 1 else v
            for k, v in sect.to_dict().items()
        }
    return ret


def _to_str(value: Any) -> str:
    match value:
        case None:
            return ''
        case bool():
            return 'true' if value else 'false'
        case _:
            return str(value)


def from_mapping(
    src: dict[str, Any], settings: IniFileSettings | None = None
) -> IniDictionary:
    settings = (settings or DEFAULT_SETTINGS).clone(
        parsing_method=ParsingMethod.REFORMAT_FILE,
        concurrent=False, deferred_writes=False)
    ret = IniDictionary('', settings)
    for name, pairs in (src or {}).items():
        match name:
            case '' | None:
                sect = ret.header
            case '[]':
                sect = ret.setdefault('')
            case _:
                sect = ret.setdefault(str(name))
        for k, v in (pairs or {}).items():
            values = v if isinstance(v, list) else [v]
            sect.setall(str(k), [_to_str(i) for i in values])
    return ret


class IniJsonHandler(FileHandler[IniDictionary]):
    def __init__(
        self, filename: str, encoding: str = 'utf-8',
        settings: IniFileSettings | None = None
    ) -> None:
        super().__init__(filename, encoding)
        self._settings = settings

    def read(self) -> IniDictionary:
        with open(self._fn, 'r', encoding=self._codec) as fp:
            return from_mapping(json.load(fp), self._settings)

    def write(self, instance: IniDictionary, indent: int = 2) -> None:
        with open(self._fn, 'w', encoding=self._codec) as fp:
            json.dump(to_mapping(instance), fp,
                      ensure_ascii=False, indent=indent)


class IniYamlHandler(FileHandler[IniDictionary]):
    def __init__(
        self, filename: str, encoding: str = 'utf-8',
        settings: IniFileSettings | None = None
    ) -> None:
        super().__init__(filename, encoding)
        self._settings = settings

    def read(self) -> IniDictionary:
        with open(self._fn, 'r', encoding=self._codec) as fp:
            return from_mapping(yaml.safe_load(fp), self._settings)

    def write(self, instance: IniDictionary) -> None:
        with open(self._fn, 'w', encoding=self._codec) as fp:
            yaml.safe_dump(to_mapping(instance), fp,
                           allow_unicode=True, sort_keys=False)
