# -*- encoding: utf-8 -*-
# @File   : file.py
# @Time   : 2024/11/05 23:48:16
# @Author : Kariko Lin

"""`IniFile`, the one thing most callers need.

    ```python
    with IniFile.load('settings.ini') as ini:
        port = ini.get_int('db', 'port', 5432)
        ini['db', 'host'] = 'localhost'
        ini.save()
    ```

Which parser works behind depends on `IniFileSettings.parsing_method`
(and `concurrent`), see `IniFile.create_parser()`.
"""

import codecs
import logging
from os import PathLike
from typing import Sequence

import chardet

from .consts import ParsingMethod, parse_bool
from .model import IniDictionary
from .parser import IniFileParser, IniRegexParser, IniConcurrentRegexParser
from .settings import IniFileSettings, INTERNAL_SETTINGS

__all__ = ['IniFile', 'read_text', 'detect_encoding']

_BOMS = (
    # utf-32 first, its LE mark starts with utf-16's.
    (codecs.BOM_UTF32_LE, 'utf-32'),
    (codecs.BOM_UTF32_BE, 'utf-32'),
    (codecs.BOM_UTF8, 'utf-8-sig'),
    (codecs.BOM_UTF16_LE, 'utf-16'),
    (codecs.BOM_UTF16_BE, 'utf-16'),
)


def _lookup_codec(name: str | None) -> str | None:
    if not name:
        return None
    try:
        return codecs.lookup(name.strip()).name
    except LookupError:
        logging.warning(f'Unknown encoding "{name}", detecting instead.')
        return None


def detect_encoding(raw: bytes) -> str:
    """BOM first, then `chardet` (when it's confident enough), then UTF-8."""
    for bom, codec in _BOMS:
        if raw.startswith(bom):
            return codec
    guess = chardet.detect(raw)
    if guess['encoding'] is None or guess['confidence'] < 0.8:
        return 'utf-8'
    return guess['encoding']


def _decode(raw: bytes, codec: str) -> tuple[str, str]:
    try:
        return raw.decode(codec), codec
    except (UnicodeDecodeError, LookupError):
        pass
    # fallbacks
    guess = chardet.detect(raw)['encoding']
    if guess and guess != codec:
        try:
            logging.warning(f'Failed decoding as {codec}, try {guess}.')
            return raw.decode(guess), guess
        except (UnicodeDecodeError, LookupError):
            pass
    logging.warning(f'Failed decoding as {guess or codec}, '
                    'undecodable bytes replaced.')
    return raw.decode('utf-8', errors='replace'), 'utf-8'


def read_text(
    filename: str | PathLike[str], encoding: str | None = None
) -> tuple[str, str]:
    """Decode a whole file, returning `(text, encoding)`.

    Without `encoding`, a global `encoding = ...` entry of the file wins
    over anything guessed from the bytes, but never over a BOM.
    """
    with open(filename, 'rb') as fp:
        raw = fp.read()

    if codec := _lookup_codec(encoding):
        return _decode(raw, codec)

    text, codec = _decode(raw, detect_encoding(raw))
    if any(raw.startswith(bom) for bom, _ in _BOMS):
        return text, codec
    with IniRegexParser(text, INTERNAL_SETTINGS) as scan:
        declared = _lookup_codec(scan.get_value(None, 'encoding'))
    if declared is None:
        return text, codec
    if declared == codecs.lookup(codec).name:
        return text, declared
    return _decode(raw, declared)


class IniFile:
    """INI 文件门面：按设置挑选解析器，并负责文件读写。

    `section` 为`None`或空串时表示文件头部的全局键值对。
    `ini[section, key]` 取不到值时返回空串，不抛`KeyError`。
    """

    def __init__(
        self, content: str = '',
        settings: IniFileSettings | None = None,
        filename: str | PathLike[str] | None = None,
        encoding: str | None = None
    ) -> None:
        self._settings = settings or IniFileSettings.from_content(content)
        self._parser = self.create_parser(content, self._settings)
        self._fn = filename
        self._codec = encoding

    @staticmethod
    def create_parser(
        content: str, settings: IniFileSettings
    ) -> IniFileParser:
        match settings.parsing_method:
            case ParsingMethod.REFORMAT_FILE:
                return IniDictionary(content, settings)
            case _ if settings.concurrent:
                return IniConcurrentRegexParser(content, settings)
            case _:
                return IniRegexParser(content, settings)

    @classmethod
    def loads(
        cls, text: str, settings: IniFileSettings | None = None
    ) -> 'IniFile':
        return cls(text, settings)

    @classmethod
    def load(
        cls, filename: str | PathLike[str],
        encoding: str | None = None,
        settings: IniFileSettings | None = None
    ) -> 'IniFile':
        text, codec = read_text(filename, encoding)
        settings = settings or IniFileSettings.from_content(text)
        logging.debug(f'{filename} loaded as {codec}.')
        return cls(text, settings, filename, codec)

    def save(
        self, filename: str | PathLike[str] | None = None,
        encoding: str | None = None
    ) -> None:
        filename = filename or self._fn
        if filename is None:
            raise ValueError('no file name to save to.')
        self.flush()
        # newline='' keeps the configured line breaks as they are.
        with open(filename, 'w', encoding=encoding or self._codec or 'utf-8',
                  newline='') as fp:
            fp.write(self.content)

    @property
    def settings(self) -> IniFileSettings:
        return self._settings

    @property
    def parser(self) -> IniFileParser:
        return self._parser

    @property
    def filename(self) -> str | PathLike[str] | None:
        return self._fn

    @property
    def encoding(self) -> str | None:
        return self._codec

    @property
    def content(self) -> str:
        return self._parser.content

    @content.setter
    def content(self, value: str) -> None:
        self._parser.content = value

    def sections(self) -> list[str]:
        return self._parser.sections()

    def keys(self, section: str | None = None) -> list[str]:
        return self._parser.keys(section)

    def get(
        self, section: str | None, key: str, default: str | None = None
    ) -> str | None:
        return self._parser.get_value(section, key, default)

    def get_values(
        self, section: str | None, key: str | None = None
    ) -> list[str]:
        return self._parser.get_values(section, key)

    def set(self, section: str | None, key: str, value: str | None) -> None:
        self._parser.set_value(section, key, value)

    def set_values(
        self, section: str | None, key: str, values: Sequence[str]
    ) -> None:
        self._parser.set_values(section, key, values)

    def get_bool(
        self, section: str | None, key: str, default: bool = False
    ) -> bool:
        value = parse_bool(self.get(section, key))
        return default if value is None else value

    def get_int(
        self, section: str | None, key: str, default: int = 0
    ) -> int:
        """Decimal, or hex as `0x1F` / `1Fh`."""
        value = (self.get(section, key) or '').strip()
        try:
            if value[-1:] in ('h', 'H'):
                return int(value[:-1], 16)
            if value.lower().startswith(('0x', '-0x')):
                return int(value, 16)
            return int(value)
        except ValueError:
            return default

    def flush(self) -> None:
        self._parser.flush()

    def close(self) -> None:
        self._parser.close()

    @property
    def closed(self) -> bool:
        return self._parser.closed

    def __enter__(self) -> 'IniFile':
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def __getitem__(self, key: tuple[str | None, str]) -> str:
        section, entry = key
        return self.get(section, entry, '') or ''

    def __setitem__(self, key: tuple[str | None, str], value: str | None) -> None:
        section, entry = key
        self.set(section, entry, value)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        section, entry = key
        return bool(entry) and self.get(section, entry) is not None

    def __str__(self) -> str:
        return self.content

    def __repr__(self) -> str:
        return f'<IniFile {self._fn or "(memory)"} ({self._codec}), ' \
               f'{type(self._parser).__name__}>'
