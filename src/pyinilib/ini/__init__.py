# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/11/02 22:40:05
# @Author : Kariko Lin

from .consts import (
    CommentCharacter,
    SeparatorCharacter,
    ParsingMethod,
    LineBreakerStyle,
    Comparison,
    StringComparer
)
from .settings import (
    IniFileSettings,
    InvalidSettingsError,
    DEFAULT_SETTINGS,
    INTERNAL_SETTINGS
)
from .tokens import Token, TokenKind, TokenBuffer, TokenIterator, StaleTokenError
from .parser import IniFileParser, IniRegexParser, IniConcurrentRegexParser
from .model import IniSection, IniDictionary
from .file import IniFile
