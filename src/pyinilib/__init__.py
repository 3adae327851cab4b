# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/11/02 21:35:22
# @Author : Kariko Lin

import logging

from .escaping import escape, unescape
from .ini import (
    IniFile, IniFileSettings, InvalidSettingsError, DEFAULT_SETTINGS,
    CommentCharacter, SeparatorCharacter, ParsingMethod,
    LineBreakerStyle, Comparison,
    IniRegexParser, IniConcurrentRegexParser, IniDictionary, IniSection,
    StaleTokenError
)
from .interchange import IniJsonHandler, IniYamlHandler

__all__ = [
    'escape', 'unescape',
    'IniFile', 'IniFileSettings', 'InvalidSettingsError', 'DEFAULT_SETTINGS',
    'CommentCharacter', 'SeparatorCharacter', 'ParsingMethod',
    'LineBreakerStyle', 'Comparison',
    'IniRegexParser', 'IniConcurrentRegexParser', 'IniDictionary',
    'IniSection', 'StaleTokenError',
    'IniJsonHandler', 'IniYamlHandler'
]

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')
