import pytest

from pyinilib.ini.consts import Comparison, LineBreakerStyle, ParsingMethod
from pyinilib.ini.model import IniDictionary, IniSection
from pyinilib.ini.settings import DEFAULT_SETTINGS

REFORMAT = DEFAULT_SETTINGS.clone(
    parsing_method=ParsingMethod.REFORMAT_FILE,
    line_breaker=LineBreakerStyle.LF)


def test_duplicates_kept_in_order():
    ini = IniDictionary('[a]\nx=1\nx=2\n', REFORMAT)
    assert ini.get_values('a', 'x') == ['1', '2']
    assert ini.content == '[a]\nx=1\nx=2\n'


def test_layout_is_regenerated():
    ini = IniDictionary('; c\n[a]\nx = 1 ; why\n\n\n  x=2\n??\n', REFORMAT)
    assert ini.content == '[a]\nx=1\nx=2\n'


def test_global_block_first_and_blank_lines():
    ini = IniDictionary('g=1\n[a]\nx=1\n[b]\n', REFORMAT)
    assert ini.sections() == ['a', 'b']
    assert ini.content == 'g=1\n\n[a]\nx=1\n\n[b]\n'


def test_empty_content():
    ini = IniDictionary('', REFORMAT)
    assert ini.content == ''
    ini.set_value('net', 'timeout', '30')
    assert ini.content == '[net]\ntimeout=30\n'


def test_set_value_replaces_first_only():
    ini = IniDictionary('[a]\nx=1\nx=2\n', REFORMAT)
    ini.set_value('a', 'x', '9')
    assert ini.get_values('a', 'x') == ['9', '2']
    assert ini.get_value('a', 'x') == '9'


def test_set_values_and_delete():
    ini = IniDictionary('[a]\nx=1\ny=0\n', REFORMAT)
    ini.set_values('a', 'x', ['p', 'q', 'r'])
    assert ini.get_values('a', 'x') == ['p', 'q', 'r']
    ini.set_value('a', 'x', None)
    assert ini.keys('a') == ['y']
    assert ini.get_values('a') == ['0']


def test_case_policy():
    ini = IniDictionary('', REFORMAT)
    ini.set_value('Sec', 'Key', 'v')
    assert ini.sections() == ['sec']
    assert ini.keys('SEC') == ['key']
    assert ini.get_value('SEC', 'KEY') == 'v'

    strict = IniDictionary('', REFORMAT.clone(comparison=Comparison.ORDINAL))
    strict.set_value('Sec', 'Key', 'v')
    assert strict.get_value('sec', 'key', 'default') == 'default'
    assert strict.content == '[Sec]\nKey=v\n'


def test_empty_section_name():
    ini = IniDictionary('g=1\n[]\nx=1\n', REFORMAT)
    assert ini.sections() == ['']
    assert ini.keys(None) == ['g']
    assert ini.content == 'g=1\n\n[]\nx=1\n'


def test_read_only():
    ini = IniDictionary('[a]\nx=1\n', REFORMAT.clone(read_only=True))
    ini.set_value('a', 'x', '2')
    ini.set_values('b', 'y', ['1'])
    assert ini.content == '[a]\nx=1\n'


def test_escaping_on_output_only():
    settings = REFORMAT.clone(allow_escape_characters=True)
    ini = IniDictionary('k=a\\tb\n', settings)
    assert ini.get_value(None, 'k') == 'a\tb'
    assert ini.content == 'k=a\\tb\n'


def test_content_reassignment():
    ini = IniDictionary('[a]\nx=1\n', REFORMAT)
    ini.content = '[b]\ny=2\n'
    assert ini.sections() == ['b']
    assert ini.get_value('a', 'x') is None


def test_section_mapping():
    sect = IniSection('s', Comparison.ORDINAL_IGNORE_CASE.comparer)
    sect.add('X', '1')
    sect.add('x', '2')
    assert sect['x'] == '1'
    assert 'X' in sect and len(sect) == 1
    assert sect.getall('X') == ['1', '2']
    with pytest.warns(UserWarning):
        sect['x'] = '3'
    assert sect.getall('x') == ['3']
    del sect['X']
    assert 'x' not in sect
    assert str(sect) == '[s]'


def test_padded_values_read_back_as_reparsed():
    ini = IniDictionary('', REFORMAT)
    ini.set_value('s', 'k', ' v ')
    ini.set_values('s', 'j', ['  a', 'b  '])
    assert ini.get_value('s', 'k') == 'v'
    assert ini.get_values('s', 'j') == ['a', 'b']

    again = IniDictionary(ini.content, REFORMAT)
    assert again.get_value('s', 'k') == 'v'
    assert again.get_values('s', 'j') == ['a', 'b']


def test_escaped_padding_survives():
    settings = REFORMAT.clone(allow_escape_characters=True)
    ini = IniDictionary('', settings)
    ini.set_value(None, 'k', '\tv')
    assert ini.get_value(None, 'k') == '\tv'
    assert IniDictionary(ini.content, settings).get_value(None, 'k') == '\tv'


def test_line_break_substitution():
    settings = REFORMAT.clone(allow_escape_characters=True,
                              line_breaker=LineBreakerStyle.CRLF)
    ini = IniDictionary('k=a\\lb\r\n', settings)
    assert ini.get_value(None, 'k') == 'a\r\nb'
    assert ini.content == 'k=a\\r\\nb\r\n'
