from datetime import date

import pytest

from pyinilib.ini.consts import Comparison, LineBreakerStyle, ParsingMethod
from pyinilib.ini.parser import IniRegexParser
from pyinilib.ini.settings import DEFAULT_SETTINGS

LF = DEFAULT_SETTINGS.clone(line_breaker=LineBreakerStyle.LF)


@pytest.fixture(params=[ParsingMethod.PRESERVE_ORIGINAL,
                        ParsingMethod.QUICK_SCAN])
def settings(request):
    return LF.clone(parsing_method=request.param)


def test_get_value(settings):
    ini = IniRegexParser('[db]\r\nhost=localhost\r\nport=5432\r\n', settings)
    assert ini.get_value('db', 'port', '0') == '5432'
    assert ini.get_value('db', 'user', 'root') == 'root'
    assert ini.get_value('db', 'user') is None


def test_strategy_caches_or_not():
    assert IniRegexParser('', LF).cached
    assert not IniRegexParser('', LF.clone(
        parsing_method=ParsingMethod.QUICK_SCAN)).cached


def test_new_section_on_empty_content(settings):
    ini = IniRegexParser('', settings)
    ini.set_value('net', 'timeout', '30')
    assert ini.content == '[net]\ntimeout=30\n'
    assert ini.get_value('net', 'timeout') == '30'


def test_new_section_after_blank_line(settings):
    ini = IniRegexParser('[a]\nx=1', settings)
    ini.set_value('b', 'y', '2')
    assert ini.content == '[a]\nx=1\n\n[b]\ny=2\n'


def test_comment_kept_byte_identical(settings):
    ini = IniRegexParser('; note\r\nkey=val\r\n', settings)
    ini.set_value(None, 'key', 'new')
    assert ini.content == '; note\r\nkey=new\r\n'


def test_only_value_span_changes(settings):
    before = '; head\n[a]\nx = 1 ; c\n\n[b]\n  x = 2   # trailing\n'
    ini = IniRegexParser(before, settings)
    ini.set_value('b', 'x', '22')
    assert ini.content == before.replace('x = 2 ', 'x = 22 ')


def test_case_policy(settings):
    ini = IniRegexParser('', settings)
    ini.set_value('a', 'b', 'v')
    assert ini.get_value('A', 'B') == 'v'

    strict = IniRegexParser('', settings.clone(comparison=Comparison.ORDINAL))
    strict.set_value('a', 'b', 'v')
    assert strict.get_value('A', 'B', 'default') == 'default'
    assert strict.get_value('a', 'b') == 'v'


def test_names_reported_folded(settings):
    ini = IniRegexParser('[Main]\nKey=1\nkey=2\n[main]\nOther=3\n', settings)
    assert ini.sections() == ['main']
    assert ini.keys('MAIN') == ['key', 'other']


def test_multiplicity(settings):
    ini = IniRegexParser('', settings)
    ini.set_values('s', 'k', ['x', 'y', 'z'])
    assert ini.get_values('s', 'k') == ['x', 'y', 'z']
    assert ini.content == '[s]\nk=x\nk=y\nk=z\n'
    ini.set_values('s', 'k', [])
    assert ini.get_values('s', 'k') == []
    assert ini.content == '[s]\n'


def test_set_values_fewer_removes_rest(settings):
    ini = IniRegexParser('[s]\nk=1\nk=2\nk=3\nj=0\n', settings)
    ini.set_values('s', 'k', ['a'])
    assert ini.content == '[s]\nk=a\nj=0\n'


def test_set_values_more_appends_after_last_entry(settings):
    ini = IniRegexParser('[s]\nk=1\nj=0\n[t]\n', settings)
    ini.set_values('s', 'k', ['a', 'b'])
    assert ini.content == '[s]\nk=a\nj=0\nk=b\n[t]\n'


def test_set_value_touches_first_only(settings):
    ini = IniRegexParser('[s]\nk=1\nk=2\n', settings)
    ini.set_value('s', 'k', '9')
    assert ini.get_values('s', 'k') == ['9', '2']


def test_deletion(settings):
    ini = IniRegexParser('[s]\nk=1\nj=2\nk=3\n', settings)
    ini.set_value('s', 'k', None)
    assert 'k' not in ini.keys('s')
    assert ini.content == '[s]\nj=2\n'


def test_deletion_keeps_line_when_not_leading(settings):
    ini = IniRegexParser('[s] k=1\nj=2\n', settings)
    ini.set_value('s', 'k', '')
    assert ini.content == '[s] \nj=2\n'


def test_read_only_is_a_no_op(settings):
    before = '[s]\nk=1\n'
    ini = IniRegexParser(before, settings.clone(read_only=True))
    ini.set_value('s', 'k', '2')
    ini.set_value('s', 'new', 'x')
    ini.set_values('s', 'k', [])
    assert ini.content == before


def test_global_scope(settings):
    ini = IniRegexParser('g=1\n[a]\nx=1\n', settings)
    assert ini.get_value(None, 'g') == '1'
    assert ini.get_value('', 'g') == '1'
    assert ini.get_value(None, 'x') is None
    assert ini.keys(None) == ['g']


def test_new_global_entry_goes_before_first_header(settings):
    ini = IniRegexParser('; top\n[a]\nx=1\n', settings)
    ini.set_value(None, 'g', '1')
    assert ini.content == '; top\ng=1\n[a]\nx=1\n'


def test_new_global_entry_appended_without_headers(settings):
    ini = IniRegexParser('x=1', settings)
    ini.set_value(None, 'y', '2')
    assert ini.content == 'x=1\ny=2\n'


def test_header_only_section(settings):
    ini = IniRegexParser('[a]\n[b]\nx=1\n', settings)
    ini.set_value('a', 'k', 'v')
    assert ini.content == '[a]\nk=v\n[b]\nx=1\n'


def test_empty_section_name_is_not_global(settings):
    ini = IniRegexParser('[]\nx=1\n', settings)
    assert ini.sections() == ['']
    assert ini.get_value(None, 'x') is None
    assert ini.get_value('', 'x') is None


def test_section_split_in_blocks(settings):
    ini = IniRegexParser('[a]\nx=1\n[b]\nx=0\n[a]\nx=2\n', settings)
    assert ini.get_values('a', 'x') == ['1', '2']
    assert ini.get_values('a') == ['1', '2']


def test_escaping(settings):
    ini = IniRegexParser('', settings.clone(allow_escape_characters=True))
    ini.set_value(None, 'k', 'a\tb')
    assert ini.content == 'k=a\\tb\n'
    assert ini.get_value(None, 'k') == 'a\tb'


def test_cr_line_breaks(settings):
    ini = IniRegexParser('a=1\rb=2\r', settings.clone(
        line_breaker=LineBreakerStyle.AUTO))
    assert ini.line_break == '\r'
    ini.set_value(None, 'b', '3')
    ini.set_value(None, 'c', '4')
    assert ini.content == 'a=1\rb=3\rc=4\r'


def test_add_missing_entries(settings):
    ini = IniRegexParser('', settings.clone(add_missing_entries=True))
    assert ini.get_value('s', 'k', 'd') == 'd'
    assert ini.get_value('s', 'k') == 'd'


def test_content_reassignment(settings):
    ini = IniRegexParser('a=1', settings)
    assert ini.keys(None) == ['a']
    ini.content = '[s]\nb=2'
    assert ini.keys(None) == []
    assert ini.sections() == ['s']


def test_programmer_errors(settings):
    ini = IniRegexParser('a=1', settings)
    with pytest.raises(ValueError):
        ini.get_value(None, '')
    with pytest.raises(ValueError):
        ini.set_value(None, None, 'x')
    with pytest.raises(TypeError):
        ini.set_values(None, 'a', 'xyz')


def test_closed_parser(settings):
    with IniRegexParser('a=1', settings) as ini:
        assert ini.get_value(None, 'a') == '1'
    assert ini.closed
    with pytest.raises(ValueError):
        ini.get_value(None, 'a')


def test_escape_substitutions(settings):
    ini = IniRegexParser('k=a\\lb\nd=\\d\nt=\\D\n', settings.clone(
        allow_escape_characters=True))
    today = date.today().strftime('%x')
    assert ini.get_value(None, 'k') == 'a\nb'
    assert ini.get_value(None, 'd') == today
    assert ini.get_value(None, 't').startswith(today + ' ')


def test_escape_substitutions_need_escaping(settings):
    ini = IniRegexParser('k=a\\lb\n', settings)
    assert ini.get_value(None, 'k') == 'a\\lb'
