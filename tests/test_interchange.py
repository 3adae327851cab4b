from pathlib import Path

from pyinilib.ini.consts import LineBreakerStyle, ParsingMethod
from pyinilib.ini.model import IniDictionary
from pyinilib.ini.settings import DEFAULT_SETTINGS
from pyinilib.interchange import (
    IniJsonHandler, IniYamlHandler, from_mapping, to_mapping
)

REFORMAT = DEFAULT_SETTINGS.clone(
    parsing_method=ParsingMethod.REFORMAT_FILE,
    line_breaker=LineBreakerStyle.LF)
SOURCE = 'g=1\n[db]\nhost=h\nmirror=a\nmirror=b\n[]\nodd=1\n'


def test_to_mapping_shape():
    assert to_mapping(IniDictionary(SOURCE, REFORMAT)) == {
        '': {'g': '1'},
        'db': {'host': 'h', 'mirror': ['a', 'b']},
        '[]': {'odd': '1'},
    }


def test_yaml_round_trip(tmp_path: Path):
    handler = IniYamlHandler(str(tmp_path / 'x.yaml'))
    handler.write(IniDictionary(SOURCE, REFORMAT))
    back = handler.read()
    assert back.get_values('db', 'mirror') == ['a', 'b']
    assert back.get_value(None, 'g') == '1'
    assert back.sections() == ['db', '']


def test_json_round_trip(tmp_path: Path):
    handler = IniJsonHandler(str(tmp_path / 'x.json'), settings=REFORMAT)
    handler.write(IniDictionary(SOURCE, REFORMAT))
    assert handler.read().content == IniDictionary(SOURCE, REFORMAT).content


def test_yaml_scalars_stringified(tmp_path: Path):
    path = tmp_path / 'y.yaml'
    path.write_text('db:\n  port: 5432\n  debug: true\n  empty:\n',
                    encoding='utf-8')
    ini = IniYamlHandler(str(path)).read()
    assert ini.get_value('db', 'port') == '5432'
    assert ini.get_value('db', 'debug') == 'true'
    assert ini.get_value('db', 'empty') == ''


def test_from_mapping_always_reformats():
    ini = from_mapping({'s': {'k': 'v'}})
    assert ini.settings.parsing_method == ParsingMethod.REFORMAT_FILE
    assert ini.get_value('s', 'k') == 'v'
