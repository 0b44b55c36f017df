from pathlib import Path

import pytest
from pydantic import ValidationError

from serbin.conf import DEFAULT_SETTINGS_FILEPATH, UNITTESTS_SETTINGS_FILEPATH
from serbin.conf.get_settings import get_global_settings, get_settings_source
from serbin.conf.settings import SerbinSettings
from serbin.utils.yaml import dict_from_extended_yaml, dict_from_yaml


def test_default_settings() -> None:
    settings = SerbinSettings.from_yaml(filepath=DEFAULT_SETTINGS_FILEPATH)
    assert settings == SerbinSettings()
    assert settings.SIZE_FORMAT == 'N'
    assert settings.INT_FORMAT == 'i'
    assert settings.FLOAT_FORMAT == 'd'
    assert settings.MAX_COLLECTION_LENGTH is None


def test_unittests_settings_extend_default() -> None:
    settings = SerbinSettings.from_yaml(filepath=UNITTESTS_SETTINGS_FILEPATH)
    assert settings.STREAM_CHUNK_SIZE == 16
    assert settings.MAX_COLLECTION_LENGTH == 1_000_000
    assert settings.SIZE_FORMAT == 'N'


def test_global_settings() -> None:
    settings = get_global_settings()
    assert get_settings_source() == UNITTESTS_SETTINGS_FILEPATH
    assert get_global_settings() is settings


def test_global_settings_from_another_file(monkeypatch) -> None:
    get_global_settings()
    monkeypatch.setenv('SERBIN_CONFIG_YAML', DEFAULT_SETTINGS_FILEPATH)
    with pytest.raises(Exception, match='loading config twice'):
        get_global_settings()


@pytest.mark.parametrize('field,value', [
    ('SIZE_FORMAT', 'i'),
    ('SIZE_FORMAT', 'NN'),
    ('INT_FORMAT', 'd'),
    ('INT_FORMAT', 'x'),
    ('FLOAT_FORMAT', 'q'),
    ('ENUM_FORMAT', '?'),
    ('MAX_COLLECTION_LENGTH', 0),
    ('STREAM_CHUNK_SIZE', -1),
    ('UNKNOWN_SETTING', 1),
])
def test_invalid_settings(field: str, value: object) -> None:
    with pytest.raises(ValidationError):
        SerbinSettings.model_validate({field: value})


def test_settings_are_frozen() -> None:
    settings = SerbinSettings()
    with pytest.raises(ValidationError):
        settings.INT_FORMAT = 'q'  # type: ignore[misc]


def test_settings_from_custom_yaml(tmp_path: Path) -> None:
    filepath = tmp_path / 'custom.yml'
    filepath.write_text('extends: default.yml\nINT_FORMAT: q\nSIZE_FORMAT: I\n')
    settings = SerbinSettings.from_yaml(filepath=str(filepath))
    assert settings.INT_FORMAT == 'q'
    assert settings.SIZE_FORMAT == 'I'
    assert settings.FLOAT_FORMAT == 'd'


def test_yaml_extends_relative_file(tmp_path: Path) -> None:
    (tmp_path / 'base.yml').write_text('A: 1\nB:\n  C: 2\n  D: 3\n')
    (tmp_path / 'child.yml').write_text('extends: base.yml\nB:\n  D: 4\n')
    assert dict_from_extended_yaml(filepath=tmp_path / 'child.yml') == {'A': 1, 'B': {'C': 2, 'D': 4}}


def test_yaml_recursive_extends(tmp_path: Path) -> None:
    (tmp_path / 'a.yml').write_text('extends: b.yml\n')
    (tmp_path / 'b.yml').write_text('extends: a.yml\n')
    with pytest.raises(ValueError):
        dict_from_extended_yaml(filepath=tmp_path / 'a.yml')


def test_yaml_invalid_files(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        dict_from_yaml(filepath=tmp_path / 'missing.yml')
    (tmp_path / 'list.yml').write_text('- 1\n- 2\n')
    with pytest.raises(ValueError):
        dict_from_yaml(filepath=tmp_path / 'list.yml')
    (tmp_path / 'empty.yml').write_text('')
    assert dict_from_yaml(filepath=tmp_path / 'empty.yml') == {}
