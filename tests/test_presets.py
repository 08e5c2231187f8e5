"""Tests for the preset catalog."""

import pytest

from voxsign import presets
from voxsign.presets import (
    VOXSIGN_PRESET_DATA,
    clear_cache,
    get_preset,
    list_presets,
    load_presets,
)
from voxsign.sign import generate_sign


@pytest.fixture(autouse=True)
def isolated_catalog(tmp_path, monkeypatch):
    monkeypatch.delenv(VOXSIGN_PRESET_DATA, raising=False)
    monkeypatch.setenv('HOME', str(tmp_path / 'home'))
    clear_cache()
    yield
    clear_cache()


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding='utf-8')
    return path


class TestBundled:

    def test_bundled_names(self):
        names = list_presets()
        for name in ('standard', 'plain-plaque', 'wide-banner', 'hanging', 'hanging-wide-right'):
            assert name in names

    def test_entries_have_description_and_source(self):
        entry = load_presets()['standard']
        assert entry['description']
        assert entry['_source_path'].endswith('presets.yaml')

    @pytest.mark.parametrize("name", ['standard', 'plain-plaque', 'wide-banner',
                                      'hanging', 'hanging-wide-right'])
    def test_bundled_presets_generate(self, name):
        model = generate_sign(get_preset(name))
        assert model.total_voxels > 0

    def test_get_preset_returns_copy(self):
        request = get_preset('standard')
        request['text'] = 'CHANGED'
        assert get_preset('standard')['text'] == 'GEARSTED PATH'

    def test_unknown_preset(self):
        with pytest.raises(KeyError, match='Unknown preset'):
            get_preset('no-such-sign')


class TestOverrides:

    def test_env_directory_overrides_bundled(self, tmp_path, monkeypatch):
        _write(tmp_path / 'custom' / 'presets.yaml', """
schema_version: "1.0"
presets:
  standard:
    description: Local default
    request: {text: LOCAL}
  mine:
    request: {text: MINE}
""")
        monkeypatch.setenv(VOXSIGN_PRESET_DATA, str(tmp_path / 'custom'))
        clear_cache()
        assert get_preset('standard') == {'text': 'LOCAL'}
        assert get_preset('mine') == {'text': 'MINE'}
        assert 'hanging' in list_presets()

    def test_user_config_directory(self, tmp_path):
        _write(tmp_path / 'home' / '.config' / 'voxsign' / 'presets.yaml', """
presets:
  porch: {request: {signType: hanging, text: PORCH}}
""")
        clear_cache()
        assert get_preset('porch')['text'] == 'PORCH'

    def test_env_non_directory_is_skipped(self, tmp_path, monkeypatch, caplog):
        monkeypatch.setenv(VOXSIGN_PRESET_DATA, str(tmp_path / 'nowhere'))
        clear_cache()
        with caplog.at_level('WARNING'):
            names = list_presets()
        assert 'standard' in names
        assert 'not a directory' in caplog.text

    def test_custom_path_disables_search(self, tmp_path):
        path = _write(tmp_path / 'only.yaml', """
schema_version: "1.2"
presets:
  one: {request: {text: ONE}}
""")
        assert list_presets(path) == ['one']

    def test_custom_path_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_presets(tmp_path / 'missing.yaml')

    def test_cache_is_cleared(self, tmp_path):
        path = _write(tmp_path / 'cat.yaml', "presets:\n  a: {request: {text: A}}\n")
        assert list_presets(path) == ['a']
        _write(path, "presets:\n  b: {request: {text: B}}\n")
        assert list_presets(path) == ['a']
        presets.clear_cache()
        assert list_presets(path) == ['b']


class TestMalformed:

    @pytest.mark.parametrize("text,message", [
        ("- just\n- a list\n", "expected dict"),
        ("schema_version: '2.0'\npresets: {}\n", "Unsupported schema version"),
        ("schema_version: '1.0'\n", "missing required 'presets'"),
        ("presets:\n  bad: {description: no request}\n", "needs a 'request'"),
    ])
    def test_rejected(self, tmp_path, text, message):
        path = _write(tmp_path / 'bad.yaml', text)
        with pytest.raises(ValueError, match=message):
            load_presets(path)
