import pytest
import semantic_version

from modportal.exceptions import ConfigError, ConfigParseError, ConfigValidationError
from modportal.models import ConfigModEntry, ModList, ModListEntry, ModPortalConfig
from modportal.utils import (
    config_format,
    dump_config,
    load_config_file,
    parse_config,
    save_config_file,
)


YAML_CONFIG = """
Metadata:
  _v: 0.1.0
  FactorioVersion: 1.1
  FactorioModFolder: /tmp/factorio/mods
Mods:
  - name: flib
    version: ">=0.12.0"
    enabled: true
  - name: helmod
    version: "*"
  - name: old_mod
    enabled: false
  - stdlib
"""


def test_config_from_yaml():
    config = ModPortalConfig.from_dict(parse_config(YAML_CONFIG, "yaml"))
    assert config.metadata.factorio_version == "1.1.0"
    assert config.metadata.game_version == "1.1"
    assert config.target_dir == "/tmp/factorio/mods"
    assert [m.name for m in config.enabled_mods] == ["flib", "helmod", "stdlib"]
    assert config.mods[0].version == semantic_version.SimpleSpec(">=0.12.0")
    assert config.mods[1].version is None


def test_missing_metadata_uses_defaults():
    config = ModPortalConfig.from_dict({"Mods": ["flib"]})
    assert config.metadata.version == "0.1.0"
    assert config.metadata.factorio_version is None
    assert config.target_dir.endswith("mods")


def test_invalid_version_range_is_rejected():
    with pytest.raises(ConfigValidationError):
        ConfigModEntry.from_dict({"name": "flib", "version": ">= banana"})


def test_entry_without_name_is_rejected():
    with pytest.raises(ConfigValidationError):
        ConfigModEntry.from_dict({"version": ">=1.0.0"})


def test_top_level_must_be_mapping():
    with pytest.raises(ConfigParseError):
        ModPortalConfig.from_dict(["flib"])


def test_invalid_max_concurrent():
    with pytest.raises(ConfigValidationError):
        ModPortalConfig.from_dict({"Mods": [], "MaxConcurrent": 0})


def test_round_trip_through_dict():
    config = ModPortalConfig.from_dict(parse_config(YAML_CONFIG, "yaml"))
    again = ModPortalConfig.from_dict(config.to_dict())
    assert again == config


@pytest.mark.parametrize("fmt", ["yaml", "toml", "json"])
def test_dump_and_parse(fmt):
    data = ModPortalConfig.from_dict(parse_config(YAML_CONFIG, "yaml")).to_dict()
    assert parse_config(dump_config(data, fmt), fmt) == data


def test_config_format():
    assert config_format("mods.yml") == "yaml"
    assert config_format("mods.TOML") == "toml"
    with pytest.raises(ConfigError):
        config_format("mods.ini")


def test_parse_error_is_wrapped():
    with pytest.raises(ConfigParseError):
        parse_config("{not json", "json")


def test_add_mod_skips_duplicates():
    config = ModPortalConfig.from_dict({"Mods": ["flib"]})
    assert not config.add_mod(ConfigModEntry(name="flib"))
    assert config.add_mod(ConfigModEntry(name="helmod"))


@pytest.mark.asyncio
async def test_config_file_round_trip(tmp_path):
    path = str(tmp_path / "mods.yaml")
    config = ModPortalConfig.from_dict(parse_config(YAML_CONFIG, "yaml"))
    await save_config_file(path, config.to_dict())
    assert ModPortalConfig.from_dict(await load_config_file(path)) == config


@pytest.mark.asyncio
async def test_load_missing_config(tmp_path):
    with pytest.raises(ConfigError):
        await load_config_file(str(tmp_path / "absent.yaml"))


@pytest.mark.asyncio
async def test_mod_list_load_and_save(tmp_path):
    path = tmp_path / "mod-list.json"
    path.write_text(
        '{"mods": [{"name": "base", "enabled": true}, {"name": "flib", "enabled": false}]}'
    )
    mod_list = await ModList.load(str(path))
    assert mod_list.mods == [ModListEntry("base", True), ModListEntry("flib", False)]
    assert mod_list.enabled_names == ["base"]

    mod_list.mods.append(ModListEntry("helmod"))
    await mod_list.save(str(path))
    assert (await ModList.load(str(path))).enabled_names == ["base", "helmod"]


@pytest.mark.asyncio
async def test_mod_list_rejects_bad_json(tmp_path):
    path = tmp_path / "mod-list.json"
    path.write_text("not json")
    with pytest.raises(ConfigParseError):
        await ModList.load(str(path))


@pytest.mark.parametrize(
    "expression, expected",
    [
        (">= 1.0.0", ">=1.0.0"),
        (">= 0.1.0, < 0.2.0", ">=0.1.0,<0.2.0"),
        (" * ", None),
    ],
)
def test_version_range_with_spaces(expression, expected):
    entry = ConfigModEntry.from_dict({"name": "flib", "version": expression})
    if expected is None:
        assert entry.version is None
    else:
        assert entry.version == semantic_version.SimpleSpec(expected)
