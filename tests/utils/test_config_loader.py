from pathlib import Path

import pytest

from svdhtml.core.exceptions import ConfigurationError
from svdhtml.core.model import Access
from svdhtml.utils.config_loader import (
    RenderConfig,
    _DEFAULT_CONFIG_PATH,
    _load_yaml_file,
    _parse_render_cfg_from_dict,
    load_config,
)


class TestRenderConfig:
    def test_defaults(self):
        cfg = RenderConfig()

        assert cfg.renderer == "pages"
        assert cfg.sort_peripherals == "document"
        assert cfg.index_name == "index.html"
        assert cfg.show_bit_numbers is True

    def test_immutable(self):
        cfg = RenderConfig()
        with pytest.raises(AttributeError):
            cfg.renderer = "single"

    def test_access_label_falls_back_to_builtin(self):
        cfg = RenderConfig(access_labels={Access.READ_ONLY: "ro"})

        assert cfg.access_label(Access.READ_ONLY) == "ro"
        assert cfg.access_label(Access.WRITE_ONLY) == "W"
        assert cfg.access_label(None) == "-"


class TestLoadConfig:
    def test_bundled_defaults(self):
        cfg = load_config()

        assert _DEFAULT_CONFIG_PATH.exists()
        assert cfg.title is None
        assert cfg.renderer == "pages"
        assert cfg.access_labels[Access.READ_WRITE_ONCE] == "RWO"

    def test_user_file_overrides(self, write_yaml):
        path = write_yaml(
            {
                "title": "Acme register map",
                "renderer": "single",
                "sort_peripherals": "address",
                "show_bit_numbers": False,
            }
        )

        cfg = load_config(path)

        assert cfg.title == "Acme register map"
        assert cfg.renderer == "single"
        assert cfg.sort_peripherals == "address"
        assert cfg.show_bit_numbers is False
        assert cfg.index_name == "index.html"

    def test_access_labels_merge_key_by_key(self, write_yaml):
        path = write_yaml({"access_labels": {"read-only": "RO"}})

        cfg = load_config(str(path))

        assert cfg.access_labels[Access.READ_ONLY] == "RO"
        assert cfg.access_labels[Access.READ_WRITE] == "RW"

    def test_empty_file_gives_defaults(self, temp_yaml_file):
        temp_yaml_file.write_text("", encoding="utf-8")

        assert load_config(temp_yaml_file) == load_config()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Failed to parse config"):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, temp_yaml_file):
        temp_yaml_file.write_text("title: [unclosed", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config(temp_yaml_file)

    def test_non_mapping(self, temp_yaml_file):
        temp_yaml_file.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="mapping"):
            _load_yaml_file(Path(temp_yaml_file))


class TestValidation:
    def test_unknown_key(self):
        with pytest.raises(ConfigurationError) as excinfo:
            _parse_render_cfg_from_dict({"colour": "blue"})

        assert excinfo.value.config_key == "colour"

    def test_bad_sort_order(self):
        with pytest.raises(ConfigurationError) as excinfo:
            _parse_render_cfg_from_dict({"sort_peripherals": "size"})

        assert excinfo.value.config_key == "sort_peripherals"

    def test_unknown_access_token(self):
        with pytest.raises(ConfigurationError) as excinfo:
            _parse_render_cfg_from_dict({"access_labels": {"sometimes": "S"}})

        assert excinfo.value.config_key == "access_labels"

    def test_access_labels_must_be_mapping(self):
        with pytest.raises(ConfigurationError):
            _parse_render_cfg_from_dict({"access_labels": ["R"]})

    def test_show_bit_numbers_must_be_bool(self):
        with pytest.raises(ConfigurationError):
            _parse_render_cfg_from_dict({"show_bit_numbers": "yes"})

    def test_index_name_must_be_plain(self):
        with pytest.raises(ConfigurationError):
            _parse_render_cfg_from_dict({"index_name": "../index.html"})

    def test_empty_suffix(self):
        with pytest.raises(ConfigurationError) as excinfo:
            _parse_render_cfg_from_dict({"page_suffix": ""})

        assert excinfo.value.config_key == "page_suffix"
