"""Config loading/validation tests."""

import json
import pytest
from pathlib import Path

from entroscan.config import (
    DEFAULT_CONFIG,
    DEFAULT_IGNORED_EXTENSIONS,
    ScanConfig,
    get_config_path,
    load_config,
    validate_config,
)
from entroscan.utils import deep_merge, parse_suffixes


class TestDefaultConfig:
    def test_validates_clean(self) -> None:
        assert validate_config(DEFAULT_CONFIG) == []

    def test_matches_scan_config_defaults(self) -> None:
        assert ScanConfig.from_dict(DEFAULT_CONFIG) == ScanConfig()

    def test_default_ignores(self) -> None:
        assert ".pdf" in DEFAULT_IGNORED_EXTENSIONS
        assert ".pyc" in DEFAULT_IGNORED_EXTENSIONS
        assert list(DEFAULT_IGNORED_EXTENSIONS) == sorted(DEFAULT_IGNORED_EXTENSIONS)


class TestScanConfig:
    def test_frozen(self) -> None:
        config = ScanConfig()
        with pytest.raises(AttributeError):
            config.result_count = 3

    def test_from_dict_merges_ignores(self) -> None:
        config = ScanConfig.from_dict({"ignored_extensions": ["min.css", "_test.go"]})
        assert "min.css" in config.ignored_extensions
        assert ".pdf" in config.ignored_extensions

    def test_from_dict_without_default_ignores(self) -> None:
        config = ScanConfig.from_dict(
            {"ignored_extensions": ["min.css"], "use_default_ignores": False}
        )
        assert config.ignored_extensions == ("min.css",)

    def test_from_dict_normalises_extensions(self) -> None:
        config = ScanConfig.from_dict({"extensions": ["py", "", "go", "py"]})
        assert config.extensions == ("go", "py")


class TestValidation:
    def test_negative_result_count(self) -> None:
        errors = validate_config({"result_count": -1})
        assert any("result_count" in e for e in errors)

    def test_zero_result_count_allowed(self) -> None:
        assert validate_config({"result_count": 0}) == []

    def test_min_characters_must_be_positive(self) -> None:
        assert validate_config({"min_characters": 0})

    def test_bool_is_not_an_int(self) -> None:
        assert validate_config({"min_characters": True})

    def test_bad_bool(self) -> None:
        errors = validate_config({"explore_hidden": "yes"})
        assert any("explore_hidden" in e for e in errors)

    def test_bad_extension_list(self) -> None:
        errors = validate_config({"extensions": "py,go"})
        assert any("extensions" in e for e in errors)

    def test_unknown_encoding(self) -> None:
        errors = validate_config({"encoding": "klingon-8"})
        assert any("encoding" in e for e in errors)

    @pytest.mark.parametrize("encoding", ["hex", "rot13", "base64"])
    def test_non_text_codec_rejected(self, encoding: str) -> None:
        errors = validate_config({"encoding": encoding})
        assert any("not a text encoding" in e for e in errors)

    @pytest.mark.parametrize("encoding", ["utf-8", "utf-16", "latin-1", "cp1252"])
    def test_text_encodings_allowed(self, encoding: str) -> None:
        assert validate_config({"encoding": encoding}) == []

    def test_max_workers(self) -> None:
        assert validate_config({"max_workers": None}) == []
        assert validate_config({"max_workers": 4}) == []
        assert validate_config({"max_workers": 0})

    def test_unknown_key(self) -> None:
        errors = validate_config({"colour": "red"})
        assert any("colour" in e for e in errors)


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path: Path) -> None:
        if get_config_path(tmp_path) is not None:
            pytest.skip("an .entroscan file exists above the temp dir")
        assert load_config(start_dir=tmp_path) == DEFAULT_CONFIG

    def test_load_json(self, tmp_path: Path) -> None:
        path = tmp_path / ".entroscan.json"
        path.write_text(json.dumps({"result_count": 3, "extensions": [".py"]}))
        config = load_config(path)
        assert config["result_count"] == 3
        assert config["extensions"] == [".py"]
        assert config["min_characters"] == 8

    def test_load_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / ".entroscan.yaml"
        path.write_text("min_characters: 12\nexplore_hidden: true\n")
        config = load_config(path)
        assert config["min_characters"] == 12
        assert config["explore_hidden"] is True

    def test_discovers_file_in_parent(self, tmp_path: Path) -> None:
        (tmp_path / ".entroscan.yml").write_text("result_count: 4\n")
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        assert get_config_path(child) == (tmp_path / ".entroscan.yml").resolve()
        assert load_config(start_dir=child)["result_count"] == 4

    def test_corrupt_file_falls_back(self, tmp_path: Path) -> None:
        path = tmp_path / ".entroscan.json"
        path.write_text("{not json")
        assert load_config(path) == DEFAULT_CONFIG

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "nope.json") == DEFAULT_CONFIG


class TestHelpers:
    def test_deep_merge(self) -> None:
        base = {"a": 1, "nested": {"x": 1, "y": 2}}
        merged = deep_merge(base, {"nested": {"y": 3}, "b": 2})
        assert merged == {"a": 1, "b": 2, "nested": {"x": 1, "y": 3}}
        assert base["nested"]["y"] == 2

    def test_parse_suffixes(self) -> None:
        assert parse_suffixes("go,,py, js ,go") == ("go", "js", "py")
        assert parse_suffixes("") == ()
        assert parse_suffixes(["b", "a"]) == ("a", "b")
