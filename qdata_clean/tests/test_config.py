from pathlib import Path

import pytest

from qdata_clean import clean, parse
from qdata_clean.config import DEFAULT_CONFIG, load_config, section


def test_defaults_without_file():
    assert load_config(None) == DEFAULT_CONFIG
    assert load_config(None) is not DEFAULT_CONFIG


def test_yaml_overrides_merge_per_key(tmp_path: Path):
    path = tmp_path / "qdata.yaml"
    path.write_text("cleaning:\n  outlier_method: tail\n  tail_fraction: 0.5\n", encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg["cleaning"]["outlier_method"] == "tail"
    assert cfg["cleaning"]["decimals"] == 4
    assert cfg["export"] == DEFAULT_CONFIG["export"]

    df = parse("a.csv", "v\n1\n2\n3\n4\n")
    assert clean(df, ["remove_outliers"], cfg)["v"].tolist() == ["1", "2"]


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


def test_non_mapping_document(tmp_path: Path):
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_section_must_be_a_mapping(tmp_path: Path):
    path = tmp_path / "bad_section.yaml"
    path.write_text("cleaning: tail\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_empty_section_and_extra_keys(tmp_path: Path):
    path = tmp_path / "extra.yaml"
    path.write_text("export:\nowner: lab-7\n", encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg["export"] == DEFAULT_CONFIG["export"]
    assert cfg["owner"] == "lab-7"


def test_section_fills_defaults_without_sharing_them():
    cleaning = section({"cleaning": {"decimals": 2}}, "cleaning")
    assert cleaning["decimals"] == 2
    assert cleaning["outlier_method"] == "iqr"
    cleaning["options"].append("remove_outliers")
    assert DEFAULT_CONFIG["cleaning"]["options"] == ["remove_nulls", "standardize_format"]
