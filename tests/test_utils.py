import os

import pytest

from reef_engine.parameters import ParameterKind, get_ideal_range
from reef_engine.utils import (
    DATA_ENV,
    EXTRA_ENV,
    OVERLAY_ENV,
    clear_dataset_cache,
    deep_update,
    load_data,
    load_dataset,
    load_json,
    normalize_key,
    save_json,
    to_float,
)


def test_normalize_key_lowercase():
    assert normalize_key("Calcium") == "calcium"


def test_normalize_key_separators():
    assert normalize_key(" Soda-Ash  mix ") == "soda_ash_mix"


def test_normalize_key_non_string():
    assert normalize_key(123) == "123"


def test_load_json_success(tmp_path):
    path = tmp_path / "data.json"
    path.write_text('{"a":1}')
    assert load_json(path) == {"a": 1}


def test_load_json_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_json(tmp_path / "missing.json")


def test_load_json_invalid(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{oops}")
    with pytest.raises(ValueError, match="bad.json"):
        load_json(bad)


def test_load_data_yaml(tmp_path):
    path = tmp_path / "data.yaml"
    path.write_text("calcium:\n  min: 400\n")
    assert load_data(path) == {"calcium": {"min": 400}}
    empty = tmp_path / "empty.yml"
    empty.write_text("")
    assert load_data(empty) == {}


def test_load_data_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("a: [1, 2\n")
    with pytest.raises(ValueError):
        load_data(path)


def test_save_json_creates_parents(tmp_path):
    path = tmp_path / "a" / "b.json"
    assert save_json(path, {"x": [1, 2]})
    assert load_json(path) == {"x": [1, 2]}
    assert not path.with_suffix(".tmp").exists()


def test_save_json_unserializable_leaves_file(tmp_path):
    path = tmp_path / "b.json"
    save_json(path, {"x": 1})
    with pytest.raises(TypeError):
        save_json(path, {"x": object()})
    assert load_json(path) == {"x": 1}


def test_deep_update_merges_nested():
    base = {"calcium": {"min": 380, "max": 450}, "ph": {"min": 7.8}}
    deep_update(base, {"calcium": {"min": 400}, "salinity": {"min": 1.024}})
    assert base == {
        "calcium": {"min": 400, "max": 450},
        "ph": {"min": 7.8},
        "salinity": {"min": 1.024},
    }


@pytest.mark.parametrize(
    "value, expected",
    [
        ("8.1", 8.1),
        (" 420 ", 420.0),
        (0, 0.0),
        ("", None),
        ("   ", None),
        ("abc", None),
        (None, None),
        (True, None),
        ("nan", None),
        (float("inf"), None),
    ],
)
def test_to_float(value, expected):
    assert to_float(value) == expected


def test_data_dir_override(monkeypatch, tmp_path):
    (tmp_path / "sample.json").write_text('{"a":1}')
    monkeypatch.setenv(DATA_ENV, str(tmp_path))
    assert load_dataset("sample.json") == {"a": 1}

    other = tmp_path / "other"
    other.mkdir()
    (other / "sample.json").write_text('{"a":2}')
    monkeypatch.setenv(DATA_ENV, str(other))
    assert load_dataset("sample.json") == {"a": 2}


def test_missing_dataset_raises(monkeypatch, tmp_path):
    monkeypatch.setenv(DATA_ENV, str(tmp_path))
    with pytest.raises(FileNotFoundError):
        load_dataset("ideal_ranges.json")


def test_overlay_merges_single_value(monkeypatch, tmp_path):
    (tmp_path / "ideal_ranges.json").write_text('{"calcium": {"min": 400}}')
    monkeypatch.setenv(OVERLAY_ENV, str(tmp_path))
    clear_dataset_cache()
    rng = get_ideal_range(ParameterKind.CALCIUM)
    assert rng.min == 400
    assert rng.max == 450
    assert get_ideal_range(ParameterKind.PH).min == 7.8


def test_extra_dirs_searched(monkeypatch, tmp_path):
    extra = tmp_path / "extra"
    extra.mkdir()
    (extra / "custom.yaml").write_text("greeting: hello\n")
    monkeypatch.setenv(EXTRA_ENV, os.pathsep.join([str(extra), str(tmp_path / "missing")]))
    assert load_dataset("custom.yaml") == {"greeting": "hello"}
