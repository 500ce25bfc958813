"""Utility helpers for reading reference datasets used across the reef engine."""

from __future__ import annotations

import json
import math
import os
from functools import lru_cache
from os import PathLike
from pathlib import Path
from typing import Any, Dict, Mapping, TextIO, Union

import yaml

__all__ = [
    "load_json",
    "save_json",
    "load_data",
    "load_dataset",
    "clear_dataset_cache",
    "dataset_paths",
    "get_data_dir",
    "get_extra_dirs",
    "overlay_dir",
    "normalize_key",
    "deep_update",
    "to_float",
]


PathType = Union[str, PathLike]


def _open_text(path: Path) -> TextIO:
    return open(path, "r", encoding="utf-8")


def load_json(path: PathType) -> Dict[str, Any]:
    """Return the parsed JSON contents of ``path``.

    A :class:`FileNotFoundError` is raised if the file does not exist and a
    :class:`ValueError` is raised when the contents cannot be decoded as JSON.
    The error message always includes the file path to aid debugging.
    """

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)

    try:
        with _open_text(p) as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {p}: {exc}") from exc


def load_data(path: PathType) -> Any:
    """Return the parsed contents of ``path`` supporting JSON or YAML."""

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)

    try:
        with _open_text(p) as f:
            if p.suffix.lower() in {".yaml", ".yml"}:
                return yaml.safe_load(f) or {}
            return json.load(f)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {p}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {p}: {exc}") from exc


def save_json(path: PathType, data: Dict[str, Any]) -> bool:
    """Write ``data`` to ``path`` and return ``True`` on success.

    The document is serialized up front and written to a sibling ``.tmp``
    file that then replaces ``path``, so a failed save leaves the previous
    file intact.
    """

    p = Path(path)
    txt = json.dumps(data, ensure_ascii=False, indent=2) + "\n"
    tmp = p.with_suffix(".tmp")
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp.write_text(txt, encoding="utf-8")
    tmp.replace(p)
    return True


def deep_update(base: Dict[str, Any], other: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``other`` into ``base`` and return ``base``."""

    for key, value in other.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, Mapping)
        ):
            deep_update(base[key], value)
        else:
            base[key] = value
    return base


# Reference tables ship inside the package ``data`` folder. The location can be
# overridden with ``REEFPULSE_DATA_DIR``. ``REEFPULSE_EXTRA_DATA_DIRS`` holds an
# ``os.pathsep``-separated list of directories merged after the base directory
# and ``REEFPULSE_OVERLAY_DIR`` points at user-provided files merged last. This
# allows a hobbyist to tweak a single range or add a dosing product without
# copying every table.
DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"
DATA_ENV = "REEFPULSE_DATA_DIR"
OVERLAY_ENV = "REEFPULSE_OVERLAY_DIR"
EXTRA_ENV = "REEFPULSE_EXTRA_DATA_DIRS"


def get_data_dir() -> Path:
    """Return base dataset directory honoring the ``REEFPULSE_DATA_DIR`` env."""

    env = os.getenv(DATA_ENV)
    return Path(env).expanduser() if env else DEFAULT_DATA_DIR


def overlay_dir() -> Path | None:
    """Return overlay directory defined via ``REEFPULSE_OVERLAY_DIR``."""

    env = os.getenv(OVERLAY_ENV)
    return Path(env).expanduser() if env else None


def get_extra_dirs() -> tuple[Path, ...]:
    """Return additional dataset directories from ``REEFPULSE_EXTRA_DATA_DIRS``."""

    env = os.getenv(EXTRA_ENV)
    if not env:
        return ()
    dirs: list[Path] = []
    for part in env.split(os.pathsep):
        path = Path(part).expanduser()
        if path.is_dir():
            dirs.append(path)
    return tuple(dirs)


def dataset_paths() -> tuple[Path, ...]:
    """Return directories searched when loading datasets, overlay excluded."""

    return (get_data_dir(), *get_extra_dirs())


@lru_cache(maxsize=None)
def _load_dataset_cached(
    filename: str, paths: tuple[Path, ...], overlay: Path | None
) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    found = False
    for base in (*paths, overlay) if overlay else paths:
        path = base / filename
        if not path.exists():
            continue
        found = True
        extra = load_data(path)
        if isinstance(extra, dict) and isinstance(data, dict):
            deep_update(data, extra)
        else:
            data = extra

    if not found:
        raise FileNotFoundError(f"Dataset {filename} not found in {list(paths)}")
    return data


def load_dataset(filename: str) -> Dict[str, Any]:
    """Return dataset ``filename`` merged across search paths and overlay.

    Results are cached per combination of search paths so changing the
    environment variables between calls picks up the new location. Use
    :func:`clear_dataset_cache` when the files themselves change.
    """

    return _load_dataset_cached(filename, dataset_paths(), overlay_dir())


def clear_dataset_cache() -> None:
    """Clear cached dataset results loaded via :func:`load_dataset`."""

    _load_dataset_cached.cache_clear()
    # parsed reference tables are cached one level up
    from . import dosing, diagnosis, parameters

    parameters.clear_cache()
    diagnosis.clear_cache()
    dosing.clear_cache()


def normalize_key(key: str) -> str:
    """Return ``key`` normalized for case-insensitive dataset lookups.

    The function uses :meth:`str.casefold` for robust case-insensitive
    matching and normalizes whitespace, hyphens and underscores to a single
    underscore character.
    """

    value = str(key).casefold()
    for sep in ("_", "-"):
        value = value.replace(sep, " ")
    parts = [p for p in value.strip().split() if p]
    return "_".join(parts)


def to_float(value: Any) -> float | None:
    """Return ``value`` as a finite float or ``None`` when blank or invalid.

    Form fields arrive as text, so ``""``, ``"  "`` and ``"abc"`` all mean the
    reading was not taken. Booleans are rejected rather than read as 0/1.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number
