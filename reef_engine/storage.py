"""Best-effort local persistence for the tank profile and test history."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping

from .constants import HISTORY_LIMIT, get_storage_path
from .history import TestEntry, add_entries, entry_from_dict, entry_to_dict
from .utils import load_json, save_json, to_float

_LOGGER = logging.getLogger(__name__)

__all__ = ["TankState", "TankStore"]


@dataclass(slots=True)
class TankState:
    """Everything the app persists between sessions."""

    tank_gallons: float | None = None
    coral_type: str | None = None
    history: list[TestEntry] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "tankGallons": self.tank_gallons,
            "coralType": self.coral_type,
            "history": [entry_to_dict(e) for e in self.history],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TankState":
        coral = data.get("coralType")
        entries = []
        for item in data.get("history") or []:
            if isinstance(item, Mapping) and isinstance(item.get("params"), Mapping):
                entries.append(entry_from_dict(item))
        return cls(
            tank_gallons=to_float(data.get("tankGallons")),
            coral_type=coral if isinstance(coral, str) and coral else None,
            history=add_entries([], entries, HISTORY_LIMIT),
        )


class TankStore:
    """Read and write :class:`TankState` as a JSON document.

    Storage problems never reach the caller: :meth:`load` falls back to an
    empty state and :meth:`save` reports failure through its return value.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path).expanduser() if path else get_storage_path()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> TankState:
        if not self._path.exists():
            return TankState()
        try:
            data = load_json(self._path)
        except (OSError, ValueError) as err:
            _LOGGER.warning("Unable to read tank data from %s: %s", self._path, err)
            return TankState()
        if not isinstance(data, Mapping):
            _LOGGER.warning("Ignoring malformed tank data in %s", self._path)
            return TankState()
        try:
            return TankState.from_dict(data)
        except (AttributeError, TypeError, ValueError) as err:
            _LOGGER.warning("Ignoring corrupt tank data in %s: %s", self._path, err)
            return TankState()

    def save(self, state: TankState) -> bool:
        try:
            save_json(self._path, state.as_dict())
        except (OSError, TypeError, ValueError) as err:
            _LOGGER.warning("Unable to save tank data to %s: %s", self._path, err)
            return False
        _LOGGER.debug("Saved %d test entries to %s", len(state.history), self._path)
        return True

    def record(self, *entries: TestEntry) -> TankState:
        """Add ``entries`` to the stored history and save it."""
        state = self.load()
        state.history = add_entries(state.history, entries, HISTORY_LIMIT)
        self.save(state)
        return state

    def clear_history(self) -> TankState:
        """Drop all tests while keeping the tank profile."""
        state = self.load()
        state.history = []
        self.save(state)
        return state
