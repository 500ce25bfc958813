import pytest

from reef_engine.utils import DATA_ENV, EXTRA_ENV, OVERLAY_ENV, clear_dataset_cache
from reef_engine.constants import STORAGE_ENV


@pytest.fixture(autouse=True)
def _isolated_datasets(monkeypatch):
    """Run every test against the bundled datasets and no real history file."""
    for name in (DATA_ENV, EXTRA_ENV, OVERLAY_ENV, STORAGE_ENV):
        monkeypatch.delenv(name, raising=False)
    clear_dataset_cache()
    yield
    clear_dataset_cache()
