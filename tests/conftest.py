import io
import json
import os
import random
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from derdiedas.display import Display, DisplayOptions
from derdiedas.engine import LineReader
from derdiedas.models import WordEntry


class FixedOrderRandom(random.Random):
    """Leaves lists in catalog order so scripted answers line up with questions."""

    def shuffle(self, x, *args, **kwargs):
        pass


HAUS_TISCH = [
    {"word": "Haus", "article": "das", "english": "house", "plural": "Häuser"},
    {"word": "Tisch", "article": "der"},
]


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path, monkeypatch):
    data_dir = tmp_path / "data"
    monkeypatch.setenv("DERDIEDAS_DATA_DIR", str(data_dir))
    monkeypatch.delenv("NO_COLOR", raising=False)
    return data_dir


@pytest.fixture
def write_catalog(tmp_path):
    def _write(entries, name="words.json", version="1"):
        path = tmp_path / name
        path.write_text(json.dumps({"version": version, "data": entries}), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def catalog_path(write_catalog):
    return write_catalog(HAUS_TISCH)


@pytest.fixture
def words():
    return [WordEntry.model_validate(item) for item in HAUS_TISCH]


@pytest.fixture
def stats_path(tmp_path):
    return tmp_path / "stats" / "stats.json"


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def display(output):
    return Display(DisplayOptions(color_enabled=False), out=output, err=io.StringIO())


def scripted(*lines):
    return LineReader(io.StringIO("".join(f"{line}\n" for line in lines)))
