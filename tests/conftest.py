"""Shared fixtures for Blueprint Markup tests."""

import itertools
import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from blueprint_markup.config import Config
from blueprint_markup.core.elements import (
    Point, FreehandStroke, Rectangle, Circle, TextLabel
)
from blueprint_markup.services.local_blueprint_store import LocalBlueprintStore
from blueprint_markup.services.markup_channels import MarkupChannelRegistry
from blueprint_markup.services.markup_persistence import MarkupPersistenceBridge


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def isolated_user_dir(tmp_path, monkeypatch):
    """Keep settings, logs and the offline store out of the real home directory."""
    user_dir = tmp_path / "user"
    user_dir.mkdir()
    monkeypatch.setattr(Config, "get_user_data_dir", classmethod(lambda cls: user_dir))
    monkeypatch.delenv(Config.API_URL_ENV, raising=False)
    monkeypatch.delenv(Config.OFFLINE_ENV, raising=False)
    return user_dir


@pytest.fixture(scope="session")
def qapp():
    """Provide a single QApplication for the entire test session."""
    from PyQt6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------

@pytest.fixture()
def clock():
    """Deterministic millisecond clock: 1000, 1001, ..."""
    counter = itertools.count(1000)
    return lambda: next(counter)


def make_rect(element_id="r1", start=(0, 0), end=(10, 10), color="#238636", width=3):
    return Rectangle(
        id=element_id, color=color, stroke_width=width, created_at=1,
        start=Point(*start), end=Point(*end),
    )


def make_stroke(element_id="s1", points=((0, 0), (5, 5)), color="#DA3633", width=2):
    return FreehandStroke(
        id=element_id, color=color, stroke_width=width, created_at=2,
        points=tuple(Point(x, y) for x, y in points),
    )


def make_circle(element_id="c1", center=(20, 20), edge=(23, 24), color="#1F6FEB", width=4):
    return Circle(
        id=element_id, color=color, stroke_width=width, created_at=3,
        center=Point(*center), edge=Point(*edge),
    )


def make_text(element_id="t1", anchor=(7, 9), text="Check valve", color="#000000", width=3):
    return TextLabel(
        id=element_id, color=color, stroke_width=width, created_at=4,
        anchor=Point(*anchor), text=text,
    )


@pytest.fixture()
def sample_snapshot():
    return (make_stroke(), make_rect(), make_circle(), make_text())


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

@pytest.fixture()
def store(tmp_path):
    return LocalBlueprintStore(tmp_path / "store")


@pytest.fixture()
def blueprint(store, tmp_path):
    """A registered blueprint with empty live markup."""
    return store.create_blueprint(
        str(tmp_path / "plan.png"), job_id="job-7", name="Level 2", blueprint_id="bp-1"
    )


@pytest.fixture()
def channels():
    return MarkupChannelRegistry()


@pytest.fixture()
def bridge(store, channels, blueprint):
    return MarkupPersistenceBridge(store, channels)
