"""
Shared pytest fixtures.

``src/`` is put on sys.path so the packages import without an install.
The AI service is replaced by FakeAnalyzer; no test touches the network.
"""

import os
import sys

import pytest

_SRC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if _SRC_DIR not in sys.path:
    sys.path.insert(0, _SRC_DIR)

os.environ.setdefault("LOG_JSON", "false")

from calculator import RoomType, create_room  # noqa: E402
from calculator.project import ProjectModel  # noqa: E402
from ingestion.errors import AnalysisServiceError  # noqa: E402
from ingestion.hints import ProjectAnalysis  # noqa: E402


class FakeAnalyzer:
    """Stands in for ProjectAnalyzer; returns a canned response and records calls."""

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {}
        self.error = error
        self.calls = []

    def analyze_project(self, text, locale="en", image_base64=None, image_mime_type=None):
        self.calls.append({
            "text": text,
            "locale": locale,
            "image_base64": image_base64,
            "image_mime_type": image_mime_type,
        })
        if self.error is not None:
            raise self.error
        return ProjectAnalysis.model_validate(self.response)


@pytest.fixture
def kitchen_analysis():
    """One 5 x 4 kitchen, nothing else."""
    return {"rooms": [{"type": "kitchen", "length": 5, "width": 4}]}


@pytest.fixture
def fake_analyzer(kitchen_analysis):
    return FakeAnalyzer(kitchen_analysis)


@pytest.fixture
def failing_analyzer():
    return FakeAnalyzer(error=AnalysisServiceError("service unavailable"))


@pytest.fixture
def three_room_project():
    return ProjectModel(rooms=(
        create_room(RoomType.LIVING),
        create_room(RoomType.BEDROOM),
        create_room(RoomType.BATHROOM),
    ))


@pytest.fixture
def sample_rooms():
    return [
        create_room(RoomType.LIVING, "Living room"),
        create_room(RoomType.KITCHEN),
        create_room(RoomType.BATHROOM),
    ]
