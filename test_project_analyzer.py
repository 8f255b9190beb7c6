"""Tests for the AI service client. Provider calls are stubbed; nothing leaves the process."""

import pytest

from calculator import QualityLevel, RoomType
from ingestion.errors import AnalysisServiceError
from ingestion.project_analyzer import (
    ProjectAnalyzer,
    RenovationParams,
    RenovationType,
    extract_json,
)


def make_analyzer(monkeypatch, response, provider="openai"):
    analyzer = ProjectAnalyzer(api_key="test-key", provider=provider)
    prompts = []

    def fake_call(prompt, image_data, media_type):
        prompts.append((prompt, image_data, media_type))
        if isinstance(response, Exception):
            raise response
        return response

    method = "_call_claude" if provider == ProjectAnalyzer.PROVIDER_CLAUDE else "_call_openai"
    monkeypatch.setattr(analyzer, method, fake_call)
    return analyzer, prompts


def test_extract_json_plain_and_fenced():
    assert extract_json('{"rooms": []}') == {"rooms": []}
    assert extract_json('Here you go:\n```json\n{"notes": ["a"]}\n```') == {"notes": ["a"]}
    assert extract_json('```\n{"qualityLevel": "premium"}\n```') == {"qualityLevel": "premium"}


@pytest.mark.parametrize("raw", ["", "no json here", "[1, 2]", None])
def test_extract_json_rejects_non_objects(raw):
    with pytest.raises(AnalysisServiceError):
        extract_json(raw)


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(ValueError):
        ProjectAnalyzer(provider="openai")


def test_provider_and_model_selection(monkeypatch):
    monkeypatch.delenv("OPENAI_MODEL", raising=False)
    monkeypatch.setenv("CLAUDE_MODEL", "claude-test")

    assert ProjectAnalyzer(api_key="k", provider="openai").model_used == "openai:gpt-4o"
    assert ProjectAnalyzer(api_key="k", provider="claude").model_used == "claude:claude-test"


def test_analyze_project(monkeypatch):
    analyzer, prompts = make_analyzer(monkeypatch, """```json
    {"rooms": [{"type": "kitchen", "length": "5 m", "width": 4}], "qualityLevel": "budget", "notes": ["Nota"]}
    ```""")

    analysis = analyzer.analyze_project("Kitchen 5 x 4", locale="it")

    assert analysis.rooms[0].type == RoomType.KITCHEN
    assert analysis.rooms[0].length == 5
    assert analysis.quality_level == QualityLevel.ECONOMY
    assert analysis.notes == ["Nota"]

    prompt, image, _ = prompts[0]
    assert "Kitchen 5 x 4" in prompt
    assert '"it"' in prompt
    assert image is None


def test_analyze_image_with_claude(monkeypatch):
    analyzer, prompts = make_analyzer(monkeypatch, '{"rooms": []}', provider="claude")

    analysis = analyzer.analyze_project("", image_base64="aGVsbG8=", image_mime_type="image/jpeg")

    assert analysis.rooms == []
    _, image, media_type = prompts[0]
    assert image == "aGVsbG8="
    assert media_type == "image/jpeg"


def test_provider_errors_become_service_errors(monkeypatch):
    analyzer, _ = make_analyzer(monkeypatch, RuntimeError("connection reset"))

    with pytest.raises(AnalysisServiceError) as excinfo:
        analyzer.analyze_project("Kitchen")
    assert excinfo.value.retryable


def test_calculate_renovation(monkeypatch):
    analyzer, prompts = make_analyzer(
        monkeypatch, '{"totalEstimate": "42000", "timeline": "8-10 weeks", "tips": ["Order tiles early"]}'
    )
    params = RenovationParams(area=65, rooms=3, bathrooms=1, renovation_type=RenovationType.FULL)

    quote = analyzer.calculate_renovation(params, locale="en")

    assert quote.total_estimate == 42000
    assert quote.timeline == "8-10 weeks"
    assert quote.tips == ["Order tiles early"]
    assert "Renovation type: full" in prompts[0][0]


def test_calculate_renovation_without_total(monkeypatch):
    analyzer, _ = make_analyzer(monkeypatch, '{"timeline": "soon"}')

    with pytest.raises(AnalysisServiceError):
        analyzer.calculate_renovation(RenovationParams(area=40, rooms=2, bathrooms=1))
