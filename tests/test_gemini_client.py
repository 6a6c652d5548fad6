"""Tests for GeminiClient against a scripted SDK client (no network)."""

import asyncio
from types import SimpleNamespace

import pytest
from google.genai import errors

from labassist.config import Settings
from labassist.core.errors import ExtractionError, UnrecognizedDocumentError
from labassist.core.gemini_client import GeminiClient


def _api_error(code: int, message: str) -> errors.APIError:
    return errors.APIError(code, {"error": {"code": code, "message": message, "status": "ERROR"}})


class ScriptedModels:
    """Plays back one outcome per call: a reply string, an exception or a delay."""

    def __init__(self, outcomes) -> None:
        self.outcomes = list(outcomes)
        self.calls: list = []

    async def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, float):
            await asyncio.sleep(outcome)
            return SimpleNamespace(text="too late")
        return SimpleNamespace(text=outcome)


def _client(outcomes, **overrides):
    config = Settings(
        GEMINI_API_KEY="",
        GOOGLE_CLOUD_PROJECT="",
        GEMINI_CHAT_MODELS=["model-a", "model-b"],
        GEMINI_EXTRACTION_MODEL="model-x",
        GEMINI_TIMEOUT_S=0.05,
        _env_file=None,
        **overrides,
    )
    models = ScriptedModels(outcomes)
    sdk = SimpleNamespace(aio=SimpleNamespace(models=models))
    return GeminiClient(config, client=sdk), models


# ── Initialization ───────────────────────────────────────────────────────
def test_missing_credentials_runs_in_demo_mode(test_settings, monkeypatch):
    monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)
    client = GeminiClient(test_settings)
    assert client.is_available is False
    assert asyncio.run(client.converse([], "hi", "system")) is None
    with pytest.raises(ExtractionError):
        asyncio.run(client.extract_metrics(b"%PDF-1.4", "r.pdf"))


# ── converse ─────────────────────────────────────────────────────────────
def test_converse_returns_first_model_reply():
    client, models = _client(["  Hello there  "])
    reply = asyncio.run(client.converse([("user", "hi"), ("model", "hey")], "how are you", "be nice"))

    assert reply == "Hello there"
    call = models.calls[0]
    assert call["model"] == "model-a"
    assert [c.role for c in call["contents"]] == ["user", "model", "user"]
    assert call["config"].system_instruction == "be nice"


@pytest.mark.parametrize("first", [
    _api_error(429, "quota exhausted"),
    _api_error(500, "internal"),
    RuntimeError("connection reset"),
    "",
    1.0,
])
def test_converse_falls_through_to_next_model(first):
    client, models = _client([first, "from b"])
    assert asyncio.run(client.converse([], "hi", "system")) == "from b"
    assert [c["model"] for c in models.calls] == ["model-a", "model-b"]


def test_converse_returns_none_when_every_model_fails():
    client, _ = _client([_api_error(429, "quota"), RuntimeError("down")])
    assert asyncio.run(client.converse([], "hi", "system")) is None


# ── extract_metrics ──────────────────────────────────────────────────────
def test_extract_metrics_parses_fenced_json():
    payload = '```json\n{"is_lab_report": true, "metrics": {"hemoglobin": 11.8, "ldl": null, "wbc": 7200}}\n```'
    client, models = _client([payload])

    metrics = asyncio.run(client.extract_metrics(b"%PDF-1.4", "report.pdf"))

    assert metrics == {"hemoglobin": 11.8, "wbc": 7200.0}
    call = models.calls[0]
    assert call["model"] == "model-x"
    assert call["config"].response_mime_type == "application/json"


@pytest.mark.parametrize("payload", [
    '{"is_lab_report": false, "metrics": {}}',
    '{"is_lab_report": true, "metrics": {"hemoglobin": null}}',
    '{"is_lab_report": true}',
])
def test_extract_metrics_unrecognized_document(payload: str):
    client, _ = _client([payload])
    with pytest.raises(UnrecognizedDocumentError):
        asyncio.run(client.extract_metrics(b"%PDF-1.4", "invoice.pdf"))


@pytest.mark.parametrize("outcome", [
    "this is not json",
    "[1, 2, 3]",
    '{"is_lab_report": true, "metrics": [1, 2]}',
    _api_error(503, "unavailable"),
    RuntimeError("socket closed"),
    1.0,
])
def test_extract_metrics_failures_raise_extraction_error(outcome):
    client, _ = _client([outcome])
    with pytest.raises(ExtractionError):
        asyncio.run(client.extract_metrics(b"%PDF-1.4", "report.pdf"))
