from __future__ import annotations

import http.client
import io
import json
from urllib import error

import pytest

from interviewgate.core import VerificationAggregator
from interviewgate.errors import EvaluationError, OracleError, OracleUnavailableError
from interviewgate.oracles import GeminiClient, GeminiEvaluationOracle, GeminiQuestionOracle
from interviewgate.oracles.gemini import extract_text, parse_json_reply
from interviewgate.schemas import Question


def gemini_body(text: str) -> str:
    return json.dumps({"candidates": [{"content": {"parts": [{"text": text}]}}]})


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
        return False


class StubClient:
    def __init__(self, reply):
        self.reply = reply
        self.prompts: list[str] = []

    def generate_json(self, prompt: str):
        self.prompts.append(prompt)
        return self.reply


def test_parse_json_reply_strips_markdown_fence():
    assert parse_json_reply('```json\n[{"id": 1}]\n```') == [{"id": 1}]
    assert parse_json_reply('```\n{"a": 2}\n```') == {"a": 2}
    assert parse_json_reply('{"a": 3}') == {"a": 3}


def test_parse_json_reply_rejects_prose():
    with pytest.raises(OracleError):
        parse_json_reply("Sure! Here are your questions.")


def test_extract_text_joins_parts_and_rejects_empty_bodies():
    body = json.dumps({"candidates": [{"content": {"parts": [{"text": "[1,"}, {"text": "2]"}]}}]})

    assert extract_text(body) == "[1,2]"
    with pytest.raises(OracleError):
        extract_text(json.dumps({"candidates": []}))
    with pytest.raises(OracleError):
        extract_text(gemini_body("   "))


def test_client_without_key_is_unavailable():
    client = GeminiClient(None)

    assert client.configured is False
    with pytest.raises(OracleUnavailableError):
        client.generate_text("hello")


def test_client_posts_prompt_with_api_key_header(monkeypatch):
    captured = {}

    def fake_urlopen(req, timeout):
        captured["url"] = req.full_url
        captured["key"] = req.get_header("X-goog-api-key")
        captured["body"] = json.loads(req.data.decode("utf-8"))
        captured["timeout"] = timeout
        return FakeResponse(gemini_body('{"ok": true}').encode("utf-8"))

    monkeypatch.setattr("interviewgate.oracles.gemini.request.urlopen", fake_urlopen)
    client = GeminiClient("secret", model="gemini-test", endpoint="https://example.test/v1/", timeout=5)

    assert client.generate_json("prompt text") == {"ok": True}
    assert captured["url"] == "https://example.test/v1/models/gemini-test:generateContent"
    assert captured["key"] == "secret"
    assert captured["body"]["contents"][0]["parts"][0]["text"] == "prompt text"
    assert captured["timeout"] == 5


def test_transport_failures_become_oracle_errors(monkeypatch):
    def broken_urlopen(req, timeout):
        raise error.URLError("connection refused")

    monkeypatch.setattr("interviewgate.oracles.gemini.request.urlopen", broken_urlopen)

    with pytest.raises(OracleError):
        GeminiClient("secret").generate_text("prompt")


def test_question_oracle_accepts_wrapped_array_and_mentions_skills():
    client = StubClient({"questions": [{"id": 1}]})

    reply = GeminiQuestionOracle(client).generate_questions(["Python", "SQL"], "senior")

    assert reply == [{"id": 1}]
    assert "Python, SQL" in client.prompts[0]
    assert "advanced to expert" in client.prompts[0]


def test_question_oracle_rejects_non_array_reply():
    with pytest.raises(OracleError):
        GeminiQuestionOracle(StubClient({"text": "no"})).generate_questions(["Python"], "mid")


def test_evaluation_oracle_requires_object_reply():
    client = StubClient({"accuracy": 30})

    assert GeminiEvaluationOracle(client).evaluate_answer("Q?", "A", "Ref", ["k"]) == {"accuracy": 30}
    assert "Ref" in client.prompts[0]
    with pytest.raises(OracleError):
        GeminiEvaluationOracle(StubClient([1, 2])).evaluate_answer("Q?", "A", "Ref", [])


class BrokenBodyResponse(FakeResponse):
    def __init__(self, failure: Exception) -> None:
        super().__init__(b"")
        self._failure = failure

    def read(self, *args):
        raise self._failure


@pytest.mark.parametrize(
    "failure",
    [
        http.client.IncompleteRead(b""),
        ConnectionResetError("connection reset by peer"),
    ],
)
def test_failed_body_read_becomes_evaluation_error(monkeypatch, failure):
    monkeypatch.setattr(
        "interviewgate.oracles.gemini.request.urlopen",
        lambda req, timeout: BrokenBodyResponse(failure),
    )
    oracle = GeminiEvaluationOracle(GeminiClient("secret"))
    question = Question(
        id=1, skill="Python", question="Q?", correct_answer="A", keywords=["k"]
    )

    with pytest.raises(EvaluationError):
        VerificationAggregator(oracle).evaluate([question], ["answer"])


def test_undecodable_body_becomes_oracle_error(monkeypatch):
    monkeypatch.setattr(
        "interviewgate.oracles.gemini.request.urlopen",
        lambda req, timeout: FakeResponse(b"\xff\xfe\xfa"),
    )

    with pytest.raises(OracleError):
        GeminiClient("secret").generate_text("prompt")
