"""Gemini-backed question and evaluation oracles."""

from __future__ import annotations

import http.client
import json
import re
from typing import Any, Sequence
from urllib import error, parse, request

import structlog

from ..errors import OracleError, OracleUnavailableError
from .prompts import evaluation_prompt, question_prompt

_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)


class GeminiClient:
    """Minimal HTTP client for the Gemini ``generateContent`` endpoint."""

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = "gemini-2.5-flash",
        endpoint: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout
        self._logger = structlog.get_logger(__name__)

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def generate_json(self, prompt: str) -> Any:
        """Send ``prompt`` and decode the model reply as JSON."""
        return parse_json_reply(self.generate_text(prompt))

    def generate_text(self, prompt: str) -> str:
        if not self._api_key:
            raise OracleUnavailableError("GEMINI_API_KEY not configured")

        url = f"{self._endpoint}/models/{parse.quote(self._model)}:generateContent"
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self._api_key,
        }
        req = request.Request(url, data=data, headers=headers, method="POST")
        try:
            with request.urlopen(req, timeout=self._timeout) as resp:
                body = resp.read().decode("utf-8")
        except error.HTTPError as exc:
            self._logger.warning("gemini.http_error", status=exc.code, model=self._model)
            raise OracleError(f"Gemini request failed with HTTP {exc.code}") from exc
        except (error.URLError, http.client.HTTPException, OSError, UnicodeDecodeError) as exc:
            self._logger.warning("gemini.request_failed", error=str(exc), model=self._model)
            raise OracleError(f"Gemini request failed: {exc}") from exc
        return extract_text(body)


def extract_text(body: str) -> str:
    """Pull the first candidate's text out of a ``generateContent`` response."""
    try:
        decoded = json.loads(body)
        parts = decoded["candidates"][0]["content"]["parts"]
    except (json.JSONDecodeError, KeyError, IndexError, TypeError) as exc:
        raise OracleError("Gemini response did not contain any candidate text") from exc
    text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
    if not text.strip():
        raise OracleError("Gemini response text was empty")
    return text


def parse_json_reply(text: str) -> Any:
    """Decode a model reply, tolerating a surrounding markdown code fence."""
    match = _FENCE_RE.match(text)
    if match:
        text = match.group(1)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise OracleError(f"Model reply is not valid JSON: {exc.msg}") from exc


class GeminiQuestionOracle:
    """Question oracle backed by :class:`GeminiClient`."""

    def __init__(self, client: GeminiClient, *, count: int = 5) -> None:
        self._client = client
        self._count = count

    def generate_questions(self, skills: Sequence[str], experience_level: str) -> list[dict[str, Any]]:
        reply = self._client.generate_json(question_prompt(skills, experience_level, self._count))
        if isinstance(reply, dict) and isinstance(reply.get("questions"), list):
            reply = reply["questions"]
        if not isinstance(reply, list):
            raise OracleError("Question reply must be a JSON array")
        return reply


class GeminiEvaluationOracle:
    """Evaluation oracle backed by :class:`GeminiClient`."""

    def __init__(self, client: GeminiClient) -> None:
        self._client = client

    def evaluate_answer(
        self,
        question: str,
        answer: str,
        reference_answer: str,
        keywords: Sequence[str],
    ) -> dict[str, Any]:
        reply = self._client.generate_json(
            evaluation_prompt(question, answer, reference_answer, keywords)
        )
        if not isinstance(reply, dict):
            raise OracleError("Evaluation reply must be a JSON object")
        return reply
