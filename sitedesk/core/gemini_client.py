from __future__ import annotations

import json
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass, field
from typing import Any


DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
MAX_OUTPUT_TOKENS_LIMIT = 2048
ERROR_DETAIL_CHARS = 800


@dataclass(frozen=True)
class GeminiGenerateResult:
    text: str
    usage: dict[str, Any] = field(default_factory=dict)
    finish_reason: str = ""


def _candidate_texts(candidate: Any) -> list[str]:
    if not isinstance(candidate, dict):
        return []
    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return []
    return [
        part["text"]
        for part in parts
        if isinstance(part, dict) and isinstance(part.get("text"), str) and part["text"].strip()
    ]


def parse_generate_response(payload: dict[str, Any]) -> GeminiGenerateResult:
    """Join the text parts of the first candidate of a generateContent reply."""
    candidates = payload.get("candidates")
    first = candidates[0] if isinstance(candidates, list) and candidates else {}
    finish_reason = str(first.get("finishReason") or "") if isinstance(first, dict) else ""

    usage = payload.get("usageMetadata")
    return GeminiGenerateResult(
        text="\n".join(_candidate_texts(first)).strip(),
        usage=usage if isinstance(usage, dict) else {},
        finish_reason=finish_reason,
    )


class GeminiClient:
    """Blocking client for the Gemini generateContent endpoint.

    Transport, HTTP and decoding failures all surface as `RuntimeError`.
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 20.0,
    ):
        self.api_key = (api_key or "").strip()
        self.model = (model or "").strip()
        self.base_url = (base_url or DEFAULT_GEMINI_BASE_URL).strip().rstrip("/")
        self.timeout_seconds = float(timeout_seconds)

        if not self.api_key:
            raise ValueError("Gemini API key is required")
        if not self.model:
            raise ValueError("Gemini model is required")

    def build_url(self) -> str:
        model_path = self.model if self.model.startswith("models/") else f"models/{self.model}"
        query = urllib.parse.urlencode({"key": self.api_key}, quote_via=urllib.parse.quote)
        return f"{self.base_url}/{model_path}:generateContent?{query}"

    def build_body(
        self,
        prompt: str,
        *,
        max_output_tokens: int,
        temperature: float,
        top_p: float,
    ) -> dict[str, Any]:
        token_limit = max(1, min(int(max_output_tokens), MAX_OUTPUT_TOKENS_LIMIT))
        return {
            "contents": [{"role": "user", "parts": [{"text": str(prompt or "")}]}],
            "generationConfig": {
                "temperature": float(temperature),
                "topP": float(top_p),
                "maxOutputTokens": token_limit,
            },
        }

    def _post_json(self, body: dict[str, Any]) -> str:
        request = urllib.request.Request(
            url=self.build_url(),
            data=json.dumps(body, ensure_ascii=False).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout_seconds) as response:
                return response.read().decode("utf-8", errors="replace")
        except urllib.error.HTTPError as exc:
            try:
                detail = exc.read().decode("utf-8", errors="replace")
            except Exception:  # noqa: BLE001
                detail = ""
            raise RuntimeError(
                f"Gemini request failed: status={exc.code} body={detail[:ERROR_DETAIL_CHARS]}"
            ) from exc
        except Exception as exc:  # noqa: BLE001
            raise RuntimeError(f"Gemini request failed: {exc}") from exc

    def generate(
        self,
        *,
        prompt: str,
        max_output_tokens: int = 700,
        temperature: float = 0.3,
        top_p: float = 0.95,
    ) -> GeminiGenerateResult:
        raw = self._post_json(
            self.build_body(
                prompt,
                max_output_tokens=max_output_tokens,
                temperature=temperature,
                top_p=top_p,
            )
        )
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            raise RuntimeError(f"Gemini response is not JSON: {raw[:ERROR_DETAIL_CHARS]}") from exc
        if not isinstance(payload, dict):
            raise RuntimeError(f"Gemini response has unexpected shape: {raw[:ERROR_DETAIL_CHARS]}")
        return parse_generate_response(payload)
