"""
Gemini Client

Wrapper for Gemini API calls via the google-genai SDK.
Handles initialization, model fallback and missing credentials:
  - converse()         chat reply, tries each configured model in order
  - extract_metrics()  structured metric extraction from a PDF
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import re
from typing import Any, Optional

from google import genai
from google.genai import errors, types

from labassist.config import Settings, settings as default_settings
from labassist.core.errors import ExtractionError, UnrecognizedDocumentError
from labassist.prompts.extraction import EXTRACTION_SYSTEM_PROMPT, format_extraction_prompt

logger = logging.getLogger(__name__)

RATE_LIMITED = 429


def _clean_json_text(text: str) -> str:
    """Strip markdown code fences and leading/trailing whitespace."""
    text = text.strip()
    text = re.sub(r"^```(?:json)?\s*", "", text)
    text = re.sub(r"\s*```$", "", text)
    return text.strip()


def _numeric_metrics(raw: Any) -> dict[str, float]:
    """Keep entries whose value is a real number; nulls are dropped."""
    if not isinstance(raw, dict):
        raise ExtractionError("Malformed extraction response: 'metrics' is not an object")
    metrics: dict[str, float] = {}
    for key, value in raw.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        metrics[str(key)] = float(value)
    return metrics


class GeminiClient:
    """Wrapper around a google-genai client.

    Uses an API key when one is configured, otherwise Vertex AI.  If
    neither is available the client degrades gracefully and
    ``is_available`` returns False.
    """

    def __init__(self, config: Settings = default_settings, client: Any = None) -> None:
        self.settings = config
        self._client = client
        if self._client is None:
            self._initialize()

    def _resolve_project(self) -> str | None:
        """Return the GCP project ID from settings or credentials file."""
        if self.settings.GOOGLE_CLOUD_PROJECT:
            return self.settings.GOOGLE_CLOUD_PROJECT
        creds_path = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS", "")
        if creds_path and os.path.isfile(creds_path):
            with open(creds_path) as f:
                return json.load(f).get("project_id")
        return None

    def _initialize(self) -> None:
        """Attempt to build the SDK client from the configured credentials."""
        try:
            if self.settings.GEMINI_API_KEY:
                self._client = genai.Client(api_key=self.settings.GEMINI_API_KEY)
            else:
                project = self._resolve_project()
                if not project:
                    logger.warning(
                        "No Gemini API key or GCP project - Gemini running in demo mode"
                    )
                    return
                self._client = genai.Client(
                    vertexai=True,
                    project=project,
                    location=self.settings.GOOGLE_CLOUD_LOCATION,
                )
            logger.info("Gemini client initialized successfully")
        except Exception as exc:
            logger.warning("Gemini initialization failed: %s", exc)
            logger.warning(
                "Running in demo mode - configure GEMINI_API_KEY or Google Cloud "
                "credentials for full functionality"
            )
            self._client = None

    @property
    def is_available(self) -> bool:
        """Return True if Gemini is ready to accept requests."""
        return self._client is not None

    async def _generate(self, model: str, contents: list, config: types.GenerateContentConfig):
        return await asyncio.wait_for(
            self._client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config,
            ),
            timeout=self.settings.GEMINI_TIMEOUT_S,
        )

    # ── Chat ──

    async def converse(
        self,
        history: list[tuple[str, str]],
        user_text: str,
        system_prompt: str,
    ) -> Optional[str]:
        """Return the first usable reply across the configured chat models.

        Args:
            history: Prior turns as (role, text); role is "user" or "model".
            user_text: The new user turn.
            system_prompt: System instruction for the assistant persona.

        Returns:
            The reply text, or None if every model failed.  Never raises.
        """
        if not self.is_available:
            return None

        contents = [
            types.Content(role=role, parts=[types.Part.from_text(text=text)])
            for role, text in history
        ]
        contents.append(types.Content(role="user", parts=[types.Part.from_text(text=user_text)]))
        config = types.GenerateContentConfig(system_instruction=system_prompt, temperature=0.7)

        for model in self.settings.GEMINI_CHAT_MODELS:
            try:
                response = await self._generate(model, contents, config)
                text = (response.text or "").strip()
            except asyncio.TimeoutError:
                logger.warning("Gemini model %s timed out, trying next", model)
                continue
            except errors.APIError as exc:
                if exc.code == RATE_LIMITED:
                    logger.warning("Gemini model %s rate limited, trying next", model)
                else:
                    logger.warning("Gemini model %s failed (%s): %s", model, exc.code, exc.message)
                continue
            except Exception as exc:
                logger.warning("Gemini model %s failed: %s", model, exc)
                continue

            if text:
                logger.info("Gemini reply from %s (%d chars)", model, len(text))
                return text
            logger.warning("Gemini model %s returned an empty reply", model)

        return None

    # ── Extraction ──

    async def extract_metrics(self, document: bytes, file_name: str) -> dict[str, float]:
        """Extract numeric metrics from a PDF lab report.

        Raises:
            UnrecognizedDocumentError: the document is not a lab report, or
                no metric could be read from it.
            ExtractionError: transport, timeout, malformed response or
                missing configuration.
        """
        if not self.is_available:
            raise ExtractionError("Report analysis is unavailable: Gemini is not configured")

        model = self.settings.GEMINI_EXTRACTION_MODEL
        config = types.GenerateContentConfig(
            system_instruction=EXTRACTION_SYSTEM_PROMPT,
            response_mime_type="application/json",
            temperature=0.0,
        )
        contents = [
            types.Part.from_bytes(data=document, mime_type="application/pdf"),
            format_extraction_prompt(file_name),
        ]

        try:
            response = await self._generate(model, contents, config)
            raw = response.text or ""
        except asyncio.TimeoutError as exc:
            raise ExtractionError(
                f"Report analysis timed out after {self.settings.GEMINI_TIMEOUT_S:g}s"
            ) from exc
        except errors.APIError as exc:
            raise ExtractionError(f"Gemini API error ({exc.code}): {exc.message}") from exc
        except Exception as exc:
            raise ExtractionError(f"Report analysis failed: {exc}") from exc

        try:
            payload = json.loads(_clean_json_text(raw))
        except json.JSONDecodeError as exc:
            logger.error("JSON parse error from Gemini extraction: %s", exc)
            raise ExtractionError(f"Malformed extraction response: {exc}") from exc

        if not isinstance(payload, dict):
            raise ExtractionError("Malformed extraction response: expected a JSON object")
        if payload.get("is_lab_report") is False:
            raise UnrecognizedDocumentError(
                "The uploaded file does not appear to be a lab report"
            )

        metrics = _numeric_metrics(payload.get("metrics") or {})
        if not metrics:
            raise UnrecognizedDocumentError("No health metrics could be read from this report")

        logger.info("Extracted %d metrics from %s", len(metrics), file_name)
        return metrics
