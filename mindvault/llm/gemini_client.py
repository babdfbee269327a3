from __future__ import annotations

import os
from pathlib import Path

from google import genai
from google.genai import types

from mindvault.core.models import AnnotationResult, ResourceType
from mindvault.core.settings import Settings, get_settings
from .annotator import AnnotationError, Annotator, parse_annotation

RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "summary": types.Schema(
            type=types.Type.STRING,
            description="A short, insightful summary of the content.",
        ),
        "suggestedTags": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(type=types.Type.STRING),
            description="A list of relevant tags.",
        ),
    },
    required=["summary", "suggestedTags"],
)


class GeminiAnnotator(Annotator):
    """Annotator backed by the Google GenAI SDK (Gemini models)."""

    def __init__(
        self,
        settings: Settings | None = None,
        prompts_path: str | Path | None = None,
        client: genai.Client | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        super().__init__(
            language=getattr(self.settings, "content_language", "zh"),
            prompts_path=prompts_path or getattr(self.settings, "prompts_path", None),
        )
        self.model = getattr(self.settings, "gemini_model", "gemini-2.5-flash")
        self._client = client

    @property
    def client(self) -> genai.Client:
        # Created on first use so a missing key only affects annotation calls
        if self._client is None:
            api_key = (
                getattr(self.settings, "gemini_api_key", "")
                or os.getenv("GOOGLE_API_KEY")
                or os.getenv("GEMINI_API_KEY")
            )
            if not api_key:
                raise AnnotationError("Missing GEMINI_API_KEY / GOOGLE_API_KEY")
            self._client = genai.Client(api_key=api_key)
        return self._client

    async def analyze(
        self, title: str, content: str, resource_type: ResourceType
    ) -> AnnotationResult:
        system, user = self.build_messages(title, content, resource_type)
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=user,
                config=types.GenerateContentConfig(
                    system_instruction=system,
                    response_mime_type="application/json",
                    response_schema=RESPONSE_SCHEMA,
                ),
            )
        except AnnotationError:
            raise
        except Exception as exc:
            raise AnnotationError(f"Gemini request failed: {exc}") from exc
        text = getattr(response, "text", None)
        if not text:
            raise AnnotationError("No response from Gemini")
        return parse_annotation(text)


__all__ = ["GeminiAnnotator", "RESPONSE_SCHEMA"]
