from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

import replicate

from mindvault.core.models import AnnotationResult, ResourceType
from mindvault.core.settings import Settings, get_settings
from .annotator import ANNOTATION_SCHEMA, AnnotationError, Annotator, parse_annotation


class ReplicateAnnotator(Annotator):
    """Annotator powered by a structured-output model on Replicate."""

    def __init__(
        self,
        settings: Settings | None = None,
        prompts_path: str | Path | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        super().__init__(
            language=getattr(self.settings, "content_language", "zh"),
            prompts_path=prompts_path or getattr(self.settings, "prompts_path", None),
        )
        self.model = getattr(self.settings, "replicate_model", "openai/gpt-5-structured")
        self._log_payloads: bool = bool(getattr(self.settings, "llm_log_payloads", False))
        self._max_output_tokens: int = int(
            getattr(self.settings, "llm_max_output_tokens", 2048)
        )
        token = getattr(self.settings, "replicate_api_token", "") or None
        self.client = replicate.Client(api_token=token)

    def build_input(self, system: str, user: str) -> Dict[str, Any]:
        """Map prompts onto the structured model's input schema."""

        return {
            "model": "gpt-5",
            "reasoning_effort": "minimal",
            "verbosity": "low",
            "instructions": system,
            "input_item_list": [
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": user}],
                }
            ],
            "max_output_tokens": self._max_output_tokens,
            "response_format": {
                "type": "json_schema",
                "json_schema": {
                    "name": "resource_annotation",
                    "strict": True,
                    "schema": ANNOTATION_SCHEMA,
                },
            },
        }

    async def _call(self, input_payload: Dict[str, Any]) -> str:
        _lvl = logging.INFO if self._log_payloads else logging.DEBUG
        self.logger.log(
            _lvl,
            "Replicate request | model=%s | input=%s",
            self.model,
            json.dumps(input_payload, ensure_ascii=False, default=str),
        )
        try:
            out = await self.client.async_run(self.model, input=input_payload)
        except Exception as exc:
            raise AnnotationError(f"Replicate request failed: {exc}") from exc
        text = _output_text(out)
        self.logger.log(_lvl, "Replicate response | model=%s | text=%s", self.model, text)
        return text

    async def analyze(
        self, title: str, content: str, resource_type: ResourceType
    ) -> AnnotationResult:
        system, user = self.build_messages(title, content, resource_type)
        text = await self._call(self.build_input(system, user))
        return parse_annotation(text)


def _output_text(out: Any) -> str:
    """Normalise the various Replicate output shapes into text."""

    if out is None:
        return ""
    if isinstance(out, str):
        return out
    if isinstance(out, dict):
        # Structured models return {'json_output': ..., 'text': ...}
        if "json_output" in out:
            jo = out["json_output"]
            return jo if isinstance(jo, str) else json.dumps(jo, ensure_ascii=False)
        if isinstance(out.get("text"), str):
            return out["text"]
        return json.dumps(out, ensure_ascii=False, default=str)
    # Many models stream an iterator of string chunks
    try:
        return "".join(str(chunk) for chunk in out)
    except TypeError as exc:
        raise AnnotationError("Unexpected output from Replicate") from exc


__all__ = ["ReplicateAnnotator"]
