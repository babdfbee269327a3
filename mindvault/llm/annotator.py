from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Tuple

import pydantic
import yaml

from mindvault.core.i18n import L
from mindvault.core.models import AnnotationResult, ResourceType

# JSON schema the model output has to follow
ANNOTATION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "summary": {
            "type": "string",
            "description": "A short, insightful summary of the content.",
        },
        "suggestedTags": {
            "type": "array",
            "items": {"type": "string"},
            "description": "A list of relevant tags.",
        },
    },
    "required": ["summary", "suggestedTags"],
    "additionalProperties": False,
}

DEFAULT_PROMPTS_PATH = Path(__file__).resolve().parents[2] / "config" / "prompts.yaml"


class AnnotationError(Exception):
    """Raised when interaction with the annotation model fails."""


def fallback_result(lang: str) -> AnnotationResult:
    """Fixed result used whenever the model cannot annotate a resource."""

    return AnnotationResult(
        summary=L(lang, "annotation.fallback_summary"),
        suggested_tags=[L(lang, "annotation.fallback_tag")],
        is_fallback=True,
    )


def load_prompts(path: str | Path) -> Dict[str, Dict[str, str]]:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            return yaml.safe_load(fh) or {}
    except FileNotFoundError as exc:
        raise AnnotationError(f"Prompts file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise AnnotationError("Failed to parse prompts file") from exc


def clean_json_text(text: str) -> str:
    """Try to clean common wrappers around JSON.

    - Strip code fences like ```json ... ``` or ``` ... ```
    - Trim whitespace
    - If still not JSON-looking, slice from first '{' to last '}'
    """
    s = text.strip()
    if not s:
        return s
    if s.startswith("```"):
        parts = s.splitlines()
        end_idx = next(
            (i for i, line in enumerate(parts[1:], start=1) if line.strip().startswith("```")),
            None,
        )
        if end_idx is not None:
            s = "\n".join(parts[1:end_idx]).strip()
    if s.startswith("{") and s.endswith("}"):
        return s
    start = s.find("{")
    end = s.rfind("}")
    if start != -1 and end > start:
        return s[start : end + 1].strip()
    return s


def parse_annotation(text: str | None) -> AnnotationResult:
    """Parse and validate model output into an :class:`AnnotationResult`."""

    if text is None or not text.strip():
        raise AnnotationError("Empty response when JSON was expected")
    cleaned = clean_json_text(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        preview = (cleaned[:200] + "…") if len(cleaned) > 200 else cleaned
        raise AnnotationError(f"Failed to parse JSON from model output. Preview: {preview}") from exc
    try:
        return AnnotationResult.model_validate(data)
    except pydantic.ValidationError as exc:
        raise AnnotationError(f"Model output does not match schema: {exc}") from exc


class Annotator(ABC):
    """Produces a summary and tags for a resource.

    Subclasses implement :meth:`analyze`, which raises :class:`AnnotationError`
    on failure. Callers use :meth:`annotate`, which never raises and returns
    :func:`fallback_result` instead.
    """

    def __init__(self, language: str = "zh", prompts_path: str | Path | None = None) -> None:
        self.language = language
        self.logger = logging.getLogger(self.__class__.__module__)
        self.prompts_path = Path(prompts_path) if prompts_path is not None else DEFAULT_PROMPTS_PATH
        self.prompts = load_prompts(self.prompts_path)
        self.logger.debug("Prompts loaded from: %s", str(self.prompts_path))

    @abstractmethod
    async def analyze(
        self, title: str, content: str, resource_type: ResourceType
    ) -> AnnotationResult:
        """Ask the model for a summary and tags."""

    async def annotate(
        self, title: str, content: str, resource_type: ResourceType
    ) -> AnnotationResult:
        try:
            return await self.analyze(title, content, resource_type)
        except Exception:
            self.logger.exception(
                "Annotation failed, using fallback result",
                extra={"resource_type": ResourceType(resource_type).value},
            )
            return fallback_result(self.language)

    # ------------------------------------------------------------------
    def _prompt(self, section: str, key: str) -> str:
        try:
            return self.prompts[section][key]
        except (KeyError, TypeError) as exc:
            raise AnnotationError(
                f"Prompt '{section}.{key}' not found in {self.prompts_path}"
            ) from exc

    def build_messages(
        self, title: str, content: str, resource_type: ResourceType
    ) -> Tuple[str, str]:
        """Return ``(system, user)`` prompt texts for one resource."""

        user = self._prompt("annotation", "user").format(
            type=ResourceType(resource_type).value,
            title=title,
            content=content,
            language=L(self.language, "annotation.language"),
        )
        return self._prompt("annotation", "system"), user


__all__ = [
    "ANNOTATION_SCHEMA",
    "AnnotationError",
    "Annotator",
    "clean_json_text",
    "fallback_result",
    "load_prompts",
    "parse_annotation",
]
