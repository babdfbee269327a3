"""Annotation service abstractions and implementations."""

from __future__ import annotations

from mindvault.core.settings import Settings, get_settings

from .annotator import AnnotationError, Annotator, fallback_result, parse_annotation


def get_annotator(settings: Settings | None = None) -> Annotator:
    """Build the annotator selected by ``ANNOTATION_PROVIDER``."""

    settings = settings or get_settings()
    provider = settings.annotation_provider.lower()
    if provider == "gemini":
        from .gemini_client import GeminiAnnotator

        return GeminiAnnotator(settings=settings)
    if provider == "replicate":
        from .replicate_client import ReplicateAnnotator

        return ReplicateAnnotator(settings=settings)
    raise AnnotationError(f"Unknown annotation provider: {settings.annotation_provider}")


__all__ = [
    "AnnotationError",
    "Annotator",
    "fallback_result",
    "parse_annotation",
    "get_annotator",
]
