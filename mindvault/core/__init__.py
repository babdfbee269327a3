"""Core library exposing domain models, settings, exceptions and types."""

from .settings import Settings, get_settings
from .exceptions import (
    DomainError,
    NotFoundError,
    ValidationError,
    SubmissionInProgressError,
    Error,
)
from .models import AnnotationResult, Resource, ResourceDraft, ResourceType
from .types import ALL, TypeFilter
from .i18n import I18n, L, type_label

__all__ = [
    "Settings",
    "get_settings",
    "DomainError",
    "NotFoundError",
    "ValidationError",
    "SubmissionInProgressError",
    "Error",
    "AnnotationResult",
    "Resource",
    "ResourceDraft",
    "ResourceType",
    "ALL",
    "TypeFilter",
    "I18n",
    "L",
    "type_label",
]
