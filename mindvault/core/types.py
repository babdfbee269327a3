"""Commonly used typing helpers."""

from __future__ import annotations

from typing import Literal, Optional, TypeAlias, Union

from .models import ResourceType

# Sentinel accepted by the query engine to match every resource type
ALL: Literal["ALL"] = "ALL"

TypeFilter: TypeAlias = Optional[Union[ResourceType, Literal["ALL"]]]

__all__ = ["ALL", "TypeFilter"]
