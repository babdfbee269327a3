from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Tuple

from pydantic import TypeAdapter

from mindvault.core.exceptions import ValidationError
from mindvault.core.models import Resource, ResourceType, now_ms
from .slots import KeyValueSlots

DEFAULT_STORAGE_KEY = "mindvault_resources"

_RESOURCES = TypeAdapter(List[Resource])

logger = logging.getLogger(__name__)


def sample_resources() -> List[Resource]:
    """Demonstration records installed on first run."""

    now = now_ms()
    return [
        Resource(
            id="1",
            title="深入理解 React Server Components",
            url="https://react.dev",
            type=ResourceType.ARTICLE,
            platform="Official Docs",
            summary="深入探讨 RSC 如何改变现代 Web 开发中的数据获取范式，重点在于服务器端渲染的优势。",
            user_notes="关键点：通过在服务器上渲染来减小 Bundle 体积。",
            tags=["React", "前端", "性能优化"],
            created_at=now,
            content_raw=(
                "React Server Components allow developers to write components "
                "that run exclusively on the server."
            ),
        ),
        Resource(
            id="2",
            title="AI 智能体的未来",
            url="https://twitter.com",
            type=ResourceType.TWEET,
            platform="X",
            summary="讨论自主智能体（Autonomous Agents）将如何取代传统的 SaaS 工作流，成为新的应用形态。",
            user_notes="",
            tags=["AI", "未来科技", "Agent"],
            created_at=now - 100000,
            content_raw="Agents are the new apps.",
        ),
    ]


class ResourceStore:
    """Ordered collection of resources mirrored into a single storage slot.

    The newest resource comes first. Every mutation rewrites the whole
    collection into the slot before returning.
    """

    def __init__(self, slots: KeyValueSlots, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.slots = slots
        self.key = key
        self._resources: List[Resource] = []

    # ------------------------------------------------------------------
    # read access
    @property
    def resources(self) -> Tuple[Resource, ...]:
        return tuple(self._resources)

    def get(self, resource_id: str) -> Optional[Resource]:
        for resource in self._resources:
            if resource.id == resource_id:
                return resource
        return None

    def __len__(self) -> int:
        return len(self._resources)

    def __iter__(self) -> Iterator[Resource]:
        return iter(tuple(self._resources))

    def __contains__(self, resource_id: object) -> bool:
        return any(r.id == resource_id for r in self._resources)

    # ------------------------------------------------------------------
    # persistence
    def load(self) -> List[Resource]:
        """Read the slot, falling back to the sample set when it is unusable.

        An unreadable value is copied to ``<key>.corrupt`` and left in place;
        it is only replaced by the next mutation. A missing value gets the
        sample set written immediately.
        """

        resources: Optional[List[Resource]] = None
        unreadable = False
        try:
            raw = self.slots.get(self.key)
            if raw is not None:
                resources = _RESOURCES.validate_json(raw)
        except ValueError:
            # Covers UnicodeDecodeError and pydantic's ValidationError
            unreadable = True
            self.slots.copy(self.key, self.backup_key)
            logger.warning(
                "Stored resources are unreadable, using sample data",
                extra={"storage_key": self.key, "backup_key": self.backup_key},
            )
        if resources is None:
            resources = sample_resources()
        self._resources = _unique_by_id(resources)
        if not unreadable:
            self.persist()
        return list(self._resources)

    @property
    def backup_key(self) -> str:
        return f"{self.key}.corrupt"

    def persist(self) -> None:
        """Serialise the full collection and overwrite the slot."""

        payload = _RESOURCES.dump_json(self._resources, by_alias=True, exclude_none=True)
        self.slots.set(self.key, payload.decode("utf-8"))

    # ------------------------------------------------------------------
    # mutations
    def insert(self, resource: Resource) -> None:
        if resource.id in self:
            raise ValidationError(f"Resource id already exists: {resource.id}")
        self._resources.insert(0, resource)
        self.persist()

    def remove_by_id(self, resource_id: str) -> None:
        self._resources = [r for r in self._resources if r.id != resource_id]
        self.persist()

    def update_notes(self, resource_id: str, notes: str) -> Optional[Resource]:
        """Replace ``user_notes`` of one resource; returns the updated record."""

        updated: Optional[Resource] = None
        for idx, resource in enumerate(self._resources):
            if resource.id == resource_id:
                updated = resource.model_copy(update={"user_notes": notes})
                self._resources[idx] = updated
                break
        self.persist()
        return updated


def _unique_by_id(resources: List[Resource]) -> List[Resource]:
    seen: set[str] = set()
    out: List[Resource] = []
    for resource in resources:
        if resource.id in seen:
            logger.warning("Dropping duplicate resource id %s", resource.id)
            continue
        seen.add(resource.id)
        out.append(resource)
    return out


__all__ = ["ResourceStore", "DEFAULT_STORAGE_KEY", "sample_resources"]
