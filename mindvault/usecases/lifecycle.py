from __future__ import annotations

import logging
from typing import Callable, Optional

from mindvault.core.exceptions import SubmissionInProgressError
from mindvault.core.i18n import L
from mindvault.core.models import Resource, ResourceDraft, ResourceType, new_resource_id, now_ms
from mindvault.llm import Annotator
from mindvault.storage import ResourceStore

# Receives the record about to be deleted (None if unknown) and answers yes/no
ConfirmFn = Callable[[Optional[Resource]], bool]

logger = logging.getLogger(__name__)


class ResourceLifecycle:
    """Create, annotate, edit and delete resources in a store."""

    def __init__(self, store: ResourceStore, annotator: Annotator, language: str = "zh") -> None:
        self.store = store
        self.annotator = annotator
        self.language = language

    # ------------------------------------------------------------------
    async def create(self, draft: ResourceDraft) -> Resource:
        """Annotate the draft and insert the resulting resource.

        Always completes: annotation failures yield the fallback summary and
        tags. The store is written after the annotator returns, whether or
        not the caller is still waiting for the result.
        """

        title = draft.title or L(self.language, "resource.untitled")
        resource_type = draft.type or ResourceType.ARTICLE
        content_raw = draft.content_raw or ""
        analysis = await self.annotator.annotate(
            title,
            content_raw or L(self.language, "annotation.no_content"),
            resource_type,
        )
        resource = Resource(
            id=new_resource_id(),
            created_at=now_ms(),
            title=title,
            url=draft.url or "#",
            type=resource_type,
            platform=draft.platform or L(self.language, "resource.unknown_platform"),
            content_raw=content_raw,
            summary=analysis.summary,
            tags=list(analysis.suggested_tags),
            user_notes="",
        )
        self.store.insert(resource)
        logger.info(
            "Resource created",
            extra={
                "resource_id": resource.id,
                "resource_type": resource.type.value,
                "annotation_fallback": analysis.is_fallback,
            },
        )
        return resource

    def delete(self, resource_id: str, confirm: ConfirmFn) -> bool:
        """Remove a resource once ``confirm`` agrees; returns whether it did."""

        resource = self.store.get(resource_id)
        if not confirm(resource):
            return False
        self.store.remove_by_id(resource_id)
        if resource is None:
            return False
        logger.info("Resource deleted", extra={"resource_id": resource_id})
        return True

    def update_notes(self, resource_id: str, notes: str) -> Optional[Resource]:
        return self.store.update_notes(resource_id, notes)


class SubmissionForm:
    """State of one creation form: its draft and whether a submit is running.

    A form accepts one submission at a time. Closing the form does not stop
    a running submission; its resource is still stored.
    """

    def __init__(self, lifecycle: ResourceLifecycle) -> None:
        self.lifecycle = lifecycle
        self.draft = ResourceDraft()
        self.busy = False
        self.is_open = True

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    async def submit(self, draft: ResourceDraft | None = None) -> Resource:
        if self.busy:
            raise SubmissionInProgressError("A submission is already running for this form")
        draft = draft or self.draft
        self.busy = True
        try:
            resource = await self.lifecycle.create(draft)
        finally:
            self.busy = False
        # Type and platform stay selected for the next entry
        self.draft = ResourceDraft(type=draft.type, platform=draft.platform)
        self.is_open = False
        return resource


__all__ = ["ConfirmFn", "ResourceLifecycle", "SubmissionForm"]
