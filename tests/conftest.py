import sys
from pathlib import Path
from typing import List

import pytest
from fastapi.testclient import TestClient

# Ensure project root on sys.path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mindvault.core import AnnotationResult, Resource, ResourceType
from mindvault.llm import Annotator
from mindvault.storage import MemorySlots, ResourceStore


class StubAnnotator(Annotator):
    """Annotator returning a canned result, or raising ``error`` if set."""

    def __init__(self, result: AnnotationResult | None = None, error: Exception | None = None) -> None:
        super().__init__(language="zh")
        self.result = result or AnnotationResult(summary="s", suggested_tags=["a", "b"])
        self.error = error
        self.calls: List[tuple] = []

    async def analyze(self, title, content, resource_type):
        self.calls.append((title, content, resource_type))
        if self.error is not None:
            raise self.error
        return self.result


def make_resource(id: str, title: str = "T", type: ResourceType = ResourceType.ARTICLE, **kwargs) -> Resource:
    fields = dict(
        id=id,
        title=title,
        url="https://example.com",
        type=type,
        platform="X",
        summary="summary",
        tags=["tag"],
        created_at=1_700_000_000_000,
    )
    fields.update(kwargs)
    return Resource(**fields)


@pytest.fixture()
def store() -> ResourceStore:
    """Store over an empty in-memory slot, without sample data."""

    store = ResourceStore(MemorySlots())
    store.persist()
    store.load()
    return store


@pytest.fixture()
def annotator() -> StubAnnotator:
    return StubAnnotator()


@pytest.fixture()
def client(store, annotator):
    """FastAPI test client with dependencies overridden."""

    from apps.api.main import app, get_annotation_service, get_forms, get_store

    forms = {}
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_annotation_service] = lambda: annotator
    app.dependency_overrides[get_forms] = lambda: forms

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
