from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from mindvault.core import ALL, L, ResourceDraft, ResourceType, SubmissionInProgressError, type_label
from mindvault.core.models import Resource
from mindvault.core.settings import get_settings
from mindvault.llm import Annotator, get_annotator
from mindvault.logging import setup_logging
from mindvault.storage import FileSlots, ResourceStore
from mindvault.usecases import ResourceLifecycle, SubmissionForm, filter_resources

# Sidebar order of the type selector
SIDEBAR_TYPES: List[str] = [
    ALL,
    ResourceType.VIDEO.value,
    ResourceType.ARTICLE.value,
    ResourceType.TWEET.value,
    ResourceType.AUDIO.value,
]


# ---------------------------------------------------------------------------
# Dependency factories


def get_store(request: Request) -> ResourceStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        settings = get_settings()
        store = ResourceStore(FileSlots(settings.data_dir), settings.storage_key)
        store.load()
        request.app.state.store = store
    return store


def get_annotation_service(request: Request) -> Annotator:
    annotator = getattr(request.app.state, "annotator", None)
    if annotator is None:
        annotator = get_annotator(get_settings())
        request.app.state.annotator = annotator
    return annotator


def get_lifecycle(
    store: ResourceStore = Depends(get_store),
    annotator: Annotator = Depends(get_annotation_service),
) -> ResourceLifecycle:
    return ResourceLifecycle(store, annotator, get_settings().content_language)


def get_forms(request: Request) -> Dict[str, SubmissionForm]:
    forms = getattr(request.app.state, "forms", None)
    if forms is None:
        forms = {}
        request.app.state.forms = forms
    return forms


# ---------------------------------------------------------------------------
# Pydantic schemas


class _CamelRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateResourceRequest(_CamelRequest):
    title: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    type: ResourceType = ResourceType.ARTICLE
    platform: Optional[str] = None
    content_raw: Optional[str] = None

    def to_draft(self) -> ResourceDraft:
        return ResourceDraft(
            title=self.title,
            url=self.url,
            type=self.type,
            platform=self.platform,
            content_raw=self.content_raw,
        )


class UpdateNotesRequest(_CamelRequest):
    user_notes: str


def _dump(resource: Resource) -> Dict[str, Any]:
    return resource.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# FastAPI application

app = FastAPI(title="MindVault API")


# Routes ---------------------------------------------------------------------


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/types")
def list_types() -> List[Dict[str, str]]:
    lang = get_settings().content_language
    return [{"id": t, "label": type_label(t, lang)} for t in SIDEBAR_TYPES]


@app.get("/resources")
def list_resources(
    type_filter: str = Query(ALL, alias="type"),
    q: str = Query(""),
    store: ResourceStore = Depends(get_store),
) -> Dict[str, Any]:
    if type_filter != ALL and type_filter not in ResourceType.__members__:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown resource type: {type_filter}",
        )
    items = filter_resources(store.resources, type_filter, q)
    return {
        "items": [_dump(r) for r in items],
        "total": len(store),
        "count": len(items),
    }


@app.get("/resources/{resource_id}")
def get_resource(resource_id: str, store: ResourceStore = Depends(get_store)) -> Dict[str, Any]:
    resource = store.get(resource_id)
    if resource is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource not found")
    return _dump(resource)


@app.post("/resources", status_code=status.HTTP_201_CREATED)
async def create_resource(
    req: CreateResourceRequest,
    form_id: Optional[str] = Header(None, alias="X-Form-Id"),
    lifecycle: ResourceLifecycle = Depends(get_lifecycle),
    forms: Dict[str, SubmissionForm] = Depends(get_forms),
) -> Dict[str, Any]:
    if form_id is None:
        form = SubmissionForm(lifecycle)
    else:
        form = forms.setdefault(form_id, SubmissionForm(lifecycle))
        # The form may outlive the request-scoped lifecycle it was built with
        form.lifecycle = lifecycle
    try:
        resource = await form.submit(req.to_draft())
    except SubmissionInProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    finally:
        # Forms are only tracked while a submission is running
        if form_id is not None and not form.busy:
            forms.pop(form_id, None)
    return _dump(resource)


@app.patch("/resources/{resource_id}/notes")
def update_notes(
    resource_id: str,
    req: UpdateNotesRequest,
    lifecycle: ResourceLifecycle = Depends(get_lifecycle),
) -> Dict[str, Any]:
    resource = lifecycle.update_notes(resource_id, req.user_notes)
    if resource is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource not found")
    return _dump(resource)


@app.delete("/resources/{resource_id}")
def delete_resource(
    resource_id: str,
    confirm: bool = Query(False),
    lifecycle: ResourceLifecycle = Depends(get_lifecycle),
) -> Dict[str, Any]:
    deleted = lifecycle.delete(resource_id, lambda _resource: confirm)
    if not confirm:
        # Nothing happened; the client repeats the call with confirm=true
        lang = get_settings().content_language
        return {"deleted": False, "detail": L(lang, "resource.delete_confirm")}
    return {"deleted": deleted}


def run() -> None:
    """Console entry point: configure logging and serve the API."""

    import uvicorn

    setup_logging()
    uvicorn.run(app, host="0.0.0.0", port=8000, log_config=None)


__all__ = ["app", "run"]
