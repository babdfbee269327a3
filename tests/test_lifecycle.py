import asyncio

import pytest

from conftest import StubAnnotator, make_resource
from mindvault.core import AnnotationResult, ResourceDraft, ResourceType, SubmissionInProgressError
from mindvault.storage import MemorySlots, ResourceStore
from mindvault.usecases import ResourceLifecycle, SubmissionForm


def test_create_scenario(store: ResourceStore) -> None:
    annotator = StubAnnotator(AnnotationResult(summary="s", suggested_tags=["a", "b"]))
    lifecycle = ResourceLifecycle(store, annotator)
    draft = ResourceDraft(
        title="Test", url="https://x.com", type=ResourceType.ARTICLE, content_raw="hello"
    )

    resource = asyncio.run(lifecycle.create(draft))

    assert len(store) == 1
    stored = store.resources[0]
    assert stored == resource
    assert stored.title == "Test"
    assert stored.summary == "s"
    assert stored.tags == ["a", "b"]
    assert stored.user_notes == ""
    assert stored.content_raw == "hello"
    assert annotator.calls == [("Test", "hello", ResourceType.ARTICLE)]


def test_create_applies_defaults(store: ResourceStore) -> None:
    annotator = StubAnnotator()
    lifecycle = ResourceLifecycle(store, annotator, language="zh")

    resource = asyncio.run(lifecycle.create(ResourceDraft()))

    assert resource.title == "无标题"
    assert resource.url == "#"
    assert resource.type == ResourceType.ARTICLE
    assert resource.platform == "未知"
    assert annotator.calls == [("无标题", "No detailed content provided", ResourceType.ARTICLE)]


def test_create_uses_english_defaults(store: ResourceStore) -> None:
    lifecycle = ResourceLifecycle(store, StubAnnotator(), language="en")

    resource = asyncio.run(lifecycle.create(ResourceDraft(url="https://x.com")))

    assert resource.title == "Untitled"
    assert resource.platform == "Unknown"


def test_create_falls_back_when_annotator_fails(store: ResourceStore) -> None:
    lifecycle = ResourceLifecycle(store, StubAnnotator(error=RuntimeError("network down")))

    resource = asyncio.run(lifecycle.create(ResourceDraft(title="Test", url="https://x.com")))

    assert len(store) == 1
    assert resource.summary == "暂时无法生成摘要。"
    assert resource.tags == ["未分类"]


def test_create_generates_unique_ids(store: ResourceStore) -> None:
    lifecycle = ResourceLifecycle(store, StubAnnotator())

    async def _create_many():
        for i in range(10):
            await lifecycle.create(ResourceDraft(title=f"t{i}"))

    asyncio.run(_create_many())

    ids = [r.id for r in store]
    assert len(set(ids)) == 10
    assert [r.title for r in store][0] == "t9"


def test_delete_requires_confirmation(store: ResourceStore) -> None:
    store.insert(make_resource("a"))
    lifecycle = ResourceLifecycle(store, StubAnnotator())
    before = store.slots.get(store.key)
    seen = []

    def decline(resource):
        seen.append(resource)
        return False

    assert lifecycle.delete("a", decline) is False
    assert len(store) == 1
    assert store.slots.get(store.key) == before
    assert seen[0].id == "a"

    assert lifecycle.delete("a", lambda _: True) is True
    assert len(store) == 0


def test_update_notes_passthrough(store: ResourceStore) -> None:
    store.insert(make_resource("a"))
    lifecycle = ResourceLifecycle(store, StubAnnotator())

    updated = lifecycle.update_notes("a", "thoughts")

    assert updated.user_notes == "thoughts"
    assert store.get("a").user_notes == "thoughts"


class _BlockingAnnotator(StubAnnotator):
    def __init__(self) -> None:
        super().__init__()
        self.release = asyncio.Event()

    async def analyze(self, title, content, resource_type):
        await self.release.wait()
        return await super().analyze(title, content, resource_type)


def test_form_rejects_second_submit_while_busy() -> None:
    store = ResourceStore(MemorySlots())
    store.load()
    annotator = _BlockingAnnotator()
    form = SubmissionForm(ResourceLifecycle(store, annotator))

    async def scenario():
        first = asyncio.create_task(form.submit(ResourceDraft(title="one")))
        await asyncio.sleep(0)
        assert form.busy is True
        with pytest.raises(SubmissionInProgressError):
            await form.submit(ResourceDraft(title="two"))
        annotator.release.set()
        return await first

    resource = asyncio.run(scenario())

    assert form.busy is False
    assert resource.title == "one"
    assert len(annotator.calls) == 1
    assert [r.title for r in store][0] == "one"


def test_closing_form_does_not_cancel_submission(store: ResourceStore) -> None:
    annotator = _BlockingAnnotator()
    form = SubmissionForm(ResourceLifecycle(store, annotator))

    async def scenario():
        task = asyncio.create_task(
            form.submit(ResourceDraft(title="late", type=ResourceType.VIDEO, platform="Bilibili"))
        )
        await asyncio.sleep(0)
        form.close()
        annotator.release.set()
        return await task

    resource = asyncio.run(scenario())

    assert store.get(resource.id) is not None
    assert form.is_open is False
    # type and platform are kept for the next entry, the rest is cleared
    assert form.draft == ResourceDraft(type=ResourceType.VIDEO, platform="Bilibili")


def test_form_is_released_after_failed_insert(store: ResourceStore, monkeypatch) -> None:
    form = SubmissionForm(ResourceLifecycle(store, StubAnnotator()))

    def boom(resource):
        raise OSError("disk full")

    monkeypatch.setattr(store, "insert", boom)

    with pytest.raises(OSError):
        asyncio.run(form.submit(ResourceDraft(title="x")))
    assert form.busy is False


def test_delete_unknown_id_reports_false(store: ResourceStore) -> None:
    store.insert(make_resource("a"))
    lifecycle = ResourceLifecycle(store, StubAnnotator())
    seen = []

    def accept(resource):
        seen.append(resource)
        return True

    assert lifecycle.delete("missing", accept) is False
    assert seen == [None]
    assert [r.id for r in store] == ["a"]
