from __future__ import annotations

import fakeredis
import pytest

from support import (
    Counter,
    Failing,
    PagedList,
    PlatformRecorder,
    Profile,
    RecordingHooks,
    Scenario,
    make_interaction,
    make_modal_submit,
)
from uistate.api.models import InteractionType, Origin
from uistate.buttons import Delete, EventHandler, Noop, RedisErrorHooks, Registry, SelectNav, ToPage
from uistate.buttons.hooks import GENERIC_ERROR_MESSAGE
from uistate.errors import HandlerUnsupported, ModalParseError, UnknownActionKey
from uistate.packing.errors import PrefixSuffix
from uistate.streams import recent_error_reports


def _assert_generic_error_reply(recorder: PlatformRecorder) -> None:
    body = recorder.callbacks[-1].body
    assert body == {
        "type": 4,
        "data": {"content": GENERIC_ERROR_MESSAGE, "embeds": [], "components": [], "flags": 64},
    }


@pytest.mark.asyncio
async def test_button_dispatch_end_to_end(event_handler: EventHandler, recorder: PlatformRecorder, hooks: RecordingHooks) -> None:
    await event_handler.dispatch(make_interaction(Counter(count=4).to_custom_id()))

    assert hooks.errors == []
    assert hooks.buttons == [Counter(count=4)]
    assert recorder.callbacks[0].body == {"type": 7, "data": {"content": "count=5"}}


@pytest.mark.asyncio
async def test_concrete_scenario_dispatch(event_handler: EventHandler, recorder: PlatformRecorder, hooks: RecordingHooks) -> None:
    value = Scenario(a=16, b="hello world", c=-16)
    await event_handler.dispatch_component(make_interaction(value.to_custom_id()))

    assert hooks.buttons == [value]
    assert recorder.callbacks[0].body["data"]["content"] == "16 hello world -16"


@pytest.mark.asyncio
async def test_unknown_key_is_reported_not_raised(recorder: PlatformRecorder, hooks: RecordingHooks) -> None:
    handler = EventHandler(Registry.build([Counter]), client=recorder.client(), hooks=hooks)
    await handler.dispatch(make_interaction(PagedList(1).to_custom_id()))

    assert len(hooks.errors) == 1
    assert isinstance(hooks.errors[0], UnknownActionKey)
    assert hooks.errors[0].key == 11
    _assert_generic_error_reply(recorder)


@pytest.mark.asyncio
async def test_malformed_text_is_a_separate_error(event_handler: EventHandler, recorder: PlatformRecorder, hooks: RecordingHooks) -> None:
    await event_handler.dispatch(make_interaction("garbage"))

    assert isinstance(hooks.errors[0], PrefixSuffix)
    assert not isinstance(hooks.errors[0], UnknownActionKey)
    _assert_generic_error_reply(recorder)


@pytest.mark.asyncio
async def test_handler_failure_does_not_leak_details(event_handler: EventHandler, recorder: PlatformRecorder, hooks: RecordingHooks) -> None:
    await event_handler.dispatch(make_interaction(Failing("db is down").to_custom_id()))

    assert isinstance(hooks.errors[0], RuntimeError)
    _assert_generic_error_reply(recorder)
    assert "db is down" not in str(recorder.calls)


@pytest.mark.asyncio
async def test_missing_custom_id_is_reported(event_handler: EventHandler, hooks: RecordingHooks) -> None:
    await event_handler.dispatch(make_interaction(None))
    assert isinstance(hooks.errors[0], ValueError)


@pytest.mark.asyncio
async def test_modal_on_type_without_modal_handler(event_handler: EventHandler, hooks: RecordingHooks) -> None:
    await event_handler.dispatch(make_modal_submit(Counter(1).to_custom_id(), {}))

    assert isinstance(hooks.errors[0], HandlerUnsupported)
    assert hooks.modals == []


@pytest.mark.asyncio
async def test_noop_is_not_usable(event_handler: EventHandler, hooks: RecordingHooks) -> None:
    await event_handler.dispatch(make_interaction(Noop.for_path("row.0").to_custom_id()))

    assert isinstance(hooks.errors[0], HandlerUnsupported)
    assert "not intended to be used" in str(hooks.errors[0])


@pytest.mark.asyncio
async def test_delete_acknowledges_then_deletes(event_handler: EventHandler, recorder: PlatformRecorder, hooks: RecordingHooks) -> None:
    await event_handler.dispatch(make_interaction(Delete().to_custom_id()))

    assert hooks.errors == []
    assert [(c.method, c.body) for c in recorder.calls] == [("POST", {"type": 6}), ("DELETE", None)]
    assert recorder.calls[1].path.endswith("/messages/@original")


@pytest.mark.asyncio
async def test_select_nav_dispatches_selected_custom_id(event_handler: EventHandler, recorder: PlatformRecorder, hooks: RecordingHooks) -> None:
    interaction = make_interaction(SelectNav().to_custom_id(), values=[Counter(7).to_custom_id()])
    await event_handler.dispatch(interaction)

    assert hooks.errors == []
    assert recorder.callbacks[0].body == {"type": 7, "data": {"content": "count=8"}}


@pytest.mark.asyncio
async def test_select_nav_refuses_to_recurse(event_handler: EventHandler, hooks: RecordingHooks) -> None:
    interaction = make_interaction(SelectNav().to_custom_id(), values=[SelectNav(1).to_custom_id()])
    await event_handler.dispatch(interaction)

    assert isinstance(hooks.errors[0], ValueError)


@pytest.mark.asyncio
async def test_to_page_opens_form_and_target_reads_page(event_handler: EventHandler, recorder: PlatformRecorder, hooks: RecordingHooks) -> None:
    target = PagedList(page=2)
    await event_handler.dispatch(make_interaction(ToPage.for_value(target).to_custom_id()))

    modal = recorder.callbacks[0].body
    assert modal["type"] == 9
    assert modal["data"]["custom_id"] == target.to_custom_id()
    assert modal["data"]["components"][0]["components"][0]["custom_id"] == "page"

    await event_handler.dispatch(make_modal_submit(modal["data"]["custom_id"], {"page": "5"}))

    assert hooks.errors == []
    assert hooks.modals == [target]
    assert recorder.callbacks[1].body == {"type": 7, "data": {"content": "page 4"}}


@pytest.mark.asyncio
async def test_to_page_rejects_bad_page(event_handler: EventHandler, hooks: RecordingHooks) -> None:
    await event_handler.dispatch(make_modal_submit(PagedList(0).to_custom_id(), {"page": "zero"}))
    await event_handler.dispatch(make_modal_submit(PagedList(0).to_custom_id(), {"page": "0"}))

    assert [type(e) for e in hooks.errors] == [ModalParseError, ModalParseError]


@pytest.mark.asyncio
async def test_form_round_trip(event_handler: EventHandler, recorder: PlatformRecorder, hooks: RecordingHooks) -> None:
    await event_handler.dispatch(make_interaction(Profile(name="ada").to_custom_id()))
    form_id = recorder.callbacks[0].body["data"]["custom_id"]

    await event_handler.dispatch(make_modal_submit(form_id, {"name": "grace"}))

    assert hooks.errors == []
    assert recorder.callbacks[1].body["data"]["content"] == "renamed ada to grace"


@pytest.mark.asyncio
async def test_error_after_modal_does_not_reply(event_handler: EventHandler, recorder: PlatformRecorder, hooks: RecordingHooks) -> None:
    await event_handler.dispatch(make_interaction(Profile(name="x", fail_after_modal=True).to_custom_id()))

    assert isinstance(hooks.errors[0], RuntimeError)
    assert len(recorder.calls) == 1
    assert recorder.calls[0].body["type"] == 9


@pytest.mark.asyncio
async def test_error_after_reply_is_sent_as_followup(recorder: PlatformRecorder, hooks: RecordingHooks, registry: Registry) -> None:
    handler = EventHandler(registry, client=recorder.client(), hooks=hooks)
    ctx = await handler.handle(make_interaction(Counter(1).to_custom_id()), Origin.component)
    await hooks.handle_error(ctx, RuntimeError("late failure"))

    assert len(recorder.callbacks) == 1
    assert recorder.followups[0].body["flags"] == 64


@pytest.mark.asyncio
async def test_failed_platform_call_while_reporting_is_logged(registry: Registry, hooks: RecordingHooks) -> None:
    recorder = PlatformRecorder(status_code=500)
    handler = EventHandler(registry, client=recorder.client(), hooks=hooks)

    await handler.dispatch(make_interaction(Counter(1).to_custom_id()))

    # The handler's own edit failed, then the error notice failed too; neither escaped.
    assert len(hooks.errors) == 1
    assert len(recorder.calls) == 2


@pytest.mark.asyncio
async def test_dispatch_rejects_interactions_without_custom_ids(event_handler: EventHandler) -> None:
    ping = make_interaction(None, type=InteractionType.ping)
    with pytest.raises(ValueError):
        await event_handler.dispatch(ping)


@pytest.mark.asyncio
async def test_redis_error_hooks_publish_reports(registry: Registry, recorder: PlatformRecorder) -> None:
    r = fakeredis.FakeRedis(decode_responses=True)
    handler = EventHandler(registry, client=recorder.client(), hooks=RedisErrorHooks(r=r, stream="errors"))

    await handler.dispatch(make_interaction("garbage", interaction_id="42"))

    reports = recent_error_reports(r=r, stream="errors")
    assert len(reports) == 1
    _, report = reports[0]
    assert report.interaction_id == "42"
    assert report.origin == "component"
    assert report.custom_id == "garbage"
    assert report.error_type == "PrefixSuffix"
    _assert_generic_error_reply(recorder)
