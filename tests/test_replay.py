"""Replay redirect and flash transport tests"""
import pytest

from src.confirmation import (
    ConfirmationRequest,
    FlashStore,
    ReplayFailureError,
    ReplayRedirector,
    build_replay_url,
)


def test_build_replay_url():
    assert build_replay_url("/Forms/Submit", "Submit") == "/Forms/Submit?confirmed=true&handler=Submit"
    assert build_replay_url("/Forms/Submit?id=3", "Save") == "/Forms/Submit?id=3&confirmed=true&handler=Save"


async def test_redirect_preserves_method(clock):
    flash = FlashStore(clock=clock)
    redirector = ReplayRedirector(flash, cookie_name="flash")
    request = ConfirmationRequest(
        original_page_path="/Forms/Submit",
        original_handler="Submit",
        original_form_data={"name": "Alice"},
    )

    response = await redirector.redirect("tok", request)

    assert response.status_code == 307
    assert response.headers["location"] == "/Forms/Submit?confirmed=true&handler=Submit"
    cookie = response.headers["set-cookie"]
    assert cookie.startswith("flash=")

    flash_id = cookie.split(";")[0].split("=", 1)[1]
    assert await flash.take(flash_id) == {"form_data": {"name": "Alice"}, "handler": "Submit"}


async def test_redirect_without_handler_fails(clock):
    redirector = ReplayRedirector(FlashStore(clock=clock))

    with pytest.raises(ReplayFailureError) as exc_info:
        await redirector.replay("tok", "/Forms/Submit", "", {})

    assert exc_info.value.token == "tok"


async def test_flash_entry_is_read_once(clock):
    flash = FlashStore(clock=clock)
    flash_id = await flash.put({"form_data": {"a": "1"}})

    assert await flash.take(flash_id) == {"form_data": {"a": "1"}}
    assert await flash.take(flash_id) is None
    assert await flash.take("") is None


async def test_flash_entry_expires(clock):
    flash = FlashStore(ttl_seconds=5, clock=clock)
    flash_id = await flash.put({"form_data": {}})

    clock.advance(6)

    assert await flash.take(flash_id) is None


async def test_flash_put_purges_stale_entries(clock):
    flash = FlashStore(ttl_seconds=5, clock=clock)
    await flash.put({"form_data": {}})
    clock.advance(6)
    await flash.put({"form_data": {}})

    assert len(flash) == 1
