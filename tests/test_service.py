"""ConfirmationService tests"""
import asyncio

import pytest

from src.confirmation import (
    ConfirmationRequest,
    ConfirmationService,
    InvalidConfirmationRequestError,
    get_confirmation_service,
    reset_confirmation_service,
)
from src.utils.config import ConfirmationConfig


async def test_create_returns_fresh_hex_tokens(service, submit_request):
    first = await service.create_confirmation(submit_request)
    second = await service.create_confirmation(submit_request)

    assert first != second
    assert len(first) == 64
    int(first, 16)


async def test_create_ignores_caller_token(service):
    request = ConfirmationRequest(
        confirmation_token="chosen-by-caller",
        original_page_path="/Forms/Submit",
        original_handler="Submit",
    )

    token = await service.create_confirmation(request)

    assert token != "chosen-by-caller"
    context = await service.get_confirmation(token)
    assert context.request.confirmation_token == token


@pytest.mark.parametrize("path, handler", [("", "Submit"), ("/Forms/Submit", ""), ("   ", "Submit")])
async def test_create_requires_path_and_handler(service, path, handler):
    request = ConfirmationRequest(original_page_path=path, original_handler=handler)

    with pytest.raises(InvalidConfirmationRequestError):
        await service.create_confirmation(request)


async def test_create_rejects_non_positive_ttl(service, submit_request):
    with pytest.raises(InvalidConfirmationRequestError):
        await service.create_confirmation(submit_request, ttl_seconds=0)


async def test_display_model_and_lookup_agree(service, submit_request):
    token = await service.create_confirmation(submit_request)

    model = await service.prepare_display_model(token)
    context = await service.get_confirmation(token)

    assert model.confirmation_token == token
    assert model.original_form_data == context.request.original_form_data == {"name": "Alice"}
    assert model.original_action_url == "/Forms/Submit?handler=Submit"
    assert model.return_url == "/Forms/Edit"
    assert model.title == "Confirm your action"
    assert model.required_message == "Select yes if you want to continue"
    assert model.display_data == {"Name": "Alice"}


async def test_display_model_uses_custom_text(service):
    token = await service.create_confirmation(ConfirmationRequest(
        original_page_path="/Contributors",
        original_handler="Remove",
        original_form_data={"contributorEmail": " JO@Example.com ", "handler": "Remove"},
        display_fields=["contributorEmail"],
        title="Remove this contributor?",
        required_message="Select yes to remove",
    ))

    model = await service.prepare_display_model(token)

    assert model.title == "Remove this contributor?"
    assert model.required_message == "Select yes to remove"
    assert model.display_data == {"Email Address": "jo@example.com"}


async def test_form_data_is_stored_verbatim(service):
    form_data = {"b": " spaced ", "a": ["1", "2"], "empty": "", "__RequestVerificationToken": "x"}
    token = await service.create_confirmation(ConfirmationRequest(
        original_page_path="/Forms/Submit",
        original_handler="Submit",
        original_form_data=form_data,
    ))

    context = await service.get_confirmation(token)

    assert context.request.original_form_data == form_data
    assert list(context.request.original_form_data) == ["b", "a", "empty", "__RequestVerificationToken"]


async def test_caller_mutation_does_not_leak_into_store(service, submit_request):
    token = await service.create_confirmation(submit_request)
    submit_request.original_form_data["name"] = "Mallory"

    context = await service.get_confirmation(token)

    assert context.request.original_form_data == {"name": "Alice"}


async def test_cleared_token_is_gone_for_good(service, submit_request):
    token = await service.create_confirmation(submit_request)

    await service.clear_confirmation(token)
    await service.clear_confirmation(token)

    assert await service.get_confirmation(token) is None
    assert await service.prepare_display_model(token) is None
    assert await service.is_valid_token(token) is False


async def test_expired_token_is_gone_for_good(service, submit_request, clock):
    token = await service.create_confirmation(submit_request, ttl_seconds=60)
    assert await service.is_valid_token(token)

    clock.advance(61)

    assert await service.get_confirmation(token) is None
    assert await service.prepare_display_model(token) is None
    clock.advance(-61)
    assert await service.get_confirmation(token) is None


async def test_empty_token_lookups(service):
    assert await service.get_confirmation("") is None
    assert await service.prepare_display_model("") is None
    assert await service.consume_confirmation("") is None
    await service.clear_confirmation("")


async def test_racing_consumers_resolve_once(service, submit_request):
    """A confirm and a decline racing on one token: exactly one proceeds"""
    token = await service.create_confirmation(submit_request)

    confirm, decline = await asyncio.gather(
        service.consume_confirmation(token),
        service.consume_confirmation(token),
    )

    assert (confirm is None) != (decline is None)


async def test_cleanup_expired_delegates_to_store(service, submit_request, clock):
    await service.create_confirmation(submit_request, ttl_seconds=5)
    clock.advance(10)

    assert await service.cleanup_expired() == 1


def test_singleton_accessors():
    config = ConfirmationConfig(sweep_interval_seconds=0)

    first = get_confirmation_service(config)
    assert get_confirmation_service() is first

    reset_confirmation_service()
    assert get_confirmation_service(config) is not first
    assert isinstance(first, ConfirmationService)
