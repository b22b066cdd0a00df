import json

import pytest

from cordrest.core.dispatcher import RequestDispatcher, set_default_request_options
from cordrest.domain.errors import (
    BodyEncodingError,
    ClientError,
    RateLimitedError,
    RequestTimeoutError,
    UnexpectedStatusError,
)
from cordrest.domain.models.credential import Authorization, TokenType
from cordrest.domain.models.request import HttpMethod, RateLimitPolicy, RequestOptions
from cordrest.infrastructure.resilience.rate_limit_gate import RateLimitGate

API_BASE = "https://discord.test/api/v9/"

RATE_LIMITED = json.dumps({"message": "You are being rate limited.", "retry_after": 0.01, "global": False})


def make_dispatcher(transport):
    return RequestDispatcher(transport=transport, api_base=API_BASE)


@pytest.mark.asyncio
async def test_success_returns_decoded_body(scripted_transport, make_response):
    transport = scripted_transport([make_response(200, '{"id": "1", "name": "general"}')])
    result = await make_dispatcher(transport).dispatch(HttpMethod.GET, "channels/1")

    assert result == {"id": "1", "name": "general"}
    call = transport.calls[0]
    assert call["url"] == API_BASE + "channels/1"
    assert call["method"] == "GET"
    assert call["timeout_ms"] == 5000
    assert call["body"] is None
    assert "Content-Type" not in call["headers"]
    assert "Authorization" not in call["headers"]


@pytest.mark.asyncio
async def test_empty_success_body_resolves_none(scripted_transport, make_response):
    transport = scripted_transport([make_response(204)])
    assert await make_dispatcher(transport).dispatch("DELETE", "channels/1/messages/2") is None


@pytest.mark.asyncio
async def test_non_json_success_body_returns_raw_text(scripted_transport, make_response):
    transport = scripted_transport([make_response(200, "not json")])
    assert await make_dispatcher(transport).dispatch("GET", "gateway") == "not json"


@pytest.mark.asyncio
async def test_json_body_and_authorization_headers(scripted_transport, make_response):
    transport = scripted_transport([make_response(200, "{}")])
    options = RequestOptions(authorization=Authorization("abc", TokenType.BOT), connection_timeout=1234)

    await make_dispatcher(transport).dispatch("POST", "channels/1/messages", options, {"content": "héllo"})

    call = transport.calls[0]
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["headers"]["Authorization"] == "Bot abc"
    assert json.loads(call["body"]) == {"content": "héllo"}
    assert call["headers"]["Content-Length"] == str(len(call["body"].encode("utf-8")))
    assert call["timeout_ms"] == 1234


@pytest.mark.asyncio
async def test_string_body_is_sent_form_encoded(scripted_transport, make_response):
    transport = scripted_transport([make_response(200, '{"access_token": "t"}')])
    await make_dispatcher(transport).dispatch("POST", "oauth2/token", None, "grant_type=refresh_token&refresh_token=r")

    call = transport.calls[0]
    assert call["headers"]["Content-Type"] == "application/x-www-form-urlencoded"
    assert call["body"] == "grant_type=refresh_token&refresh_token=r"


@pytest.mark.asyncio
async def test_rate_limited_twice_then_success(scripted_transport, make_response, sleep_calls):
    transport = scripted_transport([
        make_response(429, RATE_LIMITED),
        make_response(429, RATE_LIMITED),
        make_response(200, '{"ok": true}'),
    ])
    observed = []
    options = RequestOptions(rate_limit=RateLimitPolicy(
        retry_count=2,
        callback=lambda response, attempts: observed.append((response["retry_after"], attempts)),
    ))

    result = await make_dispatcher(transport).dispatch("GET", "users/@me", options)

    assert result == {"ok": True}
    assert sleep_calls == [0.01, 0.01]
    assert observed == [(0.01, 1), (0.01, 2)]
    assert len(transport.calls) == 3


@pytest.mark.asyncio
async def test_retry_count_one_gives_up_after_one_retry(scripted_transport, make_response, sleep_calls):
    second_body = {"message": "still limited", "retry_after": 0.01, "global": False}
    transport = scripted_transport([
        make_response(429, RATE_LIMITED),
        make_response(429, json.dumps(second_body)),
    ])
    options = RequestOptions(rate_limit=RateLimitPolicy(retry_count=1))

    with pytest.raises(RateLimitedError) as exc_info:
        await make_dispatcher(transport).dispatch("GET", "users/@me", options)

    assert exc_info.value.status_code == 429
    assert exc_info.value.response == second_body
    assert exc_info.value.attempts == 2
    assert sleep_calls == [0.01]
    assert len(transport.calls) == 2


@pytest.mark.asyncio
async def test_retry_count_zero_means_no_retry(scripted_transport, make_response, sleep_calls):
    transport = scripted_transport([make_response(429, RATE_LIMITED)])
    options = RequestOptions(rate_limit=RateLimitPolicy(retry_count=0))

    with pytest.raises(RateLimitedError):
        await make_dispatcher(transport).dispatch("GET", "users/@me", options)

    assert sleep_calls == []
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_default_retry_count_is_five(scripted_transport, make_response, sleep_calls):
    transport = scripted_transport([make_response(429, RATE_LIMITED) for _ in range(6)])

    with pytest.raises(RateLimitedError) as exc_info:
        await make_dispatcher(transport).dispatch("GET", "users/@me")

    assert exc_info.value.attempts == 6
    assert len(sleep_calls) == 5


@pytest.mark.asyncio
async def test_retry_delay_is_rounded_up_to_milliseconds(scripted_transport, make_response, sleep_calls):
    transport = scripted_transport([
        make_response(429, '{"retry_after": 0.0004, "global": false}'),
        make_response(200, "{}"),
    ])
    await make_dispatcher(transport).dispatch("GET", "users/@me")
    assert sleep_calls == [0.001]


@pytest.mark.asyncio
async def test_rate_limited_without_retry_after_fails_immediately(scripted_transport, make_response, sleep_calls):
    transport = scripted_transport([make_response(429, '{"message": "slow down", "global": false}')])
    options = RequestOptions(rate_limit=RateLimitPolicy(retry_count=10))

    with pytest.raises(RateLimitedError) as exc_info:
        await make_dispatcher(transport).dispatch("GET", "users/@me", options)

    assert exc_info.value.response == {"message": "slow down", "global": False}
    assert sleep_calls == []
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_client_error_is_not_retried(scripted_transport, make_response, sleep_calls):
    transport = scripted_transport([make_response(404, '{"message": "Unknown Channel", "code": 10003}')])

    with pytest.raises(ClientError) as exc_info:
        await make_dispatcher(transport).dispatch("GET", "channels/0")

    assert exc_info.value.status_code == 404
    assert exc_info.value.response == {"message": "Unknown Channel", "code": 10003}
    assert "Unknown Channel" in str(exc_info.value)
    assert sleep_calls == []
    assert len(transport.calls) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [301, 500, 502, 600])
async def test_unexpected_status_carries_no_body(scripted_transport, make_response, status_code):
    transport = scripted_transport([make_response(status_code, '{"message": "boom"}')])

    with pytest.raises(UnexpectedStatusError) as exc_info:
        await make_dispatcher(transport).dispatch("GET", "channels/1")

    assert exc_info.value.status_code == status_code
    assert exc_info.value.response is None


@pytest.mark.asyncio
async def test_transport_timeout_is_never_retried(scripted_transport, sleep_calls):
    transport = scripted_transport([RequestTimeoutError()])
    options = RequestOptions(rate_limit=RateLimitPolicy(retry_count=10))

    with pytest.raises(RequestTimeoutError):
        await make_dispatcher(transport).dispatch("GET", "users/@me", options)

    assert len(transport.calls) == 1
    assert sleep_calls == []


@pytest.mark.asyncio
async def test_unencodable_body_fails_before_sending(scripted_transport):
    transport = scripted_transport([])

    with pytest.raises(BodyEncodingError):
        await make_dispatcher(transport).dispatch("POST", "channels/1/messages", None, {"content": object()})

    assert transport.calls == []


@pytest.mark.asyncio
async def test_failing_observer_does_not_change_outcome(scripted_transport, make_response, sleep_calls):
    transport = scripted_transport([make_response(429, RATE_LIMITED), make_response(200, '"done"')])

    def broken_callback(response, attempts):
        raise RuntimeError("observer bug")

    options = RequestOptions(rate_limit=RateLimitPolicy(callback=broken_callback))
    assert await make_dispatcher(transport).dispatch("GET", "users/@me", options) == "done"


@pytest.mark.asyncio
async def test_default_options_are_merged_under_call_options(scripted_transport, make_response):
    set_default_request_options(RequestOptions(
        authorization=Authorization("default-token"),
        connection_timeout=9000,
    ))
    transport = scripted_transport([make_response(200, "{}"), make_response(200, "{}")])
    dispatcher = make_dispatcher(transport)

    await dispatcher.dispatch("GET", "users/@me")
    await dispatcher.dispatch("GET", "users/@me", RequestOptions(
        authorization=Authorization("oauth", TokenType.BEARER),
    ))

    assert transport.calls[0]["headers"]["Authorization"] == "Bot default-token"
    assert transport.calls[0]["timeout_ms"] == 9000
    assert transport.calls[1]["headers"]["Authorization"] == "Bearer oauth"
    assert transport.calls[1]["timeout_ms"] == 9000


@pytest.mark.asyncio
async def test_global_rate_limit_blocks_shared_gate(scripted_transport, make_response, sleep_calls):
    gate = RateLimitGate()
    transport = scripted_transport([
        make_response(429, '{"message": "global", "retry_after": 2.5, "global": true}'),
    ])
    options = RequestOptions(limiter=gate, rate_limit=RateLimitPolicy(retry_count=0))

    with pytest.raises(RateLimitedError):
        await make_dispatcher(transport).dispatch("GET", "users/@me", options)

    assert await gate.get_wait_time() > 2.0


@pytest.mark.asyncio
@pytest.mark.parametrize("raw_retry_after", ["1e308", "NaN", "Infinity", "-Infinity", "1" + "0" * 400])
async def test_unusable_retry_after_fails_without_retry(scripted_transport, make_response, sleep_calls, raw_retry_after):
    gate = RateLimitGate()
    transport = scripted_transport([
        make_response(429, '{"message": "slow down", "retry_after": %s, "global": true}' % raw_retry_after),
    ])
    options = RequestOptions(limiter=gate, rate_limit=RateLimitPolicy(retry_count=1))

    with pytest.raises(RateLimitedError) as exc_info:
        await make_dispatcher(transport).dispatch("GET", "users/@me", options)

    assert exc_info.value.attempts == 1
    assert sleep_calls == []
    assert len(transport.calls) == 1
    assert await gate.get_wait_time() == 0
