"""
Blog API — Pipeline and Authorization Stage Tests
==================================================

What:  Tests for the stage dispatcher, body parsing and the token check.
How:   Builds bare Starlette requests from an ASGI scope; no app, no database.

What we test:
    ✅ Stages run in order and the first Halt short-circuits the rest
    ✅ Invalid JSON and non-object bodies halt with 400
    ✅ The authorization stage accepts Bearer and x-access-token headers
    ✅ Missing or rejected tokens halt with 401 before the action runs
"""

import json
from unittest.mock import AsyncMock

import pytest
from starlette.requests import Request

from blogapi.middleware.auth import AuthorizationStage, extract_token
from blogapi.pipeline import (
    Continue,
    Halt,
    RequestContext,
    dispatch,
    parse_json_body,
    validate_with,
)
from blogapi.results import Result
from blogapi.services.token_service import TokenService
from blogapi.validation.rulesets import ID_PARAM


def make_request(method="GET", path="/api/things", headers=None, body=b"", path_params=None):
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "headers": raw_headers,
        "query_string": b"",
        "path_params": path_params or {},
    }

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


def payload(response):
    return json.loads(response.body)


class TestParseJsonBody:

    @pytest.mark.asyncio
    async def test_object_body(self):
        request = make_request("POST", body=b'{"title": "Hi"}')
        outcome = await parse_json_body(RequestContext.from_request(request))
        assert isinstance(outcome, Continue)
        assert outcome.context.body == {"title": "Hi"}

    @pytest.mark.asyncio
    async def test_empty_body_is_empty_object(self):
        outcome = await parse_json_body(RequestContext.from_request(make_request("POST")))
        assert isinstance(outcome, Continue)
        assert outcome.context.body == {}

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        request = make_request("POST", body=b'{"title": ')
        outcome = await parse_json_body(RequestContext.from_request(request))
        assert isinstance(outcome, Halt)
        assert outcome.response.status_code == 400
        assert payload(outcome.response)["errors"][0]["message"] == "Invalid JSON"

    @pytest.mark.asyncio
    async def test_array_body_rejected(self):
        request = make_request("POST", body=b"[1, 2]")
        outcome = await parse_json_body(RequestContext.from_request(request))
        assert isinstance(outcome, Halt)
        assert outcome.response.status_code == 400


class TestDispatch:

    @pytest.mark.asyncio
    async def test_success_envelope(self):
        action = AsyncMock(return_value=Result.success({"id": 1}))
        response = await dispatch(make_request(), [], action)
        assert response.status_code == 200
        assert payload(response) == {"result": 200, "data": {"id": 1}}

    @pytest.mark.asyncio
    async def test_failure_envelope(self):
        action = AsyncMock(return_value=Result.not_found("Post"))
        response = await dispatch(make_request(), [], action)
        assert response.status_code == 404
        body = payload(response)
        assert body["errors"] == [{"field": None, "location": None, "message": "Post not found"}]
        assert "request_id" in body

    @pytest.mark.asyncio
    async def test_halt_skips_later_stages_and_action(self):
        later = AsyncMock()
        action = AsyncMock()
        request = make_request(path_params={"id": "abc"})
        response = await dispatch(request, [validate_with(ID_PARAM), later], action)

        assert response.status_code == 422
        assert payload(response)["errors"][0]["field"] == "id"
        later.assert_not_awaited()
        action.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stages_see_previous_context(self):
        seen = {}

        async def action(ctx):
            seen["body"] = ctx.body
            return Result.success(None)

        request = make_request("POST", body=b'{"content": "x"}')
        await dispatch(request, [parse_json_body], action)
        assert seen["body"] == {"content": "x"}


class TestAuthorizationStage:

    def setup_method(self):
        self.tokens = TokenService(secret="stage-secret")
        self.stage = AuthorizationStage(self.tokens)

    def test_extract_bearer(self):
        request = make_request(headers={"Authorization": "Bearer abc.def.ghi"})
        assert extract_token(request) == "abc.def.ghi"

    def test_extract_fallback_header(self):
        request = make_request(headers={"x-access-token": "abc.def.ghi"})
        assert extract_token(request) == "abc.def.ghi"

    def test_extract_none(self):
        assert extract_token(make_request()) is None
        assert extract_token(make_request(headers={"Authorization": "Basic dXNlcg=="})) is None

    @pytest.mark.asyncio
    async def test_valid_token_attaches_user(self):
        request = make_request(headers={"Authorization": f"Bearer {self.tokens.issue(9)}"})
        outcome = await self.stage(RequestContext.from_request(request))
        assert isinstance(outcome, Continue)
        assert outcome.context.user_id == 9

    @pytest.mark.asyncio
    async def test_missing_token_halts(self):
        outcome = await self.stage(RequestContext.from_request(make_request()))
        assert isinstance(outcome, Halt)
        assert outcome.response.status_code == 401
        assert payload(outcome.response)["errors"][0]["message"] == "Unauthorized"

    @pytest.mark.asyncio
    async def test_rejected_token_halts_before_action(self):
        action = AsyncMock()
        request = make_request(headers={"Authorization": "Bearer forged"})
        response = await dispatch(request, [self.stage], action)
        assert response.status_code == 401
        action.assert_not_awaited()
