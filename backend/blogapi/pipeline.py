"""
Blog API — Request Pipeline and Dispatcher
===========================================

What:  Runs an ordered list of request stages, then a controller action, and
       renders the outcome as an HTTP response.
How:   Each stage receives the current RequestContext and returns either
       Continue(context) (possibly augmented, e.g. with the authenticated user)
       or Halt(response). The first Halt wins; otherwise the action runs and
       its Result is rendered.
Who:   Every /api route handler calls `dispatch()` with its own stage list.

Typical stage lists:
    POST /api/users          [parse_json_body, validate_with(USER_CREATE)]
    PUT  /api/users/{id}     [parse_json_body, AuthorizationStage(tokens), validate_with(USER_UPDATE)]
    GET  /api/users/{id}     [validate_with(ID_PARAM)]

Response shapes:
    success: 200 {"result": 200, "data": ...}
    failure: <status of ErrorKind> {"errors": [...], "request_id": "..."}
"""

import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence, Union

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.requests import Request
from starlette.responses import Response

from blogapi.middleware.request_id import request_id_var
from blogapi.results import ErrorKind, Failure, Result
from blogapi.validation.rules import BODY, PARAMS, QUERY, Rule, validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Everything a stage or action may read about the current request."""

    request: Request
    body: Dict[str, Any] = field(default_factory=dict)
    params: Dict[str, Any] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)
    user_id: Optional[int] = None

    @classmethod
    def from_request(cls, request: Request) -> "RequestContext":
        return cls(
            request=request,
            params=dict(request.path_params),
            query=dict(request.query_params),
        )

    def int_param(self, name: str = "id") -> int:
        """Path parameter as int; only call after a PositiveInt rule has passed."""
        return int(self.params[name])


@dataclass(frozen=True)
class Continue:
    context: RequestContext


@dataclass(frozen=True)
class Halt:
    response: Response


StageOutcome = Union[Continue, Halt]
Stage = Callable[[RequestContext], Awaitable[StageOutcome]]
Action = Callable[[RequestContext], Awaitable[Result[Any]]]


# ══════════════════════════════════════════════════════════════════════════
# Rendering
# ══════════════════════════════════════════════════════════════════════════

def failure_response(failure: Failure) -> JSONResponse:
    return JSONResponse(
        status_code=failure.kind.status_code,
        content={
            "errors": [error.to_dict() for error in failure.errors],
            "request_id": request_id_var.get(""),
        },
    )


def success_response(value: Any) -> JSONResponse:
    return JSONResponse(status_code=200, content={"result": 200, "data": jsonable_encoder(value)})


def render(result: Result[Any]) -> JSONResponse:
    if result.ok:
        return success_response(result.value)
    return failure_response(result.failure)


# ══════════════════════════════════════════════════════════════════════════
# Stages
# ══════════════════════════════════════════════════════════════════════════

async def parse_json_body(context: RequestContext) -> StageOutcome:
    """
    Reads the request body as a JSON object into `context.body`.

    An empty body counts as {}. Anything that is not a JSON object halts
    with 400, before authorization or validation run.
    """
    raw = await context.request.body()
    if not raw.strip():
        return Continue(replace(context, body={}))

    try:
        body = json.loads(raw)
    except ValueError:
        return Halt(failure_response(Failure.of(ErrorKind.BAD_REQUEST, "Invalid JSON")))

    if not isinstance(body, dict):
        return Halt(
            failure_response(Failure.of(ErrorKind.BAD_REQUEST, "Request body must be a JSON object"))
        )
    return Continue(replace(context, body=body))


def validate_with(ruleset: Sequence[Rule]) -> Stage:
    """Builds a stage that halts with 422 and the ordered error list when `ruleset` fails."""

    async def validation_stage(context: RequestContext) -> StageOutcome:
        result = validate(
            {BODY: context.body, PARAMS: context.params, QUERY: context.query}, ruleset
        )
        if result.ok:
            return Continue(context)
        logger.debug(
            "Validation failed for %s %s: %s",
            context.request.method,
            context.request.url.path,
            [error.field for error in result.errors],
        )
        return Halt(failure_response(result.to_failure()))

    return validation_stage


# ══════════════════════════════════════════════════════════════════════════
# Dispatcher
# ══════════════════════════════════════════════════════════════════════════

async def dispatch(request: Request, stages: Sequence[Stage], action: Action) -> Response:
    """
    Runs `stages` in order, then `action`, and renders the outcome.

    Exceptions raised by stages or the action are not caught here; they reach
    the global exception handlers registered in main.py (→ 500).
    """
    context = RequestContext.from_request(request)
    for stage in stages:
        outcome = await stage(context)
        if isinstance(outcome, Halt):
            return outcome.response
        context = outcome.context

    result = await action(context)
    return render(result)
