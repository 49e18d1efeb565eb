"""
Blog API — Authorization Stage
===============================

What:  Per-request token check placed in front of protected controller actions.
How:   Two outcomes per request:

           Unauthenticated ──token present & verify ok──▶ Authenticated
                 │                                        (user_id attached,
                 └──missing token / verify rejects──▶ Rejected   pipeline continues)
                                                      (401, pipeline halts)

Token location:
    Authorization: Bearer <token>     (preferred)
    x-access-token: <token>           (fallback header for older clients)

Unlike the Starlette middlewares beside it, this runs as a pipeline stage
(see blogapi/pipeline.py) so each route opts in explicitly.
"""

import logging
from dataclasses import replace
from typing import Optional

from starlette.requests import Request

from blogapi.middleware.request_id import request_id_var
from blogapi.pipeline import Continue, Halt, RequestContext, StageOutcome, failure_response
from blogapi.results import Result
from blogapi.services.token_service import TokenService

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "
FALLBACK_HEADER = "x-access-token"


def extract_token(request: Request) -> Optional[str]:
    """Returns the raw token from the request headers, or None when absent."""
    authorization = request.headers.get("authorization")
    if authorization and authorization.lower().startswith(BEARER_PREFIX):
        token = authorization[len(BEARER_PREFIX):].strip()
        return token or None

    fallback = request.headers.get(FALLBACK_HEADER)
    if fallback and fallback.strip():
        return fallback.strip()
    return None


class AuthorizationStage:
    """
    Pipeline stage that admits only requests carrying a valid token.

    Args:
        tokens: Verifier built from the configured signing secret
    """

    def __init__(self, tokens: TokenService):
        self.tokens = tokens

    async def __call__(self, context: RequestContext) -> StageOutcome:
        token = extract_token(context.request)
        if token is None:
            return self._reject(context, "no token")

        verification = self.tokens.verify(token)
        if not verification.ok:
            return self._reject(context, "token rejected")

        return Continue(replace(context, user_id=verification.value))

    def _reject(self, context: RequestContext, reason: str) -> Halt:
        logger.info(
            "[%s] Unauthorized %s %s (%s)",
            request_id_var.get(""),
            context.request.method,
            context.request.url.path,
            reason,
        )
        return Halt(failure_response(Result.unauthorized().failure))
