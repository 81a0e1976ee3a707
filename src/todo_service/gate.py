"""
Request authentication for todo endpoints.

The gate is an ordered pipeline of interceptors. Each interceptor receives
the current ``RequestContext`` and either returns an enriched context, which
is handed to the next interceptor, or a ``Rejection`` that ends the pipeline.

Default pipeline:
    1. extract_bearer  - Authorization header -> token (missing: 401)
    2. verify_bearer   - token -> user id (invalid or expired: 400)

No session state is kept and no user lookup is performed; the token claim is
trusted as long as its signature and expiry check out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence, Union

from .errors import ServiceError, TokenInvalid, Unauthenticated
from .tokens import TokenService

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


@dataclass(frozen=True)
class RequestContext:
    """What the gate knows about a request so far."""

    authorization: Optional[str]
    token: Optional[str] = None
    user_id: Optional[int] = None


@dataclass(frozen=True)
class Rejection:
    """Terminal outcome of the pipeline."""

    error: ServiceError


GateResult = Union[RequestContext, Rejection]
Interceptor = Callable[[RequestContext], GateResult]


# PUBLIC_INTERFACE
def extract_bearer(ctx: RequestContext) -> GateResult:
    """
    Pull the token out of an ``Authorization: Bearer <token>`` header.

    A header with another scheme is passed on whole as the token, so it fails
    verification (400) rather than being treated as absent (401).
    """
    header = (ctx.authorization or "").strip()
    if not header:
        return Rejection(Unauthenticated())

    scheme, _, rest = header.partition(" ")
    token = rest.strip() if scheme.lower() == BEARER_SCHEME else header
    if not token:
        return Rejection(Unauthenticated())
    return replace(ctx, token=token)


# PUBLIC_INTERFACE
def verify_bearer(tokens: TokenService) -> Interceptor:
    """Return an interceptor resolving the context's token to a user id."""

    def _verify(ctx: RequestContext) -> GateResult:
        if ctx.token is None:
            return Rejection(Unauthenticated())
        try:
            user_id = tokens.verify(ctx.token)
        except TokenInvalid as exc:
            return Rejection(exc)
        return replace(ctx, user_id=user_id)

    return _verify


# PUBLIC_INTERFACE
class AuthGate:
    """Runs the interceptor pipeline for every authenticated request."""

    def __init__(self, interceptors: Sequence[Interceptor]) -> None:
        self._interceptors: List[Interceptor] = list(interceptors)

    @classmethod
    def with_tokens(cls, tokens: TokenService) -> "AuthGate":
        """Build the default extract -> verify pipeline."""
        return cls([extract_bearer, verify_bearer(tokens)])

    def run(self, ctx: RequestContext) -> GateResult:
        for interceptor in self._interceptors:
            result = interceptor(ctx)
            if isinstance(result, Rejection):
                return result
            ctx = result
        return ctx

    def authenticate(self, authorization: Optional[str]) -> int:
        """
        Resolve the user id behind an Authorization header value.

        Raises:
            Unauthenticated if no credential was presented.
            TokenInvalid if the credential does not verify.
        """
        result = self.run(RequestContext(authorization=authorization))
        if isinstance(result, Rejection):
            logger.info("Request rejected by auth gate: %s", result.error.kind)
            raise result.error
        if result.user_id is None:
            # pipeline finished without resolving anyone
            raise Unauthenticated()
        return result.user_id
