from __future__ import annotations

from fastapi import Header, Request
from fastapi.security.utils import get_authorization_scheme_param

from ..core.errors import Forbidden, Unauthenticated
from ..core.security import Claims, InvalidToken, decode_token
from ..middlewares import principal_ctx_var


def _set_principal(request: Request, principal: str) -> None:
    principal_ctx_var.set(principal)
    request.state.principal = principal


async def require_user(
    request: Request,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> Claims:
    """Verify the bearer token and hand the caller's claims to the route.

    The token is the second word of the header. No second word is 401; a
    token that is present but untrustworthy (garbage, wrong signature,
    expired) is 403.
    """

    if not authorization or not authorization.strip():
        raise Unauthenticated()
    _scheme, token = get_authorization_scheme_param(authorization.strip())
    if not token:
        raise Unauthenticated()
    try:
        claims = decode_token(token)
    except InvalidToken as exc:
        raise Forbidden(str(exc)) from exc
    _set_principal(request, f"user:{claims.id}")
    request.state.claims = claims
    return claims
