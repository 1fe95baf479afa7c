"""Bearer-token authentication for HTTP views."""

from __future__ import annotations

import functools
from typing import Any, Callable

import jwt
from flask import g, jsonify, request

HEADER_REQUIRED = "authorization header is required"
HEADER_FORMAT = "authorization header format must be Bearer {token}"
INVALID_TOKEN = "invalid token"

_HMAC_ALGORITHMS = ["HS256", "HS384", "HS512"]


class AuthError(Exception):
    """The request does not carry a valid bearer token."""

    status = 401


def _bearer_token(header: str | None) -> str:
    if not header:
        raise AuthError(HEADER_REQUIRED)
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise AuthError(HEADER_FORMAT)
    return parts[1]


def authenticate(header: str | None, secret: str) -> int:
    """Check an Authorization header value and return the user id in its subject.

    The token must be HMAC-signed with secret and carry a numeric "sub" claim.
    """
    token = _bearer_token(header)
    try:
        claims = jwt.decode(
            token, secret, algorithms=_HMAC_ALGORITHMS, options={"verify_sub": False}
        )
    except jwt.PyJWTError as exc:
        raise AuthError(INVALID_TOKEN) from exc
    subject = claims.get("sub")
    if isinstance(subject, bool) or not isinstance(subject, (int, float)):
        raise AuthError(INVALID_TOKEN)
    return int(subject)


def require_auth(secret: str, logger: Any = None) -> Callable[[Callable], Callable]:
    """Decorate a Flask view so it runs only for authenticated requests.

    The user id is put in flask.g.user_id; failures answer 401 with a JSON error.
    """

    def decorator(view: Callable) -> Callable:
        @functools.wraps(view)
        def wrapped(*args: Any, **kwargs: Any) -> Any:
            try:
                g.user_id = authenticate(request.headers.get("Authorization"), secret)
            except AuthError as exc:
                if logger is not None and isinstance(exc.__cause__, jwt.PyJWTError):
                    logger.error(exc.__cause__, "middleware - AuthMiddleware - jwt.Parse")
                return jsonify({"error": str(exc)}), AuthError.status
            return view(*args, **kwargs)

        return wrapped

    return decorator