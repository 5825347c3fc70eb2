"""
Password hashing and session tokens.

Passwords go through Django's hasher framework, which prefers bcrypt as
configured in ``PASSWORD_HASHERS``.  Session tokens are stateless HS256
JWTs issued with djangorestframework-simplejwt: nothing is stored
server-side, so a token stays valid until it expires.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from django.contrib.auth.hashers import check_password, make_password
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken

from clinic.exceptions import InvalidToken

USER_ID_CLAIM = 'userId'


@dataclass(frozen=True)
class TokenPayload:
    user_id: str
    username: str
    role: str


def hash_password(password: str) -> str:
    return make_password(password)


def verify_password(password: str, encoded: str) -> bool:
    if not encoded:
        return False
    return check_password(password, encoded)


def issue_token(user_id, username: str, role: str, lifetime: Optional[timedelta] = None) -> str:
    """Sign a token for the given identity.

    The lifetime comes from ``SIMPLE_JWT['ACCESS_TOKEN_LIFETIME']`` (seven
    days); ``lifetime`` overrides it, mainly so tests can mint tokens that
    have already expired.
    """
    token = AccessToken()
    if lifetime is not None:
        token.set_exp(lifetime=lifetime)
    token[USER_ID_CLAIM] = str(user_id)
    token['username'] = username
    token['role'] = role
    return str(token)


def verify_token(raw: str) -> TokenPayload:
    """Decode ``raw`` and return its identity claims.

    A bad signature, a malformed token, an expired token and a token with
    missing claims all raise the same :class:`InvalidToken`.
    """
    try:
        token = AccessToken(raw)
    except TokenError as exc:
        raise InvalidToken() from exc
    try:
        return TokenPayload(
            user_id=str(token[USER_ID_CLAIM]),
            username=str(token['username']),
            role=str(token['role']),
        )
    except KeyError as exc:
        raise InvalidToken() from exc
