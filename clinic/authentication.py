"""
Bearer token authentication.

The authenticator trusts the signed claims and never reads the user table,
so ``request.user`` is a lightweight :class:`Principal` rather than a
model instance.  Views that need the stored account load it explicitly.
"""
from __future__ import annotations

from dataclasses import dataclass

from rest_framework import authentication

from clinic.exceptions import InvalidToken
from clinic.tokens import verify_token


@dataclass(frozen=True)
class Principal:
    user_id: str
    username: str
    role: str

    is_authenticated = True
    is_anonymous = False

    @property
    def pk(self) -> str:
        return self.user_id

    @property
    def id(self) -> str:
        return self.user_id


class BearerTokenAuthentication(authentication.BaseAuthentication):
    """Authenticate ``Authorization: Bearer <token>`` headers.

    A request without the header (or with an empty bearer value) is left
    anonymous; the permission layer then answers 401 "No token provided".
    """

    keyword = 'Bearer'

    def authenticate(self, request):
        parts = authentication.get_authorization_header(request).split()
        if not parts or parts[0].lower() != self.keyword.lower().encode():
            return None
        if len(parts) == 1:
            return None
        if len(parts) > 2:
            raise InvalidToken()
        try:
            raw = parts[1].decode()
        except UnicodeError as exc:
            raise InvalidToken() from exc

        payload = verify_token(raw)
        return Principal(payload.user_id, payload.username, payload.role), payload

    def authenticate_header(self, request):
        # a non-empty value makes REST framework answer 401 instead of 403
        return self.keyword
