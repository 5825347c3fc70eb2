"""
Error types and the REST framework exception handler.

Every error response has the same shape, ``{"message": "..."}``, so the
client can display it without inspecting the status code first.
Exceptions the framework does not recognise (integrity errors, protected
deletes, driver failures) become 500 responses carrying the raw error
text and are logged with their stack trace.
"""
from __future__ import annotations

import structlog
from rest_framework import exceptions, status
from rest_framework.response import Response

logger = structlog.get_logger(__name__)


class InvalidToken(exceptions.AuthenticationFailed):
    default_detail = 'Invalid or expired token'
    default_code = 'token_not_valid'


class InvalidCredentials(exceptions.APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid credentials'
    default_code = 'invalid_credentials'


class PaymentExceedsBalance(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Payment amount exceeds bill total'
    default_code = 'payment_exceeds_balance'


class BillCancelled(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Bill is cancelled'
    default_code = 'bill_cancelled'


def _camel(key: str) -> str:
    head, *rest = key.split('_')
    return head + ''.join(part[:1].upper() + part[1:] for part in rest)


def _first_error(data, path=()) -> tuple[tuple, str]:
    """Walk a validation error tree down to its first leaf message."""
    if isinstance(data, dict):
        for key, value in data.items():
            return _first_error(value, path + (key,))
    if isinstance(data, (list, tuple)):
        for index, value in enumerate(data):
            if isinstance(value, (dict, list, tuple)):
                return _first_error(value, path + (index,))
            return path, str(value)
    return path, str(data)


def _validation_message(data) -> str:
    path, message = _first_error(data)
    fields = [
        _camel(p) if isinstance(p, str) else str(p)
        for p in path
        if p not in ('non_field_errors', 'detail')
    ]
    if not fields:
        return message
    return f"{'.'.join(fields)}: {message}"


def api_exception_handler(exc, context):
    # rest_framework.views loads the authentication classes, which import this
    # module, so it can only be imported once a request is being handled
    from rest_framework.views import exception_handler as drf_exception_handler

    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.error(
            'unhandled_api_error',
            view=type(view).__name__ if view is not None else None,
            error=str(exc),
            exc_info=exc,
        )
        return Response({'message': str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, exceptions.NotAuthenticated):
        message = 'No token provided'
    elif isinstance(exc, exceptions.PermissionDenied) and exc.detail == exceptions.PermissionDenied.default_detail:
        message = 'Insufficient permissions'
    elif isinstance(exc, exceptions.ValidationError):
        message = _validation_message(resp.data)
    elif isinstance(resp.data, dict) and 'detail' in resp.data:
        message = str(resp.data['detail'])
    else:
        message = _validation_message(resp.data)

    resp.data = {'message': message}
    return resp
