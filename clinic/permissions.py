"""
Role based access control.

``ROUTE_ROLES`` is the one place that says which roles may call which
route: route name (the ``name=`` of the URL pattern) to HTTP method to
the allowed role set.  :class:`RolePolicy` is installed as a default
permission class right after ``IsAuthenticated`` and enforces it for
every view.  A route or method without an entry is refused; public
routes opt out with ``AllowAny``.
"""
from __future__ import annotations

from rest_framework.permissions import BasePermission

from clinic.models import User

ADMIN = frozenset({User.Role.ADMIN})
DOCTOR = frozenset({User.Role.DOCTOR})
PATIENT = frozenset({User.Role.PATIENT})
STAFF = ADMIN | DOCTOR
ANY = STAFF | PATIENT

ROUTE_ROLES: dict[str, dict[str, frozenset]] = {
    'auth-me': {'GET': ANY},
    # records
    'patient-list': {'GET': STAFF, 'POST': STAFF},
    'patient-detail': {'GET': STAFF, 'PATCH': STAFF, 'DELETE': ADMIN},
    'doctor-list': {'GET': STAFF, 'POST': ADMIN},
    'department-list': {'GET': STAFF, 'POST': ADMIN},
    'room-list': {'GET': ADMIN, 'POST': ADMIN},
    'bed-list': {'GET': ADMIN, 'POST': ADMIN},
    'bed-detail': {'PATCH': ADMIN},
    'appointment-list': {'GET': STAFF, 'POST': STAFF},
    'appointment-detail': {'PATCH': STAFF},
    'medication-list': {'GET': STAFF, 'POST': ADMIN},
    'prescription-list': {'GET': STAFF, 'POST': DOCTOR},
    'prescription-detail': {'GET': STAFF},
    'lab-test-list': {'GET': STAFF, 'POST': ADMIN},
    'test-order-list': {'GET': STAFF, 'POST': STAFF},
    'test-order-detail': {'PATCH': STAFF},
    # billing
    'bill-list': {'GET': ADMIN, 'POST': ADMIN},
    'bill-cancel': {'POST': ADMIN},
    'payment-list': {'GET': ADMIN, 'POST': ADMIN},
    # patient chart
    'patient-alerts': {'GET': STAFF, 'POST': STAFF},
    'patient-events': {'GET': STAFF},
    'health-vitals': {'GET': STAFF},
    'vaccinations': {'GET': STAFF, 'POST': STAFF},
    'dashboard-metrics': {'GET': ADMIN},
    # patient portal
    'portal-patient': {'GET': PATIENT},
    'portal-appointments': {'GET': PATIENT},
    'portal-prescriptions': {'GET': PATIENT},
    'portal-lab-results': {'GET': PATIENT},
    'portal-bills': {'GET': PATIENT},
    'portal-vitals': {'GET': PATIENT, 'POST': PATIENT},
    'portal-vaccinations': {'GET': PATIENT},
    'portal-timeline': {'GET': PATIENT},
    # doctor workspace
    'prescription-template-list': {'GET': DOCTOR, 'POST': DOCTOR},
    'prescription-template-detail': {'DELETE': DOCTOR},
    'soap-note-by-appointment': {'GET': DOCTOR},
    'soap-note-list': {'POST': DOCTOR},
    'soap-note-detail': {'PATCH': DOCTOR},
    'referral-sent': {'GET': DOCTOR},
    'referral-received': {'GET': DOCTOR},
    'referral-list': {'POST': DOCTOR},
    'referral-status': {'PATCH': DOCTOR},
    'recurring-appointment-list': {'GET': DOCTOR, 'POST': DOCTOR},
    'recurring-appointment-detail': {'PATCH': DOCTOR},
    'doctor-profile': {'GET': DOCTOR},
    'doctor-appointments': {'GET': DOCTOR},
    'doctor-patients': {'GET': DOCTOR},
    # messaging
    'message-list': {'GET': ANY, 'POST': ANY},
    'message-conversation': {'GET': ANY},
    'message-read': {'PATCH': ANY},
    'refill-request-list': {'POST': PATIENT},
    'refill-request-patient': {'GET': PATIENT},
    'refill-request-doctor': {'GET': DOCTOR},
    'refill-request-status': {'PATCH': DOCTOR},
    'feedback-doctor': {'GET': ANY},
    'feedback-list': {'POST': PATIENT},
    'notification-list': {'GET': ANY, 'POST': ANY},
    'notification-unread': {'GET': ANY},
    'notification-read': {'PATCH': ANY},
    'notification-read-all': {'PATCH': ANY},
    # pharmacy
    'inventory-expiring': {'GET': STAFF},
    'inventory-low-stock': {'GET': STAFF},
}


def allowed_roles(route_name, method: str):
    """Return the role set for ``route_name``/``method``, or ``None`` if none is declared."""
    rules = ROUTE_ROLES.get(route_name)
    if rules is None:
        return None
    if method == 'HEAD':
        method = 'GET'
    return rules.get(method)


def _role_of(request):
    user = getattr(request, 'user', None)
    if not (user and user.is_authenticated):
        return None
    return getattr(user, 'role', None)


class RolePolicy(BasePermission):
    """Apply ``ROUTE_ROLES`` to the resolved route of the request."""

    message = 'Insufficient permissions'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        match = getattr(request, 'resolver_match', None)
        roles = allowed_roles(match.url_name if match else None, request.method)
        # a route or method missing from the table is closed to every role
        return roles is not None and _role_of(request) in roles


def require_role(*roles):
    """Build a permission class admitting only the given roles, e.g.
    ``@permission_classes([IsAuthenticated, require_role('admin')])``.
    """
    allowed = frozenset(roles)

    class RequireRole(BasePermission):
        message = 'Insufficient permissions'

        def has_permission(self, request, view) -> bool:  # type: ignore[override]
            return _role_of(request) in allowed

    RequireRole.__name__ = f"RequireRole_{'_'.join(sorted(allowed))}"
    return RequireRole
