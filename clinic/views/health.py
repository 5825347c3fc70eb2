from django.db import DatabaseError, connections
from django.http import JsonResponse

import structlog

logger = structlog.get_logger(__name__)


def healthz(request):
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
    except DatabaseError as e:
        logger.error('healthcheck_failed', error=str(e))
        return JsonResponse({'ok': False, 'message': str(e)}, status=503)
    return JsonResponse({'ok': True, 'db': bool(row and row[0] == 1)})
