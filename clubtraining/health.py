import logging

from django.conf import settings
from django.db import connection, DatabaseError
from django.http import JsonResponse

from training.clock import default_clock

logger = logging.getLogger(__name__)


def database_reachable() -> bool:
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
    except DatabaseError as e:
        logger.error(f"Health probe could not reach the database: {e}")
        return False
    return True


def health_check(request):
    """Liveness probe for load balancers: database reachability and the facility date."""
    database_ok = database_reachable()
    return JsonResponse(
        {
            'status': 'healthy' if database_ok else 'unhealthy',
            'database': 'connected' if database_ok else 'disconnected',
            'timezone': settings.TIME_ZONE,
            'today': default_clock.today().isoformat(),
        },
        status=200 if database_ok else 503
    )
