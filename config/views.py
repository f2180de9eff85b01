from django.db import connection
from django.db.utils import OperationalError
from django.http import JsonResponse

from apps.shops.models import Shop


def health_check(request):
    """Health check with database connectivity and catalog size."""
    try:
        connection.ensure_connection()
        shop_count = Shop.objects.count()
    except OperationalError:
        return JsonResponse({
            'status': 'unhealthy',
            'database': 'unavailable',
        }, status=503)

    return JsonResponse({
        'status': 'ok',
        'database': 'ok',
        'shops': shop_count,
    })


def error_404(request, exception):
    """Custom 404 handler."""
    return JsonResponse({
        'error': 'Not found',
        'status': 404
    }, status=404)


def error_500(request):
    """Custom 500 handler."""
    return JsonResponse({
        'error': 'Internal server error',
        'status': 500
    }, status=500)
