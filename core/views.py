from django.http import JsonResponse
from django.db import connection, DatabaseError
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny


@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """
    Verify the service is up and the database answers.
    """
    health_status = {
        'status': 'ok',
        'database': 'unknown',
        'server_time': timezone.localtime().isoformat(),
    }

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        health_status['database'] = 'connected'
        return JsonResponse(health_status)
    except DatabaseError as e:
        health_status['status'] = 'error'
        health_status['database'] = 'disconnected'
        health_status['error'] = str(e)
        return JsonResponse(health_status, status=503)
