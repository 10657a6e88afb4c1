"""
Health Check Views

Endpoints used by the hosting platform to check the service:
- Database connectivity
- Presence of the application tables
"""

import logging

from django.apps import apps
from django.db import connection, DatabaseError
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)

APP_LABELS = ('accounts', 'activity', 'courses', 'exams')


class HealthCheckService:
    """Service for performing health checks on system components."""

    @staticmethod
    def check_database():
        """
        Check database connectivity.

        Returns:
            dict: Health status with details
        """
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
            return {
                'status': 'healthy',
                'database': 'connected',
                'vendor': connection.vendor,
            }
        except DatabaseError as e:
            logger.error("Database health check failed: %s", e)
            return {
                'status': 'unhealthy',
                'database': 'disconnected',
                'error': str(e),
            }

    @staticmethod
    def check_tables():
        """
        Verify that the tables of the LMS apps exist.

        Returns:
            dict: Table status with the missing table names
        """
        required = {
            model._meta.db_table
            for label in APP_LABELS
            for model in apps.get_app_config(label).get_models()
        }
        try:
            existing = set(connection.introspection.table_names())
        except DatabaseError as e:
            logger.error("Table health check failed: %s", e)
            return {'status': 'unhealthy', 'error': str(e)}

        missing = sorted(required - existing)
        return {
            'status': 'healthy' if not missing else 'degraded',
            'total_required': len(required),
            'missing': missing,
        }


@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """Liveness plus a database ping."""
    health = HealthCheckService.check_database()
    health['timestamp'] = timezone.now().isoformat()

    if health['status'] == 'healthy':
        return Response(health, status=status.HTTP_200_OK)
    return Response(health, status=status.HTTP_503_SERVICE_UNAVAILABLE)


@api_view(['GET'])
@permission_classes([AllowAny])
def database_status(request):
    """Database and table information."""
    db_status = HealthCheckService.check_database()
    table_status = HealthCheckService.check_tables() if db_status['status'] == 'healthy' else {}

    response_data = {
        'database': db_status,
        'tables': table_status,
    }

    if db_status['status'] == 'healthy' and table_status.get('status') in ('healthy', 'degraded'):
        return Response(response_data, status=status.HTTP_200_OK)
    return Response(response_data, status=status.HTTP_503_SERVICE_UNAVAILABLE)
