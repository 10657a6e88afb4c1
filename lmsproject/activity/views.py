from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from accounts.permissions import IsAdmin
from .models import ActivityLog
from .serializers import ActivityLogSerializer
from .services import log_activity


@api_view(['GET'])
def user_activity(request):
    logs = ActivityLog.objects.filter(user=request.user)
    return Response(ActivityLogSerializer(logs, many=True).data)


@api_view(['GET'])
@permission_classes([IsAdmin])
def tenant_activity(request):
    logs = ActivityLog.objects.filter(tenant_id=request.user.tenant_id).select_related('user')
    return Response(ActivityLogSerializer(logs, many=True).data)


@api_view(['POST'])
def create_activity(request):
    """Client-side events (lesson views, exam dialogs). User and tenant always come from the session."""
    serializer = ActivityLogSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    entry = log_activity(
        request.user,
        serializer.validated_data['activity_type'],
        serializer.validated_data['resource_id'],
        serializer.validated_data['resource_type'],
    )
    return Response(ActivityLogSerializer(entry).data, status=status.HTTP_201_CREATED)
