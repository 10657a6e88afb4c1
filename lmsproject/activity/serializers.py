from rest_framework import serializers

from .models import ActivityLog


class ActivityLogSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source='user_id', read_only=True)
    activityType = serializers.CharField(source='activity_type', max_length=50)
    resourceId = serializers.IntegerField(source='resource_id')
    resourceType = serializers.CharField(source='resource_type', max_length=50)
    tenantId = serializers.IntegerField(source='tenant_id', read_only=True)

    class Meta:
        model = ActivityLog
        fields = ['id', 'userId', 'activityType', 'resourceId', 'resourceType', 'timestamp', 'tenantId']
        read_only_fields = ['id', 'timestamp']
