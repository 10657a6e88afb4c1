from django.conf import settings
from django.db import models
from django.utils import timezone


class ActivityLog(models.Model):
    """Append-only record of what a user did, scoped to their tenant."""
    COURSE_ENROLL = 'course_enroll'
    COURSE_ASSIGN = 'course_assign'
    LESSON_COMPLETE = 'lesson_complete'
    EXAM_START = 'exam_start'
    EXAM_COMPLETE = 'exam_complete'
    AI_CHAT = 'ai_chat'

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='activity_logs', db_column='user_id')
    activity_type = models.CharField(max_length=50, db_column='activity_type')
    resource_id = models.IntegerField(db_column='resource_id')
    resource_type = models.CharField(max_length=50, db_column='resource_type')
    timestamp = models.DateTimeField(default=timezone.now, db_column='timestamp')
    tenant = models.ForeignKey('accounts.Tenant', on_delete=models.CASCADE, related_name='activity_logs', db_column='tenant_id')

    class Meta:
        db_table = 'activity_logs'
        ordering = ['-timestamp', '-id']
        indexes = [
            models.Index(fields=['tenant', 'timestamp'], name='activity_tenant_ts_idx'),
        ]

    def __str__(self):
        return f"{self.activity_type} {self.resource_type}#{self.resource_id}"
