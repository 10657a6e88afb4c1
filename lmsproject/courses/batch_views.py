"""
Batch (cohort) management - admin only
"""
import logging

from rest_framework import mixins, viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.response import Response

from accounts.models import User
from accounts.permissions import IsAdmin, ensure_same_tenant
from .models import Batch, BatchEnrollment
from .permissions import load_batch, load_course, load_tenant_user
from .serializers import (
    BatchSerializer, BatchEnrollmentSerializer, BatchEnrollmentWithUserSerializer,
    BatchEnrollmentWithBatchSerializer, BatchEnrollmentCreateSerializer, BulkBatchEnrollmentSerializer,
)
from .services import EnrollmentService

logger = logging.getLogger(__name__)


class BatchViewSet(mixins.ListModelMixin,
                   mixins.CreateModelMixin,
                   mixins.RetrieveModelMixin,
                   mixins.UpdateModelMixin,
                   mixins.DestroyModelMixin,
                   viewsets.GenericViewSet):
    serializer_class = BatchSerializer
    permission_classes = [IsAdmin]
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        return Batch.objects.filter(tenant_id=self.request.user.tenant_id)

    def get_object(self):
        return load_batch(self.request.user, self.kwargs['pk'])

    def _check_references(self, data):
        user = self.request.user
        if 'course_id' in data:
            load_course(user, data['course_id'])
        if 'trainer_id' in data:
            load_tenant_user(user, data['trainer_id'], 'Access denied to this trainer')

    def perform_create(self, serializer):
        data = serializer.validated_data
        self._check_references(data)
        batch_code = data.get('batch_code') or EnrollmentService.generate_batch_code(data['course_id'])
        batch = serializer.save(
            batch_code=batch_code,
            tenant_id=self.request.user.tenant_id,
            created_by=self.request.user,
        )
        logger.info("Batch %s created for course %s", batch.batch_code, batch.course_id)

    def update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        return super().update(request, *args, **kwargs)

    def perform_update(self, serializer):
        self._check_references(serializer.validated_data)
        serializer.save()

    @action(detail=True, methods=['get'])
    def enrollments(self, request, pk=None):
        batch = self.get_object()
        rows = batch.enrollments.select_related('user')
        return Response(BatchEnrollmentWithUserSerializer(rows, many=True).data)


@api_view(['GET'])
@permission_classes([IsAdmin])
def course_batches(request, course_id):
    course = load_course(request.user, course_id)
    return Response(BatchSerializer(course.batches.all(), many=True).data)


@api_view(['POST'])
@permission_classes([IsAdmin])
def create_batch_enrollment(request):
    """Add one student to a batch. Also enrolls them in the batch's course."""
    serializer = BatchEnrollmentCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    batch = load_batch(request.user, serializer.validated_data['batchId'])
    user = load_tenant_user(request.user, serializer.validated_data['userId'])

    batch_enrollment, created = EnrollmentService.enroll_in_batch(batch, user, request.user)
    return Response(
        BatchEnrollmentSerializer(batch_enrollment).data,
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
    )


@api_view(['POST'])
@permission_classes([IsAdmin])
def bulk_batch_enrollment(request):
    """Add several students at once. Nothing is written unless every student is valid."""
    serializer = BulkBatchEnrollmentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    batch = load_batch(request.user, serializer.validated_data['batchId'])
    user_ids = list(dict.fromkeys(serializer.validated_data['userIds']))
    users = {u.id: u for u in User.objects.filter(id__in=user_ids, tenant_id=request.user.tenant_id)}
    missing = [uid for uid in user_ids if uid not in users]
    if missing:
        raise PermissionDenied(f"Access denied to users: {', '.join(str(uid) for uid in missing)}")

    rows = EnrollmentService.bulk_enroll_in_batch(batch, [users[uid] for uid in user_ids], request.user)
    logger.info("Bulk enrolled %s users into batch %s", len(rows), batch.batch_code)
    return Response(BatchEnrollmentSerializer(rows, many=True).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAdmin])
def user_batch_enrollments(request, user_id):
    user = load_tenant_user(request.user, user_id)
    rows = BatchEnrollment.objects.filter(user=user).select_related('batch')
    return Response(BatchEnrollmentWithBatchSerializer(rows, many=True).data)


@api_view(['DELETE'])
@permission_classes([IsAdmin])
def delete_batch_enrollment(request, enrollment_id):
    """Remove a student from a batch. Their course enrollment and progress are kept."""
    try:
        row = BatchEnrollment.objects.select_related('batch').get(id=enrollment_id)
    except BatchEnrollment.DoesNotExist:
        raise NotFound('Enrollment not found')
    ensure_same_tenant(request.user, row.batch.tenant_id, 'Access denied to this enrollment')
    row.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)
