"""
Exam attempt endpoints - start, submit, review and results
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from accounts.permissions import IsAdmin, is_admin
from courses.permissions import load_tenant_user
from .models import Exam, ExamAttempt
from .permissions import load_exam, load_attempt
from .serializers import (
    ExamAttemptSerializer, ExamAttemptDetailSerializer, ExamResultSerializer,
    AttemptStartSerializer, AttemptSubmitSerializer, GradeSerializer,
)
from .services import AttemptError, ExamAttemptService

logger = logging.getLogger(__name__)


@api_view(['GET'])
def my_attempts(request):
    attempts = ExamAttempt.objects.filter(user=request.user).select_related('exam')
    return Response(ExamAttemptSerializer(attempts, many=True).data)


@api_view(['GET'])
@permission_classes([IsAdmin])
def user_attempts(request, user_id):
    user = load_tenant_user(request.user, user_id, "Access denied to this user's exam attempts")
    attempts = ExamAttempt.objects.filter(user=user).select_related('exam', 'user')
    return Response(ExamAttemptDetailSerializer(attempts, many=True).data)


@api_view(['GET'])
@permission_classes([IsAdmin])
def exam_attempts(request, exam_id):
    exam = load_exam(request.user, exam_id)
    attempts = ExamAttempt.objects.filter(exam=exam).select_related('exam')
    return Response(ExamAttemptSerializer(attempts, many=True).data)


@api_view(['POST'])
def start_attempt(request):
    serializer = AttemptStartSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    exam = load_exam(request.user, serializer.validated_data['examId'])
    try:
        attempt = ExamAttemptService.start_attempt(request.user, exam)
    except AttemptError as exc:
        raise ValidationError(str(exc))
    return Response(ExamAttemptSerializer(attempt).data, status=status.HTTP_201_CREATED)


@api_view(['PUT'])
def update_attempt(request, attempt_id):
    """
    Submit an attempt (the client sends ``completedAt`` with the answers,
    also when its timer runs out). An admin sending ``feedback`` reviews
    it instead.
    """
    attempt = load_attempt(request.user, attempt_id)

    try:
        if 'feedback' in request.data and is_admin(request.user):
            grade = GradeSerializer(data=request.data)
            grade.is_valid(raise_exception=True)
            attempt = ExamAttemptService.grade_attempt(attempt, grade.validated_data['feedback'])
            return Response(ExamAttemptSerializer(attempt).data)

        serializer = AttemptSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        if 'completedAt' not in serializer.validated_data:
            raise ValidationError({'completedAt': ['This field is required to submit an attempt.']})
        attempt = ExamAttemptService.submit_attempt(attempt, serializer.validated_data.get('answers'))
    except AttemptError as exc:
        raise ValidationError(str(exc))
    return Response(ExamAttemptSerializer(attempt).data)


# ============ Review ============

@api_view(['GET'])
@permission_classes([IsAdmin])
def admin_attempts(request):
    """Every attempt of the tenant. ``?examId=`` narrows, ``?pending=true`` keeps unreviewed written ones."""
    attempts = ExamAttempt.objects.filter(exam__tenant_id=request.user.tenant_id).select_related('exam', 'user')

    exam_id = request.query_params.get('examId')
    if exam_id:
        if not exam_id.isdigit():
            raise ValidationError('examId must be a number')
        attempts = attempts.filter(exam_id=int(exam_id))
    if request.query_params.get('pending') in ('1', 'true'):
        attempts = attempts.filter(
            exam__exam_type=Exam.TYPE_WRITTEN,
            completed_at__isnull=False,
            reviewed_at__isnull=True,
        )
    return Response(ExamAttemptDetailSerializer(attempts, many=True).data)


@api_view(['PUT'])
@permission_classes([IsAdmin])
def grade_attempt(request, attempt_id):
    attempt = load_attempt(request.user, attempt_id)
    serializer = GradeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        attempt = ExamAttemptService.grade_attempt(attempt, serializer.validated_data['feedback'])
    except AttemptError as exc:
        raise ValidationError(str(exc))
    return Response(ExamAttemptDetailSerializer(attempt).data)


@api_view(['GET'])
def my_results(request):
    """Completed attempts of the caller with their exam title for the results page."""
    attempts = (
        ExamAttempt.objects
        .filter(user=request.user, completed_at__isnull=False)
        .select_related('exam')
    )
    return Response(ExamResultSerializer(attempts, many=True).data)
