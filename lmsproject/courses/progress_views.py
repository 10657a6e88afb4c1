"""
Enrollment and progress endpoints
"""
import logging

from django.http import HttpResponse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.response import Response

from accounts.permissions import IsAdmin, is_admin
from activity.models import ActivityLog
from activity.services import log_activity
from .models import Enrollment, LessonProgress
from .permissions import load_course, load_lesson, load_tenant_user
from .reports import build_course_progress_workbook
from .serializers import (
    EnrollmentSerializer, EnrollmentWithUserSerializer, EnrollmentWithCourseSerializer, EnrollmentCreateSerializer,
    LessonProgressSerializer, LessonCompletionSerializer, RecalculateProgressSerializer,
    ModuleSerializer, LessonWithProgressSerializer,
)
from .services import CourseProgressService, EnrollmentService

logger = logging.getLogger(__name__)


# ============ Enrollments ============

@api_view(['GET'])
def my_enrollments(request):
    enrollments = Enrollment.objects.filter(user=request.user).select_related('course')
    return Response(EnrollmentWithCourseSerializer(enrollments, many=True).data)


@api_view(['GET'])
@permission_classes([IsAdmin])
def user_enrollments(request, user_id):
    user = load_tenant_user(request.user, user_id, "Access denied to this user's enrollments")
    enrollments = Enrollment.objects.filter(user=user).select_related('course')
    return Response(EnrollmentWithCourseSerializer(enrollments, many=True).data)


@api_view(['GET'])
@permission_classes([IsAdmin])
def course_enrollments(request, course_id):
    course = load_course(request.user, course_id)
    enrollments = Enrollment.objects.filter(course=course).select_related('user')
    return Response(EnrollmentWithUserSerializer(enrollments, many=True).data)


@api_view(['POST'])
def enroll(request):
    """Self-enrollment of the caller into a course of their tenant."""
    serializer = EnrollmentCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    course = load_course(request.user, serializer.validated_data['courseId'])
    enrollment, created = EnrollmentService.enroll(request.user, course)
    if not created:
        raise ValidationError('Already enrolled in this course')

    log_activity(request.user, ActivityLog.COURSE_ENROLL, course.id, 'course')
    return Response(EnrollmentSerializer(enrollment).data, status=status.HTTP_201_CREATED)


@api_view(['PUT'])
def update_enrollment(request, enrollment_id):
    """
    Progress and completion are derived from lesson completions, so an
    update is a recompute of this enrollment rather than a write.
    """
    try:
        enrollment = Enrollment.objects.get(id=enrollment_id)
    except Enrollment.DoesNotExist:
        raise NotFound('Enrollment not found')

    load_course(request.user, enrollment.course_id, 'Access denied to this enrollment')
    if enrollment.user_id != request.user.id and not is_admin(request.user):
        raise PermissionDenied('Access denied to this enrollment')

    if 'progress' in request.data or 'completedAt' in request.data:
        logger.warning("Ignoring client supplied progress for enrollment %s", enrollment.id)

    CourseProgressService.update_course_progress(enrollment.user_id, enrollment.course_id)
    enrollment.refresh_from_db()
    return Response(EnrollmentSerializer(enrollment).data)


@api_view(['POST'])
@permission_classes([IsAdmin])
def assign_course(request):
    user_id = request.data.get('userId')
    course_id = request.data.get('courseId')
    if not user_id or not course_id:
        raise ValidationError('Both userId and courseId are required')

    course = load_course(request.user, course_id, 'Course not found or access denied')
    user = load_tenant_user(request.user, user_id, 'User not found or access denied')

    enrollment, created = EnrollmentService.enroll(user, course)
    if not created:
        raise ValidationError('User is already enrolled in this course')

    log_activity(user, ActivityLog.COURSE_ASSIGN, course.id, 'course')
    logger.info("Course %s assigned to user %s by %s", course.id, user.id, request.user.username)
    return Response(EnrollmentSerializer(enrollment).data, status=status.HTTP_201_CREATED)


# ============ Lesson progress ============

@api_view(['GET'])
def lesson_progress(request, lesson_id):
    lesson = load_lesson(request.user, lesson_id)
    record = LessonProgress.objects.filter(user=request.user, lesson=lesson).first()
    return Response({
        'lessonId': lesson.id,
        'userId': request.user.id,
        'completed': record is not None,
        'completedAt': record.completed_at if record else None,
    })


@api_view(['POST'])
def complete_lesson(request):
    serializer = LessonCompletionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    lesson = load_lesson(request.user, data['lessonId'])
    if lesson.module_id != data['moduleId']:
        raise ValidationError('Invalid module ID for this lesson')
    if lesson.module.course_id != data['courseId']:
        raise ValidationError('Invalid course ID for this module')
    if not Enrollment.objects.filter(user=request.user, course_id=data['courseId']).exists():
        raise PermissionDenied('You must be enrolled in this course to mark lessons as complete')

    record, created = CourseProgressService.complete_lesson(request.user, lesson)
    return Response(
        LessonProgressSerializer(record).data,
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
    )


@api_view(['GET'])
def course_progress(request, course_id):
    """The caller's progress in a course with every lesson flagged completed or not."""
    course = load_course(request.user, course_id)
    enrollment = Enrollment.objects.filter(user=request.user, course=course).first()
    if enrollment is None:
        raise PermissionDenied('You must be enrolled in this course to view progress')

    completed_ids = set(
        LessonProgress.objects.filter(user=request.user, course=course).values_list('lesson_id', flat=True)
    )
    modules = []
    for module in course.modules.prefetch_related('lessons'):
        data = ModuleSerializer(module).data
        data['lessons'] = LessonWithProgressSerializer(
            module.lessons.all(), many=True, context={'completed_ids': completed_ids}
        ).data
        modules.append(data)

    return Response({
        'courseId': course.id,
        'progress': enrollment.progress,
        'completedAt': enrollment.completed_at,
        'modules': modules,
        'completedLessonCount': len(completed_ids),
    })


# ============ Admin progress ============

@api_view(['GET'])
@permission_classes([IsAdmin])
def admin_course_progress(request, course_id):
    course = load_course(request.user, course_id)
    return Response(CourseProgressService.course_report(course))


@api_view(['POST'])
@permission_classes([IsAdmin])
def recalculate_progress(request):
    serializer = RecalculateProgressSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    updates = CourseProgressService.recalculate(
        request.user.tenant_id,
        user_id=serializer.validated_data.get('userId'),
        course_id=serializer.validated_data.get('courseId'),
    )
    logger.info("Recalculated %s enrollments for tenant %s", len(updates), request.user.tenant_id)
    return Response({
        'updatedCount': len(updates),
        'updates': updates,
        'message': 'Progress recalculated successfully',
    })


@api_view(['GET'])
@permission_classes([IsAdmin])
def course_progress_export(request, course_id):
    course = load_course(request.user, course_id)
    content = build_course_progress_workbook(CourseProgressService.course_report(course))
    response = HttpResponse(
        content,
        content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    )
    response['Content-Disposition'] = f'attachment; filename="course-{course.id}-progress.xlsx"'
    return response
