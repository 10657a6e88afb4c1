"""
Course-level access checks. Each loader fetches the resource (404 when
missing) and then refuses it when it belongs to another tenant (403).
"""
from rest_framework.exceptions import NotFound, PermissionDenied

from accounts.models import User
from accounts.permissions import ensure_same_tenant, is_staff_role
from .models import Course, Module, Lesson, Enrollment, Batch

ENROLLMENT_REQUIRED_MESSAGE = 'Enrollment required for this course. Please enroll or contact an administrator.'


def load_course(user, course_id, message='Access denied to this course'):
    try:
        course = Course.objects.get(id=course_id)
    except Course.DoesNotExist:
        raise NotFound('Course not found')
    ensure_same_tenant(user, course.tenant_id, message)
    return course


def load_module(user, module_id, message='Access denied to this module'):
    try:
        module = Module.objects.select_related('course').get(id=module_id)
    except Module.DoesNotExist:
        raise NotFound('Module not found')
    ensure_same_tenant(user, module.course.tenant_id, message)
    return module


def load_lesson(user, lesson_id, message='Access denied to this lesson'):
    try:
        lesson = Lesson.objects.select_related('module__course').get(id=lesson_id)
    except Lesson.DoesNotExist:
        raise NotFound('Lesson not found')
    ensure_same_tenant(user, lesson.module.course.tenant_id, message)
    return lesson


def load_batch(user, batch_id, message='Access denied to this batch'):
    try:
        batch = Batch.objects.select_related('course').get(id=batch_id)
    except Batch.DoesNotExist:
        raise NotFound('Batch not found')
    ensure_same_tenant(user, batch.tenant_id, message)
    return batch


def load_tenant_user(user, user_id, message='Access denied to this user'):
    """A user of the caller's tenant. Unknown ids are refused like foreign ones."""
    target = User.objects.filter(id=user_id).first()
    if target is None or target.tenant_id != user.tenant_id:
        raise PermissionDenied(message)
    return target


def is_enrolled(user, course):
    return Enrollment.objects.filter(user=user, course=course).exists()


def can_view_course(user, course):
    """Staff see everything in their tenant, students see free courses and the ones they are enrolled in."""
    if is_staff_role(user):
        return True
    return not course.is_enrollment_required or is_enrolled(user, course)


def ensure_course_access(user, course):
    if not can_view_course(user, course):
        raise PermissionDenied(ENROLLMENT_REQUIRED_MESSAGE)
