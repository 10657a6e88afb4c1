"""
Course progress and enrollment services.

Enrollment.progress is derived data: it is only ever written by
CourseProgressService.update_course_progress, which recounts completed
lessons from scratch. Everything that changes lesson completion (or wants
to repair drift) goes through it.
"""
import logging
import time

from django.db import transaction
from django.utils import timezone

from activity.models import ActivityLog
from activity.services import log_activity
from .models import Module, Lesson, Enrollment, LessonProgress, BatchEnrollment

logger = logging.getLogger(__name__)


def percentage(numerator, denominator):
    """Integer percentage rounded half up, 0 for an empty denominator."""
    if denominator <= 0:
        return 0
    return (200 * numerator + denominator) // (2 * denominator)


class CourseProgressService:
    """Recomputes enrollment progress from lesson completions"""

    @staticmethod
    def counted_lesson_ids(course_id):
        """
        Lessons that make up 100% of a course: the required ones, or every
        lesson when none is flagged required.
        """
        if not Module.objects.filter(course_id=course_id).exists():
            return set()
        lessons = Lesson.objects.filter(module__course_id=course_id)
        required = set(lessons.filter(is_required=True).values_list('id', flat=True))
        if required:
            return required
        return set(lessons.values_list('id', flat=True))

    @staticmethod
    def compute(user_id, course_id):
        counted = CourseProgressService.counted_lesson_ids(course_id)
        if not counted:
            return 0
        completed = LessonProgress.objects.filter(
            user_id=user_id,
            lesson_id__in=counted,
            completed=True,
        ).count()
        return percentage(completed, len(counted))

    @staticmethod
    def update_course_progress(user_id, course_id):
        """
        Recompute and store the progress of one (user, course) enrollment.

        Returns the computed percentage. A user without an enrollment gets
        the number back but nothing is written.
        """
        with transaction.atomic():
            enrollment = (
                Enrollment.objects.select_for_update()
                .filter(user_id=user_id, course_id=course_id)
                .first()
            )
            progress = CourseProgressService.compute(user_id, course_id)
            if enrollment is None:
                return progress

            enrollment.progress = progress
            if progress == 100:
                if enrollment.completed_at is None:
                    enrollment.completed_at = timezone.now()
            else:
                enrollment.completed_at = None
            enrollment.save(update_fields=['progress', 'completed_at'])

        logger.info("Progress for user %s in course %s is now %s%%", user_id, course_id, progress)
        return progress

    @staticmethod
    def complete_lesson(user, lesson):
        """
        Mark ``lesson`` complete for ``user`` and refresh the course progress.

        Idempotent: a second call returns the existing row. The enrollment
        row is locked first so concurrent completions by the same user are
        counted one after the other.
        """
        module = lesson.module
        course_id = module.course_id
        with transaction.atomic():
            Enrollment.objects.select_for_update().filter(user=user, course_id=course_id).first()
            record, created = LessonProgress.objects.get_or_create(
                user=user,
                lesson=lesson,
                defaults={'module': module, 'course_id': course_id, 'completed': True},
            )
            if created:
                log_activity(user, ActivityLog.LESSON_COMPLETE, lesson.id, 'lesson')
                CourseProgressService.update_course_progress(user.id, course_id)
        return record, created

    @staticmethod
    def recalculate(tenant_id, user_id=None, course_id=None):
        """
        Admin repair: recompute progress for one (user, course), every user
        of a course, every course of a user, or the whole tenant.
        """
        enrollments = Enrollment.objects.filter(course__tenant_id=tenant_id)
        if user_id:
            enrollments = enrollments.filter(user_id=user_id)
        if course_id:
            enrollments = enrollments.filter(course_id=course_id)

        updates = []
        for uid, cid in enrollments.order_by('id').values_list('user_id', 'course_id'):
            updates.append({
                'userId': uid,
                'courseId': cid,
                'progress': CourseProgressService.update_course_progress(uid, cid),
            })
        return updates

    @staticmethod
    def course_report(course):
        """Per-student, per-module completion for the admin progress view."""
        modules = list(course.modules.prefetch_related('lessons'))
        enrollments = course.enrollments.select_related('user').order_by('id')
        completed_by_user = {}
        for uid, lesson_id in LessonProgress.objects.filter(
            lesson__module__course=course, completed=True
        ).values_list('user_id', 'lesson_id'):
            completed_by_user.setdefault(uid, set()).add(lesson_id)

        details = []
        for enrollment in enrollments:
            user = enrollment.user
            done = completed_by_user.get(user.id, set())
            module_progress = []
            total_lessons = 0
            total_completed = 0
            for module in modules:
                lesson_ids = [lesson.id for lesson in module.lessons.all()]
                completed = len(done.intersection(lesson_ids))
                total_lessons += len(lesson_ids)
                total_completed += completed
                module_progress.append({
                    'moduleId': module.id,
                    'moduleName': module.title,
                    'totalLessons': len(lesson_ids),
                    'completedLessons': completed,
                    'progress': percentage(completed, len(lesson_ids)),
                })
            details.append({
                'userId': user.id,
                'username': user.username,
                'name': user.full_name,
                'email': user.email,
                'enrolledAt': enrollment.enrolled_at,
                'completedAt': enrollment.completed_at,
                'overallProgress': enrollment.progress,
                'calculatedProgress': percentage(total_completed, total_lessons),
                'moduleProgress': module_progress,
            })

        return {
            'courseId': course.id,
            'courseTitle': course.title,
            'enrollmentsCount': len(details),
            'progressDetails': details,
        }


class EnrollmentService:
    """Course and batch enrollment, including the batch -> course cascade"""

    @staticmethod
    def enroll(user, course):
        """Create the (user, course) enrollment if missing. Returns (enrollment, created)."""
        return Enrollment.objects.get_or_create(user=user, course=course)

    @staticmethod
    def generate_batch_code(course_id):
        """B + course id padded to 3 digits + last 6 digits of the epoch millis."""
        millis = str(int(time.time() * 1000))
        return f"B{course_id:03d}{millis[-6:]}"

    @staticmethod
    def enroll_in_batch(batch, user, enrolled_by):
        """
        Add ``user`` to ``batch`` and make sure they are enrolled in the
        batch's course. Neither row is ever duplicated.
        """
        with transaction.atomic():
            batch_enrollment, created = BatchEnrollment.objects.get_or_create(
                batch=batch,
                user=user,
                defaults={'enrolled_by': enrolled_by},
            )
            EnrollmentService.enroll(user, batch.course)
        if created:
            logger.info("User %s joined batch %s", user.id, batch.batch_code)
        return batch_enrollment, created

    @staticmethod
    def bulk_enroll_in_batch(batch, users, enrolled_by):
        """All-or-nothing batch enrollment of several users."""
        results = []
        with transaction.atomic():
            for user in users:
                batch_enrollment, _ = EnrollmentService.enroll_in_batch(batch, user, enrolled_by)
                results.append(batch_enrollment)
        return results