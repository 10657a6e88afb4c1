"""
Courses app URL configuration - content, enrollments, progress and batches
"""
from django.urls import path, include
from rest_framework.routers import SimpleRouter

from . import progress_views, batch_views
from .views import CourseViewSet, ModuleViewSet, LessonViewSet
from .batch_views import BatchViewSet

router = SimpleRouter(trailing_slash=False)
router.register(r'courses', CourseViewSet, basename='course')
router.register(r'modules', ModuleViewSet, basename='module')
router.register(r'lessons', LessonViewSet, basename='lesson')
router.register(r'batches', BatchViewSet, basename='batch')

urlpatterns = [
    path('', include(router.urls)),
    path('courses/<int:course_id>/batches', batch_views.course_batches, name='course-batches'),

    # Enrollments
    path('enrollments', progress_views.enroll, name='enrollment-create'),
    path('enrollments/user', progress_views.my_enrollments, name='enrollment-mine'),
    path('enrollments/user/<int:user_id>', progress_views.user_enrollments, name='enrollment-user'),
    path('enrollments/course/<int:course_id>', progress_views.course_enrollments, name='enrollment-course'),
    path('enrollments/assign', progress_views.assign_course, name='enrollment-assign'),
    path('enrollments/<int:enrollment_id>', progress_views.update_enrollment, name='enrollment-update'),

    # Progress
    path('lesson-progress', progress_views.complete_lesson, name='lesson-progress-create'),
    path('lesson-progress/<int:lesson_id>', progress_views.lesson_progress, name='lesson-progress'),
    path('course-progress/<int:course_id>', progress_views.course_progress, name='course-progress'),
    path('admin/course-progress/<int:course_id>', progress_views.admin_course_progress, name='admin-course-progress'),
    path('admin/recalculate-progress', progress_views.recalculate_progress, name='admin-recalculate-progress'),
    path('admin/reports/course-progress/<int:course_id>.xlsx', progress_views.course_progress_export,
         name='admin-course-progress-export'),

    # Batch enrollments
    path('batch-enrollments', batch_views.create_batch_enrollment, name='batch-enrollment-create'),
    path('batch-enrollments/bulk', batch_views.bulk_batch_enrollment, name='batch-enrollment-bulk'),
    path('batch-enrollments/user/<int:user_id>', batch_views.user_batch_enrollments, name='batch-enrollment-user'),
    path('batch-enrollments/<int:enrollment_id>', batch_views.delete_batch_enrollment, name='batch-enrollment-delete'),
]
