"""
Exams app URL configuration
"""
from django.urls import path, include
from rest_framework.routers import SimpleRouter

from . import attempt_views
from .views import ExamViewSet, QuestionViewSet

router = SimpleRouter(trailing_slash=False)
router.register(r'exams', ExamViewSet, basename='exam')
router.register(r'questions', QuestionViewSet, basename='question')

urlpatterns = [
    path('', include(router.urls)),

    # Attempts
    path('exam-attempts', attempt_views.start_attempt, name='exam-attempt-create'),
    path('exam-attempts/user', attempt_views.my_attempts, name='exam-attempt-mine'),
    path('exam-attempts/user/<int:user_id>', attempt_views.user_attempts, name='exam-attempt-user'),
    path('exam-attempts/exam/<int:exam_id>', attempt_views.exam_attempts, name='exam-attempt-exam'),
    path('exam-attempts/<int:attempt_id>', attempt_views.update_attempt, name='exam-attempt-update'),

    # Review and results
    path('admin/exam-attempts', attempt_views.admin_attempts, name='admin-exam-attempts'),
    path('admin/exam-attempts/<int:attempt_id>/grade', attempt_views.grade_attempt, name='admin-exam-attempt-grade'),
    path('student/exam-results', attempt_views.my_results, name='student-exam-results'),
]
