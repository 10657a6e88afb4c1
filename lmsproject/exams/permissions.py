"""
Exam-level loaders, same contract as the course ones: 404 when missing,
403 when the resource belongs to another tenant.
"""
from rest_framework.exceptions import NotFound, PermissionDenied

from accounts.permissions import ensure_same_tenant, is_admin
from .models import Exam, Question, ExamAttempt


def load_exam(user, exam_id, message='Access denied to this exam'):
    try:
        exam = Exam.objects.get(id=exam_id)
    except Exam.DoesNotExist:
        raise NotFound('Exam not found')
    ensure_same_tenant(user, exam.tenant_id, message)
    return exam


def load_question(user, question_id, message='Access denied to this question'):
    try:
        question = Question.objects.select_related('exam').get(id=question_id)
    except Question.DoesNotExist:
        raise NotFound('Question not found')
    ensure_same_tenant(user, question.exam.tenant_id, message)
    return question


def load_attempt(user, attempt_id, message='Access denied to this exam attempt'):
    """The attempt's owner or an admin of the exam's tenant."""
    try:
        attempt = ExamAttempt.objects.select_related('exam', 'user').get(id=attempt_id)
    except ExamAttempt.DoesNotExist:
        raise NotFound('Exam attempt not found')
    if attempt.user_id == user.id:
        return attempt
    if not is_admin(user):
        raise PermissionDenied(message)
    ensure_same_tenant(user, attempt.exam.tenant_id, message)
    return attempt
