"""
Exams app models - exams, their questions and timed attempts
"""
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone


class Exam(models.Model):
    TYPE_MCQ = 'mcq'
    TYPE_WRITTEN = 'written'
    TYPE_CHOICES = [(TYPE_MCQ, 'Multiple choice'), (TYPE_WRITTEN, 'Written')]

    title = models.CharField(max_length=255, db_column='title')
    description = models.TextField(db_column='description')
    course = models.ForeignKey('courses.Course', on_delete=models.CASCADE, related_name='exams', db_column='course_id')
    exam_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_MCQ, db_column='exam_type')
    duration = models.PositiveIntegerField(default=30, db_column='duration')
    max_attempts = models.PositiveIntegerField(default=1, db_column='max_attempts')
    start_time = models.DateTimeField(blank=True, null=True, db_column='start_time')
    end_time = models.DateTimeField(blank=True, null=True, db_column='end_time')
    accepting_responses = models.BooleanField(default=True, db_column='accepting_responses')
    tenant = models.ForeignKey('accounts.Tenant', on_delete=models.CASCADE, related_name='exams', db_column='tenant_id')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='created_exams', db_column='created_by')
    created_at = models.DateTimeField(default=timezone.now, db_column='created_at')

    class Meta:
        db_table = 'exams'
        ordering = ['id']

    def __str__(self):
        return self.title

    @property
    def is_mcq(self):
        return self.exam_type == self.TYPE_MCQ

    def is_open(self, now=None):
        """
        Whether the exam is inside its access window. Reported to the
        client, attempt creation does not look at it.
        """
        now = now or timezone.now()
        if self.start_time and now < self.start_time:
            return False
        if self.end_time and now > self.end_time:
            return False
        return True


class Question(models.Model):
    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, related_name='questions', db_column='exam_id')
    text = models.TextField(db_column='text')
    order = models.IntegerField(db_column='order')
    options = models.JSONField(default=list, blank=True, db_column='options')
    correct_option = models.IntegerField(blank=True, null=True, db_column='correct_option')

    class Meta:
        db_table = 'questions'
        ordering = ['order', 'id']

    def __str__(self):
        return self.text[:50]


class ExamAttempt(models.Model):
    """
    One sitting of an exam. In progress while ``completed_at`` is empty,
    completed once submitted. Written answers are reviewed afterwards
    (``feedback`` + ``reviewed_at``).
    """
    STATUS_IN_PROGRESS = 'in_progress'
    STATUS_COMPLETED = 'completed'
    STATUS_EXPIRED = 'expired'

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='exam_attempts', db_column='user_id')
    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, related_name='attempts', db_column='exam_id')
    started_at = models.DateTimeField(default=timezone.now, db_column='started_at')
    completed_at = models.DateTimeField(blank=True, null=True, db_column='completed_at')
    answers = models.JSONField(blank=True, null=True, db_column='answers')
    score = models.PositiveSmallIntegerField(blank=True, null=True, db_column='score')
    feedback = models.TextField(blank=True, null=True, db_column='feedback')
    reviewed_at = models.DateTimeField(blank=True, null=True, db_column='reviewed_at')

    class Meta:
        db_table = 'exam_attempts'
        ordering = ['-started_at', '-id']
        indexes = [
            models.Index(fields=['user', 'exam'], name='attempt_user_exam_idx'),
        ]

    @property
    def is_completed(self):
        return self.completed_at is not None

    @property
    def deadline(self):
        return self.started_at + timedelta(minutes=self.exam.duration)

    @property
    def status(self):
        if self.is_completed:
            return self.STATUS_COMPLETED
        grace = timedelta(seconds=settings.EXAM_GRACE_SECONDS)
        if timezone.now() > self.deadline + grace:
            return self.STATUS_EXPIRED
        return self.STATUS_IN_PROGRESS

    @property
    def is_late(self):
        """Submitted after the nominal duration plus grace. Accepted, only reported."""
        if not self.is_completed:
            return False
        grace = timedelta(seconds=settings.EXAM_GRACE_SECONDS)
        return self.completed_at > self.deadline + grace
