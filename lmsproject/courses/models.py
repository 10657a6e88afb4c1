"""
Course content, enrollments, lesson progress and batches.
Every table is scoped to a tenant through its course.
"""
from django.conf import settings
from django.db import models
from django.utils import timezone


class Course(models.Model):
    title = models.CharField(max_length=255, db_column='title')
    description = models.TextField(db_column='description')
    category = models.CharField(max_length=100, db_column='category')
    difficulty = models.CharField(max_length=50, db_column='difficulty')
    duration = models.PositiveIntegerField(db_column='duration')
    module_count = models.PositiveIntegerField(default=0, db_column='module_count')
    lesson_count = models.PositiveIntegerField(default=0, db_column='lesson_count')
    thumbnail = models.TextField(blank=True, null=True, db_column='thumbnail')
    instructor = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='instructed_courses', db_column='instructor_id'
    )
    is_enrollment_required = models.BooleanField(default=True, db_column='is_enrollment_required')
    tenant = models.ForeignKey('accounts.Tenant', on_delete=models.CASCADE, related_name='courses', db_column='tenant_id')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='created_courses', db_column='created_by')

    class Meta:
        db_table = 'courses'
        ordering = ['id']

    def __str__(self):
        return self.title


class Module(models.Model):
    title = models.CharField(max_length=255, db_column='title')
    description = models.TextField(blank=True, null=True, db_column='description')
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='modules', db_column='course_id')
    order = models.IntegerField(db_column='order')

    class Meta:
        db_table = 'modules'
        ordering = ['order', 'id']

    def __str__(self):
        return self.title


class Lesson(models.Model):
    CONTENT_TYPE_CHOICES = [('video', 'video'), ('text', 'text'), ('pdf', 'pdf'), ('quiz', 'quiz')]

    title = models.CharField(max_length=255, db_column='title')
    content = models.TextField(db_column='content')
    content_type = models.CharField(max_length=20, choices=CONTENT_TYPE_CHOICES, db_column='content_type')
    module = models.ForeignKey(Module, on_delete=models.CASCADE, related_name='lessons', db_column='module_id')
    order = models.IntegerField(db_column='order')
    duration = models.PositiveIntegerField(blank=True, null=True, db_column='duration')
    is_required = models.BooleanField(default=True, db_column='is_required')
    quiz_data = models.JSONField(blank=True, null=True, db_column='quiz_data')

    class Meta:
        db_table = 'lessons'
        ordering = ['order', 'id']

    def __str__(self):
        return self.title


class Enrollment(models.Model):
    """A user's enrollment in a course. ``progress`` is written only by the recompute service."""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='enrollments', db_column='user_id')
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='enrollments', db_column='course_id')
    enrolled_at = models.DateTimeField(default=timezone.now, db_column='enrolled_at')
    completed_at = models.DateTimeField(blank=True, null=True, db_column='completed_at')
    progress = models.PositiveSmallIntegerField(default=0, db_column='progress')

    class Meta:
        db_table = 'enrollments'
        ordering = ['id']
        unique_together = ['user', 'course']


class LessonProgress(models.Model):
    """Completion of one lesson by one user. Created once, never edited."""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='lesson_progress', db_column='user_id')
    lesson = models.ForeignKey(Lesson, on_delete=models.CASCADE, related_name='progress', db_column='lesson_id')
    module = models.ForeignKey(Module, on_delete=models.CASCADE, related_name='lesson_progress', db_column='module_id')
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='lesson_progress', db_column='course_id')
    completed = models.BooleanField(default=True, db_column='completed')
    completed_at = models.DateTimeField(default=timezone.now, db_column='completed_at')

    class Meta:
        db_table = 'lesson_progress'
        ordering = ['id']
        unique_together = ['user', 'lesson']


class Batch(models.Model):
    """A cohort binding a course to a trainer and a set of students."""
    name = models.CharField(max_length=255, db_column='name')
    batch_code = models.CharField(max_length=50, unique=True, db_column='batch_code')
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='batches', db_column='course_id')
    trainer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='trained_batches', db_column='trainer_id')
    start_date = models.DateField(db_column='start_date')
    batch_time = models.CharField(max_length=50, db_column='batch_time')
    tenant = models.ForeignKey('accounts.Tenant', on_delete=models.CASCADE, related_name='batches', db_column='tenant_id')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='created_batches', db_column='created_by')
    created_at = models.DateTimeField(default=timezone.now, db_column='created_at')
    description = models.TextField(blank=True, null=True, db_column='description')
    max_students = models.PositiveIntegerField(blank=True, null=True, db_column='max_students')
    is_active = models.BooleanField(default=True, db_column='is_active')

    class Meta:
        db_table = 'batches'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.batch_code} {self.name}"


class BatchEnrollment(models.Model):
    STATUS_ACTIVE = 'active'
    STATUS_CHOICES = [('active', 'active'), ('completed', 'completed'), ('dropped', 'dropped')]

    batch = models.ForeignKey(Batch, on_delete=models.CASCADE, related_name='enrollments', db_column='batch_id')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='batch_enrollments', db_column='user_id')
    enrolled_at = models.DateTimeField(default=timezone.now, db_column='enrolled_at')
    enrolled_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='batch_enrollments_made', db_column='enrolled_by')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_column='status')

    class Meta:
        db_table = 'batch_enrollments'
        ordering = ['id']
        unique_together = ['batch', 'user']
