"""
Courses serializers - payload keys are camelCase for the SPA
"""
from rest_framework import serializers

from accounts.models import User
from accounts.serializers import UserSerializer
from .models import Course, Module, Lesson, Enrollment, LessonProgress, Batch, BatchEnrollment


class CourseSerializer(serializers.ModelSerializer):
    moduleCount = serializers.IntegerField(source='module_count', required=False, min_value=0)
    lessonCount = serializers.IntegerField(source='lesson_count', required=False, min_value=0)
    instructorId = serializers.IntegerField(source='instructor_id', required=False, allow_null=True)
    isEnrollmentRequired = serializers.BooleanField(source='is_enrollment_required', required=False)
    tenantId = serializers.IntegerField(source='tenant_id', read_only=True)
    createdBy = serializers.IntegerField(source='created_by_id', read_only=True)

    class Meta:
        model = Course
        fields = [
            'id', 'title', 'description', 'category', 'difficulty', 'duration',
            'moduleCount', 'lessonCount', 'thumbnail', 'instructorId',
            'isEnrollmentRequired', 'tenantId', 'createdBy',
        ]
        read_only_fields = ['id']

    def validate_instructorId(self, value):
        if value is not None and not User.objects.filter(id=value).exists():
            raise serializers.ValidationError('Instructor not found')
        return value


class ModuleSerializer(serializers.ModelSerializer):
    courseId = serializers.PrimaryKeyRelatedField(source='course', queryset=Course.objects.all())

    class Meta:
        model = Module
        fields = ['id', 'title', 'description', 'courseId', 'order']
        read_only_fields = ['id']


class ModuleUpdateSerializer(ModuleSerializer):
    """Modules stay in their course once created."""
    courseId = serializers.IntegerField(source='course_id', read_only=True)


class LessonSerializer(serializers.ModelSerializer):
    contentType = serializers.ChoiceField(source='content_type', choices=Lesson.CONTENT_TYPE_CHOICES)
    moduleId = serializers.PrimaryKeyRelatedField(source='module', queryset=Module.objects.all())
    isRequired = serializers.BooleanField(source='is_required', required=False)
    quizData = serializers.JSONField(source='quiz_data', required=False, allow_null=True)

    class Meta:
        model = Lesson
        fields = ['id', 'title', 'content', 'contentType', 'moduleId', 'order', 'duration', 'isRequired', 'quizData']
        read_only_fields = ['id']


class LessonUpdateSerializer(LessonSerializer):
    moduleId = serializers.IntegerField(source='module_id', read_only=True)


class LessonWithProgressSerializer(LessonSerializer):
    completed = serializers.SerializerMethodField()

    class Meta(LessonSerializer.Meta):
        fields = LessonSerializer.Meta.fields + ['completed']

    def get_completed(self, obj):
        return obj.id in self.context.get('completed_ids', ())


class EnrollmentSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source='user_id', read_only=True)
    courseId = serializers.IntegerField(source='course_id', read_only=True)
    enrolledAt = serializers.DateTimeField(source='enrolled_at', read_only=True)
    completedAt = serializers.DateTimeField(source='completed_at', read_only=True)

    class Meta:
        model = Enrollment
        fields = ['id', 'userId', 'courseId', 'enrolledAt', 'completedAt', 'progress']
        read_only_fields = ['id', 'progress']


class EnrollmentWithUserSerializer(EnrollmentSerializer):
    user = UserSerializer(read_only=True)

    class Meta(EnrollmentSerializer.Meta):
        fields = EnrollmentSerializer.Meta.fields + ['user']


class EnrollmentWithCourseSerializer(EnrollmentSerializer):
    course = CourseSerializer(read_only=True)

    class Meta(EnrollmentSerializer.Meta):
        fields = EnrollmentSerializer.Meta.fields + ['course']


class LessonProgressSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source='user_id', read_only=True)
    lessonId = serializers.IntegerField(source='lesson_id', read_only=True)
    moduleId = serializers.IntegerField(source='module_id', read_only=True)
    courseId = serializers.IntegerField(source='course_id', read_only=True)
    completedAt = serializers.DateTimeField(source='completed_at', read_only=True)

    class Meta:
        model = LessonProgress
        fields = ['id', 'userId', 'lessonId', 'moduleId', 'courseId', 'completed', 'completedAt']
        read_only_fields = ['id', 'completed']


class EnrollmentCreateSerializer(serializers.Serializer):
    courseId = serializers.IntegerField(min_value=1)


class LessonCompletionSerializer(serializers.Serializer):
    lessonId = serializers.IntegerField(min_value=1)
    moduleId = serializers.IntegerField(min_value=1)
    courseId = serializers.IntegerField(min_value=1)


class RecalculateProgressSerializer(serializers.Serializer):
    userId = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    courseId = serializers.IntegerField(required=False, allow_null=True, min_value=1)


class BatchSerializer(serializers.ModelSerializer):
    batchCode = serializers.CharField(source='batch_code', required=False, max_length=50)
    courseId = serializers.IntegerField(source='course_id')
    trainerId = serializers.IntegerField(source='trainer_id')
    startDate = serializers.DateField(source='start_date')
    batchTime = serializers.CharField(source='batch_time', max_length=50)
    maxStudents = serializers.IntegerField(source='max_students', required=False, allow_null=True, min_value=1)
    isActive = serializers.BooleanField(source='is_active', required=False)
    tenantId = serializers.IntegerField(source='tenant_id', read_only=True)
    createdBy = serializers.IntegerField(source='created_by_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    studentCount = serializers.SerializerMethodField()

    class Meta:
        model = Batch
        fields = [
            'id', 'name', 'batchCode', 'courseId', 'trainerId', 'startDate', 'batchTime',
            'description', 'maxStudents', 'isActive', 'tenantId', 'createdBy', 'createdAt',
            'studentCount',
        ]
        read_only_fields = ['id']

    def get_studentCount(self, obj):
        return obj.enrollments.count()

    def validate_batchCode(self, value):
        qs = Batch.objects.filter(batch_code=value)
        if self.instance is not None:
            qs = qs.exclude(id=self.instance.id)
        if qs.exists():
            raise serializers.ValidationError('Batch code already exists')
        return value


class BatchEnrollmentSerializer(serializers.ModelSerializer):
    batchId = serializers.IntegerField(source='batch_id', read_only=True)
    userId = serializers.IntegerField(source='user_id', read_only=True)
    enrolledAt = serializers.DateTimeField(source='enrolled_at', read_only=True)
    enrolledBy = serializers.IntegerField(source='enrolled_by_id', read_only=True)

    class Meta:
        model = BatchEnrollment
        fields = ['id', 'batchId', 'userId', 'enrolledAt', 'enrolledBy', 'status']
        read_only_fields = ['id']


class BatchEnrollmentWithUserSerializer(BatchEnrollmentSerializer):
    user = UserSerializer(read_only=True)

    class Meta(BatchEnrollmentSerializer.Meta):
        fields = BatchEnrollmentSerializer.Meta.fields + ['user']


class BatchEnrollmentWithBatchSerializer(BatchEnrollmentSerializer):
    batch = BatchSerializer(read_only=True)

    class Meta(BatchEnrollmentSerializer.Meta):
        fields = BatchEnrollmentSerializer.Meta.fields + ['batch']


class BatchEnrollmentCreateSerializer(serializers.Serializer):
    batchId = serializers.IntegerField(min_value=1)
    userId = serializers.IntegerField(min_value=1)


class BulkBatchEnrollmentSerializer(serializers.Serializer):
    batchId = serializers.IntegerField(min_value=1)
    userIds = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)
