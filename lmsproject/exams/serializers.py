"""
Exams serializers
"""
from rest_framework import serializers

from accounts.serializers import UserSerializer
from .models import Exam, Question, ExamAttempt


class ExamSerializer(serializers.ModelSerializer):
    title = serializers.CharField(min_length=3, max_length=255)
    description = serializers.CharField(min_length=1)
    courseId = serializers.IntegerField(source='course_id', min_value=1)
    examType = serializers.ChoiceField(source='exam_type', choices=Exam.TYPE_CHOICES, required=False)
    duration = serializers.IntegerField(min_value=1, required=False)
    maxAttempts = serializers.IntegerField(source='max_attempts', min_value=1, required=False)
    startTime = serializers.DateTimeField(source='start_time', required=False, allow_null=True)
    endTime = serializers.DateTimeField(source='end_time', required=False, allow_null=True)
    acceptingResponses = serializers.BooleanField(source='accepting_responses', required=False)
    tenantId = serializers.IntegerField(source='tenant_id', read_only=True)
    createdBy = serializers.IntegerField(source='created_by_id', read_only=True)
    isOpen = serializers.SerializerMethodField()
    questionCount = serializers.SerializerMethodField()

    class Meta:
        model = Exam
        fields = [
            'id', 'title', 'description', 'courseId', 'examType', 'duration', 'maxAttempts',
            'startTime', 'endTime', 'acceptingResponses', 'tenantId', 'createdBy',
            'isOpen', 'questionCount',
        ]
        read_only_fields = ['id']

    def get_isOpen(self, obj):
        return obj.is_open()

    def get_questionCount(self, obj):
        return obj.questions.count()

    def validate(self, attrs):
        start = attrs.get('start_time', getattr(self.instance, 'start_time', None))
        end = attrs.get('end_time', getattr(self.instance, 'end_time', None))
        if start and end and end <= start:
            raise serializers.ValidationError({'endTime': ['End time must be after start time']})
        return attrs


class QuestionSerializer(serializers.ModelSerializer):
    """Admin view of a question, correct option included."""
    examId = serializers.IntegerField(source='exam_id', read_only=True)
    order = serializers.IntegerField(required=False)
    options = serializers.ListField(child=serializers.CharField(), required=False)
    correctOption = serializers.IntegerField(source='correct_option', required=False, allow_null=True, min_value=0)

    class Meta:
        model = Question
        fields = ['id', 'examId', 'text', 'order', 'options', 'correctOption']
        read_only_fields = ['id']

    def validate(self, attrs):
        exam = attrs.get('exam') or self.context.get('exam') or getattr(self.instance, 'exam', None)
        if exam is None or not exam.is_mcq:
            return attrs

        options = attrs.get('options', getattr(self.instance, 'options', None)) or []
        correct = attrs.get('correct_option', getattr(self.instance, 'correct_option', None))
        if len(options) < 2:
            raise serializers.ValidationError({'options': ['A multiple choice question needs at least 2 options']})
        if correct is None or correct >= len(options):
            raise serializers.ValidationError({'correctOption': ['Correct option must point at one of the options']})
        return attrs


class StudentQuestionSerializer(QuestionSerializer):
    """What a student sees while taking the exam."""

    class Meta(QuestionSerializer.Meta):
        fields = ['id', 'examId', 'text', 'order', 'options']


class QuestionCreateSerializer(QuestionSerializer):
    examId = serializers.PrimaryKeyRelatedField(source='exam', queryset=Exam.objects.all())


class ExamAttemptSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source='user_id', read_only=True)
    examId = serializers.IntegerField(source='exam_id', read_only=True)
    startedAt = serializers.DateTimeField(source='started_at', read_only=True)
    completedAt = serializers.DateTimeField(source='completed_at', read_only=True)
    reviewedAt = serializers.DateTimeField(source='reviewed_at', read_only=True)
    deadline = serializers.DateTimeField(read_only=True)
    duration = serializers.IntegerField(source='exam.duration', read_only=True)
    isLate = serializers.BooleanField(source='is_late', read_only=True)
    status = serializers.CharField(read_only=True)

    class Meta:
        model = ExamAttempt
        fields = [
            'id', 'userId', 'examId', 'startedAt', 'completedAt', 'answers', 'score',
            'feedback', 'reviewedAt', 'duration', 'deadline', 'status', 'isLate',
        ]
        read_only_fields = ['id', 'answers', 'score', 'feedback']


class ExamAttemptDetailSerializer(ExamAttemptSerializer):
    exam = ExamSerializer(read_only=True)
    user = UserSerializer(read_only=True)

    class Meta(ExamAttemptSerializer.Meta):
        fields = ExamAttemptSerializer.Meta.fields + ['exam', 'user']


class ExamResultSerializer(ExamAttemptSerializer):
    examTitle = serializers.CharField(source='exam.title', read_only=True)
    examType = serializers.CharField(source='exam.exam_type', read_only=True)
    courseId = serializers.IntegerField(source='exam.course_id', read_only=True)

    class Meta(ExamAttemptSerializer.Meta):
        fields = ExamAttemptSerializer.Meta.fields + ['examTitle', 'examType', 'courseId']


class AttemptStartSerializer(serializers.Serializer):
    examId = serializers.IntegerField(min_value=1)


class AttemptSubmitSerializer(serializers.Serializer):
    answers = serializers.DictField(required=False, allow_null=True)
    completedAt = serializers.DateTimeField(required=False, allow_null=True)


class GradeSerializer(serializers.Serializer):
    feedback = serializers.CharField(allow_blank=False)
