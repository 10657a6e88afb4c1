"""
Exams app views - exam and question authoring
"""
import logging

from rest_framework import mixins, viewsets, status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from accounts.permissions import IsAdmin, IsAdminOrReadOnly, is_staff_role
from courses.permissions import load_course
from courses.views import PartialUpdateMixin
from .models import Exam, Question
from .permissions import load_exam, load_question
from .serializers import ExamSerializer, QuestionSerializer, StudentQuestionSerializer, QuestionCreateSerializer
from .services import QuestionService

logger = logging.getLogger(__name__)


class ExamViewSet(PartialUpdateMixin, viewsets.ModelViewSet):
    serializer_class = ExamSerializer
    permission_classes = [IsAdminOrReadOnly]
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        qs = Exam.objects.filter(tenant_id=self.request.user.tenant_id)
        course_id = self.request.query_params.get('courseId')
        if course_id and course_id.isdigit():
            qs = qs.filter(course_id=int(course_id))
        return qs

    def get_object(self):
        return load_exam(self.request.user, self.kwargs['pk'])

    def perform_create(self, serializer):
        load_course(self.request.user, serializer.validated_data['course_id'])
        exam = serializer.save(tenant_id=self.request.user.tenant_id, created_by=self.request.user)
        logger.info("Exam %s (%s) created by %s", exam.id, exam.exam_type, self.request.user.username)

    def perform_update(self, serializer):
        if 'course_id' in serializer.validated_data:
            load_course(self.request.user, serializer.validated_data['course_id'])
        serializer.save()

    @action(detail=True, methods=['get', 'post', 'put', 'delete'])
    def questions(self, request, pk=None):
        exam = load_exam(request.user, pk)

        if request.method == 'GET':
            serializer_class = QuestionSerializer if is_staff_role(request.user) else StudentQuestionSerializer
            return Response(serializer_class(exam.questions.all(), many=True).data)

        if request.method == 'POST':
            serializer = QuestionSerializer(data=request.data, context={'exam': exam})
            serializer.is_valid(raise_exception=True)
            extra = {}
            if serializer.validated_data.get('order') is None:
                extra['order'] = QuestionService.next_order(exam)
            serializer.save(exam=exam, **extra)
            return Response(serializer.data, status=status.HTTP_201_CREATED)

        if request.method == 'PUT':
            # Accept either a bare list or {"questions": [...]}
            items = request.data.get('questions') if isinstance(request.data, dict) else request.data
            if not isinstance(items, list):
                raise ValidationError('A list of questions is required')
            serializer = QuestionSerializer(data=items, many=True, context={'exam': exam})
            serializer.is_valid(raise_exception=True)
            questions = QuestionService.replace_questions(exam, serializer.validated_data)
            return Response(QuestionSerializer(questions, many=True).data)

        deleted, _ = exam.questions.all().delete()
        logger.info("Deleted all questions of exam %s (%s rows)", exam.id, deleted)
        return Response(status=status.HTTP_204_NO_CONTENT)


class QuestionViewSet(PartialUpdateMixin,
                      mixins.CreateModelMixin,
                      mixins.UpdateModelMixin,
                      mixins.DestroyModelMixin,
                      viewsets.GenericViewSet):
    permission_classes = [IsAdmin]
    lookup_value_regex = r'\d+'
    queryset = Question.objects.all()

    def get_serializer_class(self):
        if self.action == 'create':
            return QuestionCreateSerializer
        return QuestionSerializer

    def get_object(self):
        return load_question(self.request.user, self.kwargs['pk'])

    def perform_create(self, serializer):
        exam = load_exam(self.request.user, serializer.validated_data['exam'].id)
        if serializer.validated_data.get('order') is None:
            serializer.save(order=QuestionService.next_order(exam))
        else:
            serializer.save()
