"""
Courses app views - course, module and lesson authoring
"""
import logging

from django.db.models import Q
from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import IsAdminOrReadOnly, is_staff_role
from .models import Course, Module, Lesson, Enrollment
from .permissions import load_course, load_module, load_lesson, load_tenant_user, ensure_course_access
from .serializers import (
    CourseSerializer, ModuleSerializer, ModuleUpdateSerializer,
    LessonSerializer, LessonUpdateSerializer,
)

logger = logging.getLogger(__name__)


class PartialUpdateMixin:
    """PUT behaves like PATCH: only the fields sent are changed."""

    def update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        return super().update(request, *args, **kwargs)


class CourseViewSet(PartialUpdateMixin, viewsets.ModelViewSet):
    serializer_class = CourseSerializer
    permission_classes = [IsAdminOrReadOnly]
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        user = self.request.user
        qs = Course.objects.filter(tenant_id=user.tenant_id)
        if is_staff_role(user):
            return qs
        enrolled = Enrollment.objects.filter(user=user).values('course_id')
        return qs.filter(Q(is_enrollment_required=False) | Q(id__in=enrolled))

    def get_object(self):
        course = load_course(self.request.user, self.kwargs['pk'])
        if self.action == 'retrieve':
            ensure_course_access(self.request.user, course)
        return course

    def _check_instructor(self, data):
        if data.get('instructor_id') is not None:
            load_tenant_user(self.request.user, data['instructor_id'], 'Access denied to this instructor')

    def perform_create(self, serializer):
        self._check_instructor(serializer.validated_data)
        course = serializer.save(tenant_id=self.request.user.tenant_id, created_by=self.request.user)
        logger.info("Course %s created by %s", course.id, self.request.user.username)

    def perform_update(self, serializer):
        self._check_instructor(serializer.validated_data)
        serializer.save()

    @action(detail=True, methods=['get'])
    def modules(self, request, pk=None):
        course = load_course(request.user, pk)
        ensure_course_access(request.user, course)
        return Response(ModuleSerializer(course.modules.all(), many=True).data)


class ModuleViewSet(PartialUpdateMixin,
                    mixins.CreateModelMixin,
                    mixins.RetrieveModelMixin,
                    mixins.UpdateModelMixin,
                    mixins.DestroyModelMixin,
                    viewsets.GenericViewSet):
    permission_classes = [IsAdminOrReadOnly]
    lookup_value_regex = r'\d+'
    queryset = Module.objects.all()

    def get_serializer_class(self):
        if self.action in ('update', 'partial_update'):
            return ModuleUpdateSerializer
        return ModuleSerializer

    def get_object(self):
        return load_module(self.request.user, self.kwargs['pk'])

    def perform_create(self, serializer):
        load_course(self.request.user, serializer.validated_data['course'].id)
        serializer.save()

    @action(detail=True, methods=['get'])
    def lessons(self, request, pk=None):
        module = load_module(request.user, pk)
        return Response(LessonSerializer(module.lessons.all(), many=True).data)


class LessonViewSet(PartialUpdateMixin,
                    mixins.CreateModelMixin,
                    mixins.RetrieveModelMixin,
                    mixins.UpdateModelMixin,
                    mixins.DestroyModelMixin,
                    viewsets.GenericViewSet):
    permission_classes = [IsAdminOrReadOnly]
    lookup_value_regex = r'\d+'
    queryset = Lesson.objects.all()

    def get_serializer_class(self):
        if self.action in ('update', 'partial_update'):
            return LessonUpdateSerializer
        return LessonSerializer

    def get_object(self):
        return load_lesson(self.request.user, self.kwargs['pk'])

    def perform_create(self, serializer):
        load_module(self.request.user, serializer.validated_data['module'].id)
        serializer.save()
