"""
AI assistant endpoints - chat, image analysis, image generation
"""
import base64
import logging

from rest_framework import status
from rest_framework.decorators import api_view, parser_classes
from rest_framework.exceptions import APIException
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response

from activity.models import ActivityLog
from activity.serializers import ActivityLogSerializer
from activity.services import log_activity
from courses.permissions import load_course
from . import client
from .serializers import (
    ChatSerializer, ImageAnalysisSerializer, GenerateImageSerializer, ImageUploadSerializer, ChatLogSerializer,
)

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = """You are an AI-powered educational assistant for a Learning Management System.
Help students understand course concepts, explain topics, and answer questions related to their education.
You should focus on educational content and avoid answering questions that are inappropriate or unrelated to learning.
Be thorough, polite, and provide clear explanations with examples when possible.

Feel free to use the <think>...</think> tags to show your reasoning process before giving the final answer.
Inside the <think> tags, explain your thought process about how you're approaching the question.
Then provide your actual response outside of these tags.

Your responses will be rendered as Markdown, so please use Markdown formatting for:
- Headers (# for main headings, ## for subheadings, etc.)
- **Bold text** for emphasis or important concepts
- *Italic text* for definitions or terms
- Lists (bulleted with - or numbered with 1., 2., etc.)
- Code blocks with triple backticks for code examples and syntax
- Tables when presenting structured data

When explaining programming concepts, use proper code formatting and ensure your explanations are clear and educational."""

IMAGE_ANALYSIS_PROMPT = """You are an AI-powered educational assistant analyzing an image for students.
Describe the image in detail relevant to educational contexts.
Focus on explaining concepts, identifying educational content, and providing relevant insights.
Be thorough, clear, and educational in your response."""

DEFAULT_IMAGE_QUESTION = 'What can you tell me about this image?'


class AssistantUnavailable(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'The AI assistant could not answer right now. Please try again.'
    default_code = 'assistant_unavailable'


def _call(func, *args, **kwargs):
    """Run a provider call, turning its failures into a 500 the client can show."""
    try:
        return func(*args, **kwargs)
    except client.AssistantNotConfigured as exc:
        logger.error("AI request refused: %s", exc)
        raise AssistantUnavailable(str(exc))
    except client.AssistantError as exc:
        logger.error("AI request failed: %s", exc)
        raise AssistantUnavailable()


def build_system_prompt(course_context):
    prompt = DEFAULT_SYSTEM_PROMPT
    if course_context:
        prompt += f"\n\nYou are currently helping with the course: {course_context['title']}.\n"
        if course_context.get('description'):
            prompt += f"Course description: {course_context['description']}\n"
    return prompt


def build_messages(system_prompt, messages):
    """
    Provider message list. Messages carrying an image use the multi-modal
    content format, the rest stay plain text.
    """
    formatted = [{'role': 'system', 'content': system_prompt}]
    for msg in messages:
        if msg.get('image'):
            formatted.append({
                'role': msg['role'],
                'content': [
                    {'type': 'text', 'text': msg.get('content') or DEFAULT_IMAGE_QUESTION},
                    {'type': 'image_url', 'image_url': {'url': msg['image']}},
                ],
            })
        else:
            formatted.append({'role': msg['role'], 'content': msg.get('content') or ''})
    return formatted


def _course_for_log(user, course_id):
    """Chat logs only point at courses of the caller's tenant."""
    if course_id:
        load_course(user, course_id)
    return course_id


@api_view(['POST'])
def chat(request):
    serializer = ChatSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    course_context = data.get('courseContext')
    messages = data['messages']
    vision = any(msg.get('image') for msg in messages)
    course_id = _course_for_log(request.user, course_context.get('id') if course_context else None)

    content, completion_id = _call(
        client.chat_completion,
        build_messages(build_system_prompt(course_context), messages),
        vision=vision,
    )

    log_activity(request.user, ActivityLog.AI_CHAT, course_id, 'course' if course_id else 'general')
    return Response({'message': content, 'id': completion_id})


@api_view(['POST'])
def image_analysis(request):
    serializer = ImageAnalysisSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    messages = [
        {'role': 'system', 'content': IMAGE_ANALYSIS_PROMPT},
        {
            'role': 'user',
            'content': [
                {'type': 'text', 'text': data.get('prompt') or DEFAULT_IMAGE_QUESTION},
                {'type': 'image_url', 'image_url': {'url': data['image']}},
            ],
        },
    ]
    content, completion_id = _call(
        client.chat_completion, messages, vision=True,
        fallback="Sorry, I couldn't analyze the image properly.",
    )
    return Response({'message': content, 'id': completion_id})


@api_view(['POST'])
def generate_image(request):
    serializer = GenerateImageSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    image_data = _call(
        client.generate_image, data['prompt'],
        width=data['width'], height=data['height'], steps=data['steps'],
    )
    return Response({'success': True, 'imageData': image_data, 'mimeType': 'image/jpeg'})


@api_view(['POST'])
@parser_classes([MultiPartParser, FormParser])
def upload_image(request):
    """Hand an uploaded image back as a data URL, ready to attach to a chat message."""
    serializer = ImageUploadSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    image = serializer.validated_data['image']
    image.seek(0)
    encoded = base64.b64encode(image.read()).decode('ascii')
    return Response({'imageUrl': f'data:{image.content_type};base64,{encoded}'})


@api_view(['POST'])
def log_chat(request):
    serializer = ChatLogSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    course_id = _course_for_log(request.user, serializer.validated_data.get('courseId'))
    entry = log_activity(request.user, ActivityLog.AI_CHAT, course_id, 'course' if course_id else 'general')
    return Response(ActivityLogSerializer(entry).data, status=status.HTTP_201_CREATED)
