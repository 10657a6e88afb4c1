"""
Assistant request payloads
"""
from django.conf import settings
from rest_framework import serializers

ALLOWED_IMAGE_TYPES = ('image/png', 'image/jpeg', 'image/jpg')


def validate_image_url(value):
    """Images reach the provider as data URLs (PNG/JPEG only) or plain http(s) links."""
    if value.startswith('data:'):
        mime_type = value.split(';')[0].split(':', 1)[1]
        if mime_type not in ALLOWED_IMAGE_TYPES:
            raise serializers.ValidationError('Only PNG, JPEG, and JPG image files are allowed')
        return value
    if value.startswith('http://') or value.startswith('https://'):
        return value
    raise serializers.ValidationError('Invalid image format. Image must be a data URL or HTTP URL.')


class ChatMessageSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=['user', 'assistant', 'system'])
    content = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)
    image = serializers.CharField(required=False, allow_null=True, validators=[validate_image_url])


class CourseContextSerializer(serializers.Serializer):
    id = serializers.IntegerField(required=False, allow_null=True)
    title = serializers.CharField()
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ChatSerializer(serializers.Serializer):
    messages = ChatMessageSerializer(many=True, allow_empty=False)
    courseContext = CourseContextSerializer(required=False, allow_null=True)


class ImageAnalysisSerializer(serializers.Serializer):
    prompt = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    image = serializers.CharField(validators=[validate_image_url])


class GenerateImageSerializer(serializers.Serializer):
    prompt = serializers.CharField()
    width = serializers.IntegerField(required=False, default=1024, min_value=64, max_value=2048)
    height = serializers.IntegerField(required=False, default=768, min_value=64, max_value=2048)
    steps = serializers.IntegerField(required=False, default=4, min_value=1, max_value=50)


class ImageUploadSerializer(serializers.Serializer):
    image = serializers.ImageField()

    def validate_image(self, value):
        if value.content_type not in ALLOWED_IMAGE_TYPES:
            raise serializers.ValidationError('Only PNG, JPEG, and JPG image files are allowed')
        if value.size > settings.AI_IMAGE_MAX_BYTES:
            raise serializers.ValidationError('Image must be 10MB or smaller')
        return value


class ChatLogSerializer(serializers.Serializer):
    courseId = serializers.IntegerField(required=False, allow_null=True, min_value=1)
