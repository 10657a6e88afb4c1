"""
Assistant app URL configuration
"""
from django.urls import path

from . import views

urlpatterns = [
    path('ai/chat', views.chat, name='ai-chat'),
    path('ai/image-analysis', views.image_analysis, name='ai-image-analysis'),
    path('ai/generate-image', views.generate_image, name='ai-generate-image'),
    path('ai/upload-image', views.upload_image, name='ai-upload-image'),
    path('ai/log', views.log_chat, name='ai-log'),
]
