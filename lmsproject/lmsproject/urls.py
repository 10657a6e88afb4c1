"""
URL configuration for lmsproject project.

All JSON endpoints live under /api/, uploaded files under /uploads/.
"""
from django.conf import settings
from django.urls import path, include, re_path
from django.views.static import serve

from .health import health_check, database_status

urlpatterns = [
    path('api/health/', health_check, name='health-check'),
    path('api/health/database/', database_status, name='health-database'),
    path('api/', include('accounts.urls')),
    path('api/', include('activity.urls')),
    path('api/', include('courses.urls')),
    path('api/', include('exams.urls')),
    path('api/', include('assistant.urls')),
    re_path(r'^uploads/(?P<path>.+)$', serve, {'document_root': settings.MEDIA_ROOT}, name='uploads'),
]
