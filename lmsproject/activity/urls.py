from django.urls import path

from . import views

urlpatterns = [
    path('activity-logs/user', views.user_activity, name='activity-user'),
    path('activity-logs/tenant', views.tenant_activity, name='activity-tenant'),
    path('activity-logs', views.create_activity, name='activity-create'),
]
