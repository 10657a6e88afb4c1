from django.urls import path

from . import views

urlpatterns = [
    path('register', views.register, name='register'),
    path('login', views.login, name='login'),
    path('logout', views.logout, name='logout'),
    path('user', views.current_user, name='current-user'),
    path('tenants', views.tenant_detail, name='tenant-detail'),
    path('admin/tenants', views.admin_tenants, name='admin-tenants'),
    path('users', views.user_list, name='user-list'),
    path('users/<int:user_id>', views.user_detail, name='user-detail'),
]
