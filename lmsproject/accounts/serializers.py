"""
Accounts serializers - camelCase payloads, the password hash never leaves the server
"""
import os
import time
import random

from django.conf import settings
from django.contrib.auth.hashers import make_password
from django.core.files.storage import default_storage
from rest_framework import serializers
from rest_framework.exceptions import PermissionDenied

from .models import Tenant, User


ALLOWED_PHOTO_TYPES = ('image/jpeg', 'image/jpg', 'image/png')


def check_role_grant(requester, role, current_role=None):
    """Only a super admin hands out or takes away the superadmin role."""
    if requester.is_superadmin:
        return
    if User.ROLE_SUPERADMIN in (role, current_role):
        raise PermissionDenied('Only a super admin can grant or revoke the superadmin role')


class TenantSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tenant
        fields = ['id', 'name', 'subdomain']


class UserSerializer(serializers.ModelSerializer):
    firstName = serializers.CharField(source='first_name')
    lastName = serializers.CharField(source='last_name')
    mobileNumber = serializers.CharField(source='mobile_number')
    dateOfBirth = serializers.CharField(source='date_of_birth')
    profilePhoto = serializers.CharField(source='profile_photo', read_only=True)
    educationLevel = serializers.CharField(source='education_level')
    schoolCollege = serializers.CharField(source='school_college')
    yearOfStudy = serializers.CharField(source='year_of_study')
    tenantId = serializers.IntegerField(source='tenant_id', read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'username', 'firstName', 'lastName', 'email', 'mobileNumber',
            'gender', 'dateOfBirth', 'profilePhoto', 'educationLevel',
            'schoolCollege', 'yearOfStudy', 'role', 'tenantId',
        ]
        read_only_fields = ['id', 'role']


class UserUpdateSerializer(UserSerializer):
    """Profile update. Admins may also change the role of users in their tenant."""
    password = serializers.CharField(write_only=True, required=False, min_length=6)

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['password']
        read_only_fields = ['id', 'username']

    def validate_role(self, value):
        request = self.context.get('request')
        if request is None or not request.user.is_staff_role:
            raise serializers.ValidationError('Only administrators can change roles')
        current_role = self.instance.role if self.instance is not None else None
        if value != current_role:
            check_role_grant(request.user, value, current_role)
        return value

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        if password:
            instance.password = make_password(password)
        return super().update(instance, validated_data)


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, min_length=6)
    firstName = serializers.CharField(max_length=100)
    lastName = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    mobileNumber = serializers.CharField(max_length=30)
    gender = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)
    dateOfBirth = serializers.CharField(max_length=20)
    educationLevel = serializers.CharField(max_length=100)
    schoolCollege = serializers.CharField(max_length=255)
    yearOfStudy = serializers.CharField(max_length=50)
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, required=False)
    tenantId = serializers.IntegerField(required=False)
    profilePhoto = serializers.ImageField(required=False, allow_null=True)

    def validate_username(self, value):
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError('Username already exists')
        return value

    def validate_tenantId(self, value):
        if not Tenant.objects.filter(id=value).exists():
            raise serializers.ValidationError('Invalid tenant ID')
        return value

    def validate_profilePhoto(self, value):
        if value is None:
            return value
        if value.content_type not in ALLOWED_PHOTO_TYPES:
            raise serializers.ValidationError('Profile photo must be a JPEG or PNG image')
        if value.size > settings.PROFILE_PHOTO_MAX_BYTES:
            raise serializers.ValidationError('Profile photo must be 2MB or smaller')
        return value

    def validate(self, attrs):
        request = self.context.get('request')
        requester = request.user if request else None
        if requester is None or not requester.is_authenticated or requester.is_superadmin:
            return attrs

        # Signed-in callers create accounts in their own tenant only
        tenant_id = attrs.get('tenantId')
        if tenant_id is not None and tenant_id != requester.tenant_id:
            raise PermissionDenied('Access denied to this tenant')
        attrs['tenantId'] = requester.tenant_id

        if attrs.get('role') and requester.is_staff_role:
            check_role_grant(requester, attrs['role'])
        return attrs

    def _save_photo(self, photo):
        """Store the photo under uploads/profiles/ and return its path relative to the uploads root."""
        ext = os.path.splitext(photo.name)[1].lower()
        filename = f"profile-{int(time.time() * 1000)}-{random.randint(0, 10 ** 9)}{ext}"
        return default_storage.save(os.path.join('profiles', filename), photo)

    def create(self, validated_data):
        request = self.context.get('request')
        requester = request.user if request else None

        # The very first account of a deployment bootstraps the admin role
        if not User.objects.exists():
            role = User.ROLE_ADMIN
        elif requester is not None and requester.is_authenticated and requester.is_staff_role:
            role = validated_data.get('role') or User.ROLE_STUDENT
        else:
            role = User.ROLE_STUDENT

        tenant_id = validated_data.get('tenantId')
        tenant = Tenant.objects.get(id=tenant_id) if tenant_id else Tenant.default()

        photo = validated_data.get('profilePhoto')
        photo_path = self._save_photo(photo) if photo else None

        return User.objects.create(
            username=validated_data['username'],
            password=make_password(validated_data['password']),
            first_name=validated_data['firstName'],
            last_name=validated_data['lastName'],
            email=validated_data['email'],
            mobile_number=validated_data['mobileNumber'],
            gender=validated_data.get('gender') or None,
            date_of_birth=validated_data['dateOfBirth'],
            profile_photo=photo_path,
            education_level=validated_data['educationLevel'],
            school_college=validated_data['schoolCollege'],
            year_of_study=validated_data['yearOfStudy'],
            role=role,
            tenant=tenant,
        )


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)
