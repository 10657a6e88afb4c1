"""
Accounts models - tenants and the users that belong to them
"""
from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.db import models
from django.utils import timezone


DEFAULT_TENANT_NAME = 'Central University'
DEFAULT_TENANT_SUBDOMAIN = 'central'


class Tenant(models.Model):
    """An institution. Every course, exam, batch and user is scoped to one tenant."""
    name = models.CharField(max_length=255, db_column='name')
    subdomain = models.CharField(max_length=100, unique=True, db_column='subdomain')
    created_at = models.DateTimeField(default=timezone.now, db_column='created_at')

    class Meta:
        db_table = 'tenants'
        ordering = ['id']

    def __str__(self):
        return self.name

    @classmethod
    def default(cls):
        tenant, _ = cls.objects.get_or_create(
            subdomain=DEFAULT_TENANT_SUBDOMAIN,
            defaults={'name': DEFAULT_TENANT_NAME},
        )
        return tenant


class UserManager(BaseUserManager):
    use_in_migrations = True

    def create_user(self, username, password=None, **extra_fields):
        if not username:
            raise ValueError('username is required')
        if 'tenant' not in extra_fields and 'tenant_id' not in extra_fields:
            extra_fields['tenant'] = Tenant.default()
        user = self.model(username=username, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        extra_fields.setdefault('role', User.ROLE_SUPERADMIN)
        return self.create_user(username, password, **extra_fields)


class User(AbstractBaseUser):
    """LMS user. Password is stored as a salted hash by Django's hashers."""
    ROLE_STUDENT = 'student'
    ROLE_ADMIN = 'admin'
    ROLE_SUPERADMIN = 'superadmin'
    ROLE_CHOICES = [
        (ROLE_STUDENT, 'student'),
        (ROLE_ADMIN, 'admin'),
        (ROLE_SUPERADMIN, 'superadmin'),
    ]

    username = models.CharField(max_length=150, unique=True, db_column='username')
    first_name = models.CharField(max_length=100, db_column='first_name')
    last_name = models.CharField(max_length=100, db_column='last_name')
    email = models.EmailField(db_column='email')
    mobile_number = models.CharField(max_length=30, db_column='mobile_number')
    gender = models.CharField(max_length=20, blank=True, null=True, db_column='gender')
    date_of_birth = models.CharField(max_length=20, db_column='date_of_birth')
    profile_photo = models.CharField(max_length=255, blank=True, null=True, db_column='profile_photo')
    education_level = models.CharField(max_length=100, db_column='education_level')
    school_college = models.CharField(max_length=255, db_column='school_college')
    year_of_study = models.CharField(max_length=50, db_column='year_of_study')
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_STUDENT, db_column='role')
    tenant = models.ForeignKey(Tenant, on_delete=models.PROTECT, related_name='users', db_column='tenant_id')
    is_active = models.BooleanField(default=True, db_column='is_active')
    date_joined = models.DateTimeField(default=timezone.now, db_column='date_joined')

    objects = UserManager()

    USERNAME_FIELD = 'username'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = ['email']

    class Meta:
        db_table = 'users'
        ordering = ['id']

    def __str__(self):
        return self.username

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    @property
    def is_superadmin(self):
        return self.role == self.ROLE_SUPERADMIN

    @property
    def is_staff_role(self):
        """Admins and super admins see every course of their tenant."""
        return self.role in (self.ROLE_ADMIN, self.ROLE_SUPERADMIN)
