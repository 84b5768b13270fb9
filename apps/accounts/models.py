from django.db import models
from django.contrib.auth.models import AbstractUser, BaseUserManager


class UserManager(BaseUserManager):
    """Phone-number based user manager"""

    use_in_migrations = True

    def create_user(self, phone, password=None, **extra_fields):
        """Create and save a regular User"""
        if not phone:
            raise ValueError('The phone field must be set')
        user = self.model(phone=phone.strip(), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, phone, password=None, **extra_fields):
        """Create and save a SuperUser"""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', User.ROLE_ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(phone, password, **extra_fields)


class User(AbstractUser):
    """Player or administrator, identified by phone number"""
    ROLE_USER = 'USER'
    ROLE_ADMIN = 'ADMIN'
    ROLES = (
        (ROLE_USER, 'User'),
        (ROLE_ADMIN, 'Administrator'),
    )

    phone = models.CharField(max_length=15, unique=True)
    username = models.CharField(max_length=150, unique=False, blank=True)
    name = models.CharField(max_length=100, blank=True)
    role = models.CharField(max_length=10, choices=ROLES, default=ROLE_USER)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'phone'
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        indexes = [
            models.Index(fields=['role'], name='accounts_us_role_6a2c0d_idx'),
        ]

    def __str__(self):
        return self.name or self.phone

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN
