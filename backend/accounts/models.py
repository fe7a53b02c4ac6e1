from django.contrib.auth.models import AbstractUser
from django.core.validators import RegexValidator
from django.db import models


class UsernameValidator(RegexValidator):
    """Custom validator that allows spaces in usernames."""
    regex = r'^[\w\s.@+-]+$'
    message = 'Enter a valid username. This value may contain letters, numbers, spaces, and @/./+/-/_ characters.'
    flags = 0


class User(AbstractUser):
    """
    Faculty account.
    Guides, panel members and admins are all users; whether a faculty member
    acts as guide or panel is decided per project, not stored here.
    """

    class Role(models.TextChoices):
        ADMIN = 'ADMIN', 'Admin'
        FACULTY = 'FACULTY', 'Faculty'

    username = models.CharField(
        max_length=150,
        unique=True,
        help_text='Required. 150 characters or fewer. Letters, numbers, spaces, and @/./+/-/_ characters.',
        validators=[UsernameValidator()],
        error_messages={
            'unique': 'A user with that username already exists.',
        },
    )
    employee_id = models.CharField(
        max_length=32,
        unique=True,
        null=True,
        blank=True,
        validators=[RegexValidator(r'^[A-Za-z0-9]+$', 'Please enter a valid employee ID')],
    )
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.FACULTY, db_index=True)
    school = models.CharField(max_length=100, blank=True, default='')
    department = models.CharField(max_length=100, blank=True, default='')

    def __str__(self):
        return self.username

    @property
    def is_portal_admin(self) -> bool:
        return self.role == self.Role.ADMIN or self.is_superuser

    @property
    def display_name(self) -> str:
        full = ' '.join([(self.first_name or '').strip(), (self.last_name or '').strip()]).strip()
        return full or self.username
