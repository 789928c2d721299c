from django.db import models
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):  # type: ignore

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError(_('The Email field must be set'))
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError(_('Superuser must have is_staff=True.'))
        if extra_fields.get('is_superuser') is not True:
            raise ValueError(_('Superuser must have is_superuser=True.'))

        return self.create_user(email, password, **extra_fields)


class BaseModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Role(models.TextChoices):
    PARENT = ('parent', 'Parent')
    COACH = ('coach', 'Coach')
    CLUB_ADMIN = ('club_admin', 'Club Admin')
    SUPER_ADMIN = ('super_admin', 'Super Admin')


# Lowest to highest.
ROLE_HIERARCHY = [Role.PARENT, Role.COACH, Role.CLUB_ADMIN, Role.SUPER_ADMIN]


def role_rank(role: str) -> int:
    try:
        return ROLE_HIERARCHY.index(role)
    except ValueError:
        return -1


class User(AbstractUser):
    username = None
    email = models.EmailField(
        _('email address'),
        unique=True,
        error_messages={
            'unique': _("A user with that email already exists."),
        },
    )

    objects = UserManager()  # type: ignore

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name', 'last_name']

    class Meta(AbstractUser.Meta):  # type: ignore
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or self.email

    def has_minimum_role(self, minimum_role: str, club_id: int | None = None) -> bool:
        """
        True when any role grant of this user reaches ``minimum_role``.

        With ``club_id`` the grant must belong to that club; super admins are
        global and always match.
        """
        minimum_rank = role_rank(minimum_role)
        for grant in self.role_grants.all():  # type: ignore
            if grant.role == Role.SUPER_ADMIN:
                return True
            if club_id is not None and grant.club_id != club_id:
                continue
            if role_rank(grant.role) >= minimum_rank:
                return True
        return False

    def is_super_admin(self) -> bool:
        return self.role_grants.filter(role=Role.SUPER_ADMIN).exists()  # type: ignore

    def coach_club_ids(self) -> list[int]:
        """Clubs where this user holds coach or a higher club-scoped role."""
        return list(
            self.role_grants.filter(role__in=[Role.COACH, Role.CLUB_ADMIN], club__isnull=False)  # type: ignore
            .values_list('club_id', flat=True)
        )

    def admin_club_ids(self) -> list[int]:
        return list(
            self.role_grants.filter(role=Role.CLUB_ADMIN, club__isnull=False)  # type: ignore
            .values_list('club_id', flat=True)
        )


class UserRole(BaseModel):
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='role_grants',
        verbose_name='User'
    )
    role = models.CharField(
        max_length=50,
        choices=Role.choices,
        verbose_name='Role'
    )
    club = models.ForeignKey(  # type: ignore
        'club.Club',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='role_grants',
        verbose_name='Club',
        help_text='Organization the role applies to. Empty only for super admins.'
    )

    class Meta:  # type: ignore
        db_table = 'user_roles'
        verbose_name = 'User Role'
        verbose_name_plural = 'User Roles'
        ordering = ['-created_at']
        unique_together = [['user', 'role', 'club']]

    def clean(self):
        if self.role != Role.SUPER_ADMIN and not self.club_id:
            raise ValidationError({
                'club': 'Only super admins may hold a role without a club.'
            })

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self):
        role_display = getattr(self, 'get_role_display', lambda: self.role)()
        club_display = self.club.name if self.club_id else 'All clubs'  # type: ignore
        return f"{self.user.email} - {role_display} ({club_display})"
