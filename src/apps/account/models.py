from django.contrib.auth.base_user import AbstractBaseUser
from django.db import models

from account import managers
from core.models import TimestampedModel
from core.utils.constants import RoleSlug


class Role(TimestampedModel):
    name = models.CharField(max_length=80)
    slug = models.CharField(max_length=50, unique=True, choices=RoleSlug.choices)

    def __str__(self) -> str:
        return f"{self.name} ({self.slug})"


class User(AbstractBaseUser, TimestampedModel):
    first_name = models.CharField(max_length=60)
    last_name = models.CharField(max_length=60, blank=True, default="")

    username = models.CharField(max_length=150, unique=True)
    phone = models.CharField(max_length=15, unique=True, null=True, blank=True)
    email = models.EmailField(unique=True)
    department = models.ForeignKey(
        "facility.Department",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="members",
    )

    roles = models.ManyToManyField(
        Role, through="UserRole", related_name="users", blank=True
    )

    # For Django Admin
    is_staff = models.BooleanField(default=False)
    is_superuser = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)

    USERNAME_FIELD = "username"
    REQUIRED_FIELDS = ["first_name", "email"]

    objects = managers.UserManager()

    def __str__(self):
        return f"{self.first_name} (@{self.get_username()})"

    @property
    def display_name(self) -> str:
        full_name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full_name or self.username

    def get_navigation_title(self):
        return self.display_name

    def has_perm(self, perm, obj=None):
        return self.is_superuser

    def has_module_perms(self, app_label):
        return self.is_superuser

    def has_role(self, *slugs: str) -> bool:
        if self.is_superuser:
            return True
        return self.roles.filter(slug__in=slugs).exists()


class UserRole(TimestampedModel):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="user_roles")
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name="user_roles")

    class Meta:
        unique_together = ("user", "role")

    def __str__(self) -> str:
        return f"{self.user} -> {self.role}"
