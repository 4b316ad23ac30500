import logging

from django.db import transaction

from account.models import Role, User, UserRole
from core.api.exceptions import DomainValidationError
from core.utils.constants import RoleSlug

logger = logging.getLogger(__name__)


class AccountService:
    """Role bookkeeping shared by the auth endpoints, admin tooling and tests."""

    @staticmethod
    def get_or_create_role(slug: str) -> Role:
        if slug not in RoleSlug.values:
            raise ValueError(f"Unknown role slug: {slug}")
        role, _ = Role.objects.get_or_create(
            slug=slug,
            defaults={"name": str(RoleSlug(slug).label)},
        )
        return role

    @classmethod
    @transaction.atomic
    def assign_roles(cls, user: User, *slugs: str) -> User:
        for slug in slugs:
            user.roles.add(cls.get_or_create_role(slug))
        logger.info(
            "Roles assigned: user_id=%s roles=%s",
            user.pk,
            ",".join(sorted(slugs)),
        )
        return user

    @staticmethod
    def role_claims(user: User) -> tuple[list[str], list[str]]:
        role_pairs = list(user.roles.order_by("slug").values_list("slug", "name"))
        role_slugs = [slug for slug, _ in role_pairs]
        role_titles = [name for _, name in role_pairs]
        if user.is_superuser and RoleSlug.ADMIN not in role_slugs:
            role_slugs.append(RoleSlug.ADMIN)
            role_titles.append(str(RoleSlug.ADMIN.label))
        return role_slugs, role_titles

    @classmethod
    @transaction.atomic
    def set_role(cls, user: User, slug: str) -> User:
        """Replace every role of ``user`` with the single role ``slug``."""
        role = cls.get_or_create_role(slug)
        UserRole.objects.filter(user=user).exclude(role=role).delete()
        user.roles.add(role)
        logger.info("Role set: user_id=%s role=%s", user.pk, slug)
        return user

    @classmethod
    @transaction.atomic
    def create_user(cls, *, data: dict, actor: User | None = None) -> User:
        payload = dict(data)
        role_slug = payload.pop("role", None) or RoleSlug.STAFF
        email = payload.pop("email").strip().lower()
        username = (payload.pop("username", "") or email).strip()
        password = payload.pop("password")
        if User.objects.filter(email__iexact=email).exists():
            raise DomainValidationError("User with this email already exists.")
        if User.objects.filter(username=username).exists():
            raise DomainValidationError("User with this username already exists.")

        user = User.objects.create_user(
            username, password=password, email=email, **payload
        )
        cls.set_role(user, role_slug)
        logger.info(
            "User created: user_id=%s role=%s actor_user_id=%s",
            user.pk,
            role_slug,
            getattr(actor, "pk", None),
        )
        return user

    @classmethod
    @transaction.atomic
    def update_user(cls, user: User, *, data: dict, actor: User | None = None) -> User:
        payload = dict(data)
        role_slug = payload.pop("role", None)
        password = payload.pop("password", None)

        if "email" in payload:
            payload["email"] = payload["email"].strip().lower()
            if (
                User.objects.filter(email__iexact=payload["email"])
                .exclude(pk=user.pk)
                .exists()
            ):
                raise DomainValidationError("User with this email already exists.")
        if actor is not None and actor.pk == user.pk and payload.get("is_active") is False:
            raise DomainValidationError("You cannot deactivate your own account.")

        for field_name, value in payload.items():
            setattr(user, field_name, value)
        if password:
            user.set_password(password)
        user.save()
        if role_slug:
            cls.set_role(user, role_slug)
        logger.info(
            "User updated: user_id=%s fields=%s actor_user_id=%s",
            user.pk,
            ",".join(sorted([*payload, *(["password"] if password else [])])),
            getattr(actor, "pk", None),
        )
        return user

    @staticmethod
    def group_by_department(users) -> list[dict]:
        """``[{"name": <department>, "users": [...]}]`` sorted by name, with
        users lacking a department collected last under ``name=None``."""
        grouped: dict[str, list] = {}
        unassigned = []
        for user in users:
            if user.department_id:
                grouped.setdefault(user.department.name, []).append(user)
            else:
                unassigned.append(user)
        groups = [{"name": name, "users": grouped[name]} for name in sorted(grouped)]
        if unassigned:
            groups.append({"name": None, "users": unassigned})
        return groups
