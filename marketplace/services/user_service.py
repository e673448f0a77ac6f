"""Accounts and provider approval."""

import logging
from typing import Optional

from ..exceptions import ConflictError, InvalidTransitionError, UserNotFoundError, ValidationError
from ..models.user import User
from ..rules.transitions import can_change_provider_status
from ..utils.constants import ProviderStatus, Role
from .common import parse_status, require_text, user_from_dict

logger = logging.getLogger(__name__)


class UserService:
    """Register accounts, and let admins approve or reject provider applications."""

    def __init__(self, store):
        self.store = store

    def register_user(self, name: str, email: str, role=Role.USER) -> User:
        """
        Create an account. Providers start with approval status 'pending';
        admins cannot sign themselves up.
        """
        name = require_text(name, "name")
        email = require_text(email, "email").lower()
        role = parse_status(Role, role)
        if role == Role.ADMIN:
            raise ValidationError("Role must be 'user' or 'provider'")

        status = ProviderStatus.PENDING if role == Role.PROVIDER else None
        try:
            uid = self.store.create_user(name, email, role, provider_status=status)
        except ValueError as e:
            raise ValidationError(str(e)) from None
        return self.get_user(uid)

    def get_user(self, user_id: str) -> User:
        user = user_from_dict(self.store.get_user(user_id))
        if user is None:
            raise UserNotFoundError()
        return user

    def list_providers(self, status: Optional[str] = None) -> list[User]:
        """Provider accounts, optionally filtered by approval status ('all' = no filter)."""
        wanted = None
        if status and status != "all":
            wanted = parse_status(ProviderStatus, status).value
        rows = self.store.find_users(
            lambda u: (u.get("role") == Role.PROVIDER.value or u.get("provider_status") is not None)
            and (wanted is None or u.get("provider_status") == wanted)
        )
        return [User.from_dict(u) for u in rows]

    def change_provider_status(self, provider_id: str, requested_status) -> User:
        """
        Admin decision on a provider application. The caller must already be
        authenticated as admin; that check belongs to the boundary.
        """
        requested = parse_status(ProviderStatus, requested_status)

        user = user_from_dict(self.store.get_user(provider_id))
        if user is None or (user.role != Role.PROVIDER and user.provider_status is None):
            raise UserNotFoundError("Provider not found")

        current = user.provider_status or ProviderStatus.PENDING
        if not can_change_provider_status(current, requested):
            raise InvalidTransitionError(
                f"Invalid provider status transition: {current.value} -> {requested.value}")

        expected = {"provider_status": user.provider_status.value if user.provider_status else None}
        updates = {"provider_status": requested}
        if requested == ProviderStatus.APPROVED:
            updates["role"] = Role.PROVIDER
        row = self.store.update_user_if(user.user_id, expected, updates)
        if row is None:
            raise ConflictError("Provider status changed in the meantime, please retry")

        logger.info("Provider %s: %s -> %s", user.user_id, current.value, requested.value)
        return User.from_dict(row)

    def approve_provider(self, provider_id: str) -> User:
        return self.change_provider_status(provider_id, ProviderStatus.APPROVED)

    def reject_provider(self, provider_id: str) -> User:
        return self.change_provider_status(provider_id, ProviderStatus.REJECTED)
