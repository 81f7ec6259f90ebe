"""Profile lookups and persistence interface."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from nutriscan.domain.profiles import ProfileRecord


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> ProfileRecord | None:
        """Return the profile for a user, if present."""

    def update_profile(self, user_id: UUID, fields: dict[str, object]) -> None:
        """Apply a partial update to a user's profile row."""


class ProfileNotFoundError(LookupError):
    """Raised when a user has no profile row."""


@dataclass
class ProfileService:
    """Application service for reading profiles."""

    repository: ProfileRepository

    def get_profile(self, user_id: UUID) -> ProfileRecord:
        """Return the user's profile or raise ProfileNotFoundError."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError(str(user_id))
        return profile

    def needs_onboarding(self, user_id: UUID) -> bool:
        """Return True until onboarding has been completed."""
        return not self.get_profile(user_id).onboarding_complete
