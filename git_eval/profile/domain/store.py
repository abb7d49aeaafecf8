"""ProfileStore Protocol — persistence port for UserProfiles."""

from typing import Protocol

from git_eval.profile.domain.profile import UserProfile


class ProfileStore(Protocol):
    async def save_profile(self, profile: UserProfile) -> UserProfile:
        """Insert or replace the profile for ``profile.username``; return it with its id."""
        ...

    async def get_profile(self, username: str) -> UserProfile | None: ...
