"""FakeProfileStore — in-memory ProfileStore keyed by username."""

from git_eval.profile.domain.profile import UserProfile


class FakeProfileStore:
    def __init__(self) -> None:
        self.profiles: dict[str, UserProfile] = {}

    async def save_profile(self, profile: UserProfile) -> UserProfile:
        existing = self.profiles.get(profile.username)
        profile_id = existing.id if existing else f"profile-{len(self.profiles) + 1}"
        saved = profile.model_copy(update={"id": profile_id})
        self.profiles[profile.username] = saved
        return saved

    async def get_profile(self, username: str) -> UserProfile | None:
        return self.profiles.get(username)
