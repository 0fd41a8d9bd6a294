"""Catalog document shapes shared by repositories, services and blueprints."""
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ContentType = Literal["movie", "anime"]
Role = Literal["user", "admin"]

CONTENT_TYPES: tuple[str, ...] = ("movie", "anime")


class Episode(BaseModel):
    """One episode of a multi-part (anime) catalog item."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    season_number: int = Field(..., ge=1)
    episode_number: int = Field(..., ge=1)
    episode_code: str = ""
    title: str = ""
    video_url: str = ""
    thumbnail_url: str = ""

    @property
    def label(self) -> str:
        """Short season/episode label, e.g. ``1x3``."""
        return f"{self.season_number}x{self.episode_number}"


class ContentItem(BaseModel):
    """
    One catalog entry (movie or anime).

    Field names are snake_case in Python and camelCase in stored documents
    and JSON responses. Instances are immutable so derived lists can share
    them with the source snapshot.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    title: str
    description: str = ""
    type: ContentType
    genre: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    year: int
    rating: float | None = Field(None, ge=0, le=10)
    duration: str | None = None
    poster_url: str = ""
    thumbnail_url: str = ""
    hero_url: str | None = None
    video_url: str = ""
    episodes: list[Episode] | None = None

    @property
    def is_episodic(self) -> bool:
        """True when the item has episodes; ``video_url`` is then only a fallback."""
        return bool(self.episodes)

    @property
    def sort_rating(self) -> float:
        """Rating used for ordering; a missing rating counts as 0."""
        return self.rating if self.rating is not None else 0.0

    def episode_at(self, index: int | None) -> Episode | None:
        """Return the episode at ``index``, or None if out of range."""
        if index is None or not self.episodes:
            return None
        if 0 <= index < len(self.episodes):
            return self.episodes[index]
        return None

    def resolve_video(self, episode_index: int | None = None) -> str:
        """
        Pick the video to play.

        Args:
            episode_index: Zero-based episode index from the watch page query

        Returns:
            The episode's video URL when the index is valid, else ``video_url``
        """
        episode = self.episode_at(episode_index)
        if episode is not None and episode.video_url:
            return episode.video_url
        return self.video_url

    def to_document(self) -> dict:
        """Persisted shape (camelCase, without ``id``)."""
        return self.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class UserProfile(BaseModel):
    """Profile document stored at ``users/{uid}``."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    display_name: str | None = Field(None, alias="displayName")
    email: str | None = None
    photo_url: str | None = Field(None, alias="photoURL")
    role: Role = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)
