"""Admin upload/edit form: validation and mapping to the stored document."""
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from cineverse_catalog_service.catalog.schemas import ContentItem, ContentType
from cineverse_catalog_service.exceptions import FormValidationError


def split_csv(value: str | None) -> list[str]:
    """Split a comma-separated field into trimmed, non-empty parts."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class EpisodeForm(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    season_number: int = Field(..., ge=1)
    episode_number: int = Field(..., ge=1)
    episode_code: str = Field(..., min_length=1)
    title: str = Field(..., min_length=2)
    video_url: HttpUrl
    thumbnail_url: HttpUrl

    def to_document(self) -> dict:
        return {
            "seasonNumber": self.season_number,
            "episodeNumber": self.episode_number,
            "episodeCode": self.episode_code,
            "title": self.title,
            "videoUrl": str(self.video_url),
            "thumbnailUrl": str(self.thumbnail_url),
        }


class ContentForm(BaseModel):
    """
    Fields submitted by the admin upload/edit form.

    ``genre`` and ``tags`` arrive as comma-separated strings and are stored
    as lists. Numeric fields accept numeric strings.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: str = Field(..., min_length=2, max_length=100)
    description: str = Field(..., min_length=10)
    type: ContentType
    year: int = Field(..., ge=1900)
    rating: float | None = Field(None, ge=0, le=10)
    duration: str | None = None
    genre: str = ""
    tags: str = ""
    poster_url: HttpUrl
    thumbnail_url: HttpUrl
    hero_url: HttpUrl | None = None
    video_url: HttpUrl
    episodes: list[EpisodeForm] = Field(default_factory=list)

    @field_validator("rating", "duration", "hero_url", mode="before")
    @classmethod
    def empty_as_missing(cls, v):
        return _blank_to_none(v)

    @field_validator("genre", "tags", mode="before")
    @classmethod
    def join_lists(cls, v):
        # API clients may send lists instead of the comma-separated form value
        if isinstance(v, list):
            return ", ".join(str(part) for part in v)
        return v

    @field_validator("year")
    @classmethod
    def not_far_future(cls, v: int) -> int:
        max_year = datetime.now(UTC).year + 1
        if v > max_year:
            raise ValueError(f"Year must be {max_year} or earlier")
        return v

    def to_document(self, clear_blank: bool = False) -> dict:
        """
        Map the form to the persisted content document.

        Episodes are only kept for anime; movies always store an empty list.

        Args:
            clear_blank: Write blank optional fields as None so that merging
                the document into a stored one clears them
        """
        document = {
            "title": self.title,
            "description": self.description,
            "type": self.type,
            "year": self.year,
            "genre": split_csv(self.genre),
            "tags": split_csv(self.tags),
            "posterUrl": str(self.poster_url),
            "thumbnailUrl": str(self.thumbnail_url),
            "videoUrl": str(self.video_url),
            "episodes": [ep.to_document() for ep in self.episodes] if self.type == "anime" else [],
        }
        optional = {
            "rating": self.rating,
            "duration": self.duration,
            "heroUrl": str(self.hero_url) if self.hero_url is not None else None,
        }
        for key, value in optional.items():
            if value is not None or clear_blank:
                document[key] = value
        return document


def form_values_from_content(item: ContentItem) -> dict:
    """Initial edit-form values for an existing item (lists joined with ", ")."""
    values = item.to_document()
    values["genre"] = ", ".join(item.genre)
    values["tags"] = ", ".join(item.tags)
    values["episodes"] = [ep.model_dump(by_alias=True) for ep in item.episodes or []]
    return values


def _error_map(exc: ValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"]) or "form"
        errors.setdefault(path, error["msg"])
    return errors


def parse_content_form(payload: Any) -> ContentForm:
    """
    Validate raw form input.

    Raises:
        FormValidationError: With one message per invalid field
    """
    try:
        return ContentForm.model_validate(payload)
    except ValidationError as e:
        raise FormValidationError(_error_map(e)) from e
