"""
Form input schemas for Mindlog.

Wraps the pydantic models used by the log and comment form handlers and
turns pydantic validation errors into a field -> messages map.
"""

from pathlib import PurePosixPath
from typing import Any, TypeVar
from urllib.parse import parse_qs, unquote, urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from mindlog.errors import ValidationFailed
from mindlog.schemas.log_record import ImageItem

MAX_SUPPORTING_ITEMS = 8
ACCEPTED_IMAGE_SUFFIXES = frozenset({".jpg", ".jpeg", ".png", ".webp"})

FormT = TypeVar("FormT", bound=BaseModel)


def youtube_embed_url(url: str) -> str | None:
    """
    Derive the embeddable player URL for a YouTube link.

    Accepts ``youtu.be/<id>``, ``youtube.com/watch?v=<id>`` and
    ``youtube.com/embed/<id>`` forms.

    Args:
        url: Link as entered by the user

    Returns:
        ``https://www.youtube.com/embed/<id>`` or None if the link is not a video URL
    """
    if not url:
        return None
    parsed = urlparse(url)
    host = parsed.hostname or ""

    video_id: str | None = None
    if host == "youtu.be":
        video_id = parsed.path.lstrip("/") or None
    elif "youtube.com" in host and parsed.path == "/watch":
        video_id = parse_qs(parsed.query).get("v", [None])[0]
    elif "youtube.com" in host and parsed.path.startswith("/embed/"):
        video_id = parsed.path.split("/embed/", 1)[1].split("/")[0] or None

    return f"https://www.youtube.com/embed/{video_id}" if video_id else None


def _check_image_url(url: str | None) -> str | None:
    if url is None or url == "":
        return None
    suffix = PurePosixPath(unquote(urlparse(url).path)).suffix.lower()
    if suffix not in ACCEPTED_IMAGE_SUFFIXES:
        raise ValueError("Only .jpg, .jpeg, .png and .webp formats are supported.")
    return url


class SupportingItem(BaseModel):
    """One of the optional supporting image slots of a log."""

    image_url: str | None = Field(default=None)
    caption: str | None = Field(default=None, max_length=200)

    @field_validator("image_url")
    @classmethod
    def _validate_image(cls, value: str | None) -> str | None:
        return _check_image_url(value)


class LogForm(BaseModel):
    """
    Fields submitted when creating or editing a log.

    Attributes:
        title: Log title (1-100 characters)
        description: Log body (1-500 characters)
        main_image_url: Optional URL of the main image
        main_caption: Caption for the main image
        supporting_items: Up to eight supporting image slots
        related_log_ids: Ids of logs to link to
        youtube_link: Optional YouTube video link
        is_public: Whether the log is visible to everyone
    """

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    main_image_url: str | None = Field(default=None)
    main_caption: str | None = Field(default=None, max_length=200)
    supporting_items: list[SupportingItem] = Field(
        default_factory=list, max_length=MAX_SUPPORTING_ITEMS
    )
    related_log_ids: list[str] = Field(default_factory=list)
    youtube_link: str | None = Field(default=None)
    is_public: bool = Field(default=False)

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("main_image_url")
    @classmethod
    def _validate_main_image(cls, value: str | None) -> str | None:
        return _check_image_url(value)

    @field_validator("related_log_ids")
    @classmethod
    def _clean_related_ids(cls, value: list[str]) -> list[str]:
        # Blank ids dropped, duplicates removed, first occurrence wins
        seen: set[str] = set()
        cleaned: list[str] = []
        for related_id in value:
            related_id = related_id.strip()
            if related_id and related_id not in seen:
                seen.add(related_id)
                cleaned.append(related_id)
        return cleaned

    @field_validator("youtube_link")
    @classmethod
    def _validate_youtube_link(cls, value: str | None) -> str | None:
        if not value:
            return None
        if youtube_embed_url(value) is None:
            raise ValueError("Must be a YouTube video link.")
        return value

    def build_images(self) -> list[ImageItem]:
        """
        Assemble the image list stored on the log.

        The main slot comes first (caption-only when no image was given),
        followed by supporting slots that carry an image or a caption. If no
        main slot has an image, the first slot with an image is promoted.
        With one main slot and at most MAX_SUPPORTING_ITEMS supporting slots,
        a log carries at most nine images.
        """
        images: list[ImageItem] = []
        if self.main_image_url or self.main_caption:
            images.append(
                ImageItem(url=self.main_image_url, is_main=True, caption=self.main_caption or None)
            )

        for item in self.supporting_items:
            if item.image_url or item.caption:
                images.append(
                    ImageItem(url=item.image_url, is_main=False, caption=item.caption or None)
                )

        if images and not any(image.is_main and image.url for image in images):
            first = next((i for i, image in enumerate(images) if image.url), None)
            if first is not None:
                images = [
                    image.model_copy(update={"is_main": False}) if image.is_main else image
                    for image in images
                ]
                images[first] = images[first].model_copy(update={"is_main": True})

        return images


class CommentForm(BaseModel):
    """Fields submitted when commenting on a log."""

    content: str = Field(..., min_length=1, max_length=1000)

    model_config = ConfigDict(str_strip_whitespace=True)


def parse_form(form_cls: type[FormT], data: dict[str, Any]) -> FormT:
    """
    Validate raw form data into a form model.

    Args:
        form_cls: Form model class
        data: Raw submitted values

    Returns:
        Validated form instance

    Raises:
        ValidationFailed: With a map of dotted field path to messages
    """
    try:
        return form_cls.model_validate(data)
    except ValidationError as e:
        raise ValidationFailed(validation_errors(e)) from e


def validation_errors(error: ValidationError) -> dict[str, list[str]]:
    """Flatten a pydantic ValidationError into field -> messages."""
    errors: dict[str, list[str]] = {}
    for detail in error.errors():
        field = ".".join(str(part) for part in detail["loc"]) or "__root__"
        message = detail["msg"].removeprefix("Value error, ")
        errors.setdefault(field, []).append(message)
    return errors
