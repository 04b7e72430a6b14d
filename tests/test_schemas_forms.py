"""Tests for schemas.forms and schemas.log_record modules."""

import pytest
from pydantic import ValidationError

from mindlog.errors import ValidationFailed
from mindlog.schemas import (
    CommentForm,
    LogForm,
    LogRecord,
    parse_form,
    youtube_embed_url,
)
from mindlog.schemas.forms import MAX_SUPPORTING_ITEMS


def _form(**overrides: object) -> dict[str, object]:
    data: dict[str, object] = {"title": "Apple Pie", "description": "Grandma's recipe"}
    data.update(overrides)
    return data


class TestLogForm:
    """Tests for LogForm validation."""

    def test_valid_form(self) -> None:
        """Test a minimal valid form."""
        form = parse_form(LogForm, _form())

        assert form.title == "Apple Pie"
        assert form.is_public is False
        assert form.related_log_ids == []

    def test_title_required(self) -> None:
        """Test that a blank title is rejected after stripping."""
        with pytest.raises(ValidationFailed) as exc_info:
            parse_form(LogForm, _form(title="   "))

        assert "title" in exc_info.value.errors

    def test_title_too_long(self) -> None:
        """Test the 100 character title limit."""
        with pytest.raises(ValidationFailed) as exc_info:
            parse_form(LogForm, _form(title="x" * 101))

        assert "title" in exc_info.value.errors

    def test_description_too_long(self) -> None:
        """Test the 500 character description limit."""
        with pytest.raises(ValidationFailed) as exc_info:
            parse_form(LogForm, _form(description="x" * 501))

        assert "description" in exc_info.value.errors

    def test_caption_too_long(self) -> None:
        """Test the caption limit on supporting items."""
        with pytest.raises(ValidationFailed) as exc_info:
            parse_form(LogForm, _form(supporting_items=[{"caption": "x" * 201}]))

        assert "supporting_items.0.caption" in exc_info.value.errors

    def test_too_many_supporting_items(self) -> None:
        """Test that at most eight supporting items are accepted."""
        with pytest.raises(ValidationFailed) as exc_info:
            parse_form(LogForm, _form(supporting_items=[{"caption": "c"}] * 9))

        assert "supporting_items" in exc_info.value.errors

    def test_image_type_rejected(self) -> None:
        """Test that non-image URLs are rejected."""
        with pytest.raises(ValidationFailed) as exc_info:
            parse_form(LogForm, _form(main_image_url="https://cdn.example.com/file.gif"))

        messages = exc_info.value.errors["main_image_url"]
        assert messages == ["Only .jpg, .jpeg, .png and .webp formats are supported."]

    def test_encoded_storage_url_accepted(self) -> None:
        """Test a storage URL with an encoded path and query string."""
        url = "https://storage.example.com/o/logs%2F123_photo.PNG?alt=media"

        form = parse_form(LogForm, _form(main_image_url=url))

        assert form.main_image_url == url

    def test_related_ids_cleaned(self) -> None:
        """Test that blank and duplicate related ids are dropped in order."""
        form = parse_form(LogForm, _form(related_log_ids=["b", " ", "a", "b", ""]))

        assert form.related_log_ids == ["b", "a"]

    def test_youtube_link_validated(self) -> None:
        """Test that only YouTube video links are accepted."""
        with pytest.raises(ValidationFailed) as exc_info:
            parse_form(LogForm, _form(youtube_link="https://vimeo.com/123"))

        assert "youtube_link" in exc_info.value.errors

    def test_empty_youtube_link_is_none(self) -> None:
        """Test that an empty link is stored as None."""
        assert parse_form(LogForm, _form(youtube_link="")).youtube_link is None


class TestBuildImages:
    """Tests for LogForm.build_images."""

    def test_no_images(self) -> None:
        """Test a form without images or captions."""
        assert parse_form(LogForm, _form()).build_images() == []

    def test_main_and_supporting(self) -> None:
        """Test ordering: main image first, then non-empty supporting slots."""
        form = parse_form(
            LogForm,
            _form(
                main_image_url="https://cdn.example.com/main.jpg",
                main_caption="Main",
                supporting_items=[
                    {"image_url": "https://cdn.example.com/1.png", "caption": "One"},
                    {},
                    {"caption": "Caption only"},
                ],
            ),
        )

        images = form.build_images()

        assert [(i.url, i.is_main, i.caption) for i in images] == [
            ("https://cdn.example.com/main.jpg", True, "Main"),
            ("https://cdn.example.com/1.png", False, "One"),
            (None, False, "Caption only"),
        ]

    def test_first_image_promoted_to_main(self) -> None:
        """Test promotion when the main slot has no image."""
        form = parse_form(
            LogForm,
            _form(
                main_caption="Caption without image",
                supporting_items=[
                    {"caption": "no image"},
                    {"image_url": "https://cdn.example.com/2.webp"},
                ],
            ),
        )

        images = form.build_images()

        assert [i.is_main for i in images] == [False, False, True]
        assert images[2].url == "https://cdn.example.com/2.webp"

    def test_image_limit(self) -> None:
        """Test that a full form yields the main image plus every supporting image."""
        items = [{"image_url": f"https://cdn.example.com/{i}.jpg"} for i in range(8)]
        form = parse_form(
            LogForm,
            _form(main_image_url="https://cdn.example.com/main.jpg", supporting_items=items),
        )

        images = form.build_images()

        assert len(images) == 1 + MAX_SUPPORTING_ITEMS
        assert [image.is_main for image in images].count(True) == 1

    def test_tenth_image_rejected(self) -> None:
        """Test that a tenth image cannot be submitted."""
        items = [{"image_url": f"https://cdn.example.com/{i}.jpg"} for i in range(9)]

        with pytest.raises(ValidationFailed) as exc_info:
            parse_form(
                LogForm,
                _form(main_image_url="https://cdn.example.com/main.jpg", supporting_items=items),
            )

        assert "supporting_items" in exc_info.value.errors


class TestCommentForm:
    """Tests for CommentForm validation."""

    def test_valid_comment(self) -> None:
        """Test a valid comment is stripped."""
        assert parse_form(CommentForm, {"content": "  Nice!  "}).content == "Nice!"

    @pytest.mark.parametrize("content", ["", "   ", "x" * 1001])
    def test_invalid_comment(self, content: str) -> None:
        """Test empty and overlong comments."""
        with pytest.raises(ValidationFailed) as exc_info:
            parse_form(CommentForm, {"content": content})

        assert "content" in exc_info.value.errors


class TestYoutubeEmbedUrl:
    """Tests for youtube_embed_url function."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://youtu.be/abc123",
            "https://www.youtube.com/watch?v=abc123",
            "https://www.youtube.com/embed/abc123?start=5",
        ],
    )
    def test_supported_forms(self, url: str) -> None:
        """Test the supported link forms."""
        assert youtube_embed_url(url) == "https://www.youtube.com/embed/abc123"

    @pytest.mark.parametrize("url", ["", "not a url", "https://www.youtube.com/channel/x"])
    def test_unsupported(self, url: str) -> None:
        """Test links that are not video links."""
        assert youtube_embed_url(url) is None


class TestLogRecord:
    """Tests for LogRecord model."""

    def test_defaults(self) -> None:
        """Test default values."""
        log = LogRecord(id="A")

        assert log.title == ""
        assert log.is_public is False
        assert log.related_log_ids == []
        assert log.created_at.tzinfo is not None

    def test_immutable(self) -> None:
        """Test that records are frozen."""
        log = LogRecord(id="A", title="Apple")

        with pytest.raises(ValidationError):
            log.title = "Banana"  # type: ignore[misc]

    def test_visibility(self) -> None:
        """Test is_visible_to for owner, others and anonymous callers."""
        private = LogRecord(id="A", owner_id="u1")
        public = LogRecord(id="B", owner_id="u1", is_public=True)

        assert private.is_visible_to("u1")
        assert not private.is_visible_to("u2")
        assert not private.is_visible_to(None)
        assert public.is_visible_to(None)
