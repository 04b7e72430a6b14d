"""
Data schemas for Mindlog.

This module exposes the public API for the stored records and form inputs.
"""

from .forms import CommentForm, LogForm, SupportingItem, parse_form, youtube_embed_url
from .log_record import CommentEntry, ImageItem, LikedLogEntry, LogRecord, UserProfile

__all__ = [
    "LogRecord",
    "ImageItem",
    "CommentEntry",
    "LikedLogEntry",
    "UserProfile",
    "LogForm",
    "SupportingItem",
    "CommentForm",
    "parse_form",
    "youtube_embed_url",
]
