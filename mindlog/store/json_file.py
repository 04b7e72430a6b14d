"""JSON-file document store.

Persists the in-memory collections to a single JSON file after every
write. The file layout is::

    {
      "logs": {"<log_id>": {...}},
      "comments": {"<log_id>": {"<comment_id>": {...}}},
      "likes": {"<user_id>": {"<log_id>": {...}}}
    }
"""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from mindlog.errors import BackendUnavailable
from mindlog.schemas import CommentEntry, LikedLogEntry, LogRecord
from mindlog.utils.logger import get_logger

from .memory import InMemoryDocumentStore

logger = get_logger(__name__)


class JSONFileDocumentStore(InMemoryDocumentStore):
    """Document store persisted to a JSON file.

    The whole file is loaded on construction; a missing file starts an empty
    store. Each write rewrites the file atomically.

    Attributes:
        path: Location of the JSON file
    """

    def __init__(self, path: Path) -> None:
        """Initialize the store and load existing data.

        Args:
            path: Path to the JSON data file

        Raises:
            BackendUnavailable: If the file exists but cannot be read or parsed
        """
        super().__init__()
        self.path = path
        if self.path.exists():
            self._load()

    def _load(self) -> None:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)

            self._logs = {
                log_id: LogRecord.model_validate(raw)
                for log_id, raw in data.get("logs", {}).items()
            }
            self._comments = {
                log_id: {
                    comment_id: CommentEntry.model_validate(raw)
                    for comment_id, raw in comments.items()
                }
                for log_id, comments in data.get("comments", {}).items()
            }
            self._likes = {
                user_id: {
                    log_id: LikedLogEntry.model_validate(raw) for log_id, raw in likes.items()
                }
                for user_id, likes in data.get("likes", {}).items()
            }
        except (OSError, json.JSONDecodeError, ValidationError, AttributeError) as e:
            logger.error(f"Failed to load data file {self.path}: {e}")
            raise BackendUnavailable(f"Invalid data file {self.path}: {e}") from e

        logger.info(
            f"Loaded {len(self._logs)} logs",
            extra={"context": {"path": str(self.path)}},
        )

    def _dump(self) -> dict[str, Any]:
        return {
            "logs": {
                log_id: log.model_dump(mode="json") for log_id, log in self._logs.items()
            },
            "comments": {
                log_id: {cid: c.model_dump(mode="json") for cid, c in comments.items()}
                for log_id, comments in self._comments.items()
            },
            "likes": {
                user_id: {lid: like.model_dump(mode="json") for lid, like in likes.items()}
                for user_id, likes in self._likes.items()
            },
        }

    def _changed(self) -> None:
        self.save()

    def save(self) -> None:
        """Write all collections to disk.

        Raises:
            BackendUnavailable: If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)

            # Write atomically (write to temp file, then rename)
            temp_file = self.path.with_suffix(".tmp")
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump(self._dump(), f, indent=2, ensure_ascii=False)

            temp_file.replace(self.path)
        except OSError as e:
            logger.error(f"Failed to save data file {self.path}: {e}")
            raise BackendUnavailable(f"Could not write data file {self.path}: {e}") from e
