"""
Best-effort resolution of related-log titles.

A log stores only the ids of the logs it links to. Before a log is shown
or searched, each id is looked up and replaced by the linked log's title,
or by a placeholder when the link cannot be resolved.
"""

from collections.abc import Callable, Iterable

from mindlog.errors import BackendUnavailable, PermissionDenied, RecordNotFound
from mindlog.schemas import LogRecord
from mindlog.utils.logger import get_logger

logger = get_logger(__name__)

UNTITLED = "Untitled"
DELETED_OR_UNKNOWN = "Deleted/Unknown"
TITLE_UNAVAILABLE = "Title Unavailable"

PLACEHOLDER_TITLES = frozenset({UNTITLED, DELETED_OR_UNKNOWN, TITLE_UNAVAILABLE})

LogLookup = Callable[[str], LogRecord | None]


def resolve_related_titles(related_ids: Iterable[str], lookup: LogLookup) -> list[str]:
    """
    Look up the title of every related log.

    Blank ids are skipped. A missing log becomes ``"Deleted/Unknown"``, a log
    with a blank title becomes ``"Untitled"`` and a lookup that fails
    because the backend is down or access is denied becomes
    ``"Title Unavailable"``.

    Args:
        related_ids: Ids of the linked logs
        lookup: Callable returning the log for an id, or None if it does not exist

    Returns:
        One title or placeholder per non-blank id, in order
    """
    titles: list[str] = []
    for related_id in related_ids:
        if not related_id.strip():
            continue
        try:
            related = lookup(related_id)
        except RecordNotFound:
            related = None
        except (BackendUnavailable, PermissionDenied) as e:
            logger.warning(
                f"Could not resolve related log {related_id}: {e.message}",
                extra={"context": {"related_id": related_id, "kind": e.kind}},
            )
            titles.append(TITLE_UNAVAILABLE)
            continue

        if related is None:
            titles.append(DELETED_OR_UNKNOWN)
        else:
            titles.append(related.title.strip() or UNTITLED)
    return titles


def with_related_titles(log: LogRecord, lookup: LogLookup) -> LogRecord:
    """Return a copy of ``log`` with ``related_log_titles`` freshly resolved."""
    return log.model_copy(
        update={"related_log_titles": resolve_related_titles(log.related_log_ids, lookup)}
    )


def related_title_at(log: LogRecord, index: int) -> str:
    """
    Return the cached title of the ``index``-th non-blank related id.

    Titles are resolved for non-blank ids only, so ``index`` counts those.
    The title list may be shorter than the id list, in which case the
    placeholder for an unresolved title is returned.
    """
    if 0 <= index < len(log.related_log_titles):
        return log.related_log_titles[index]
    return TITLE_UNAVAILABLE
