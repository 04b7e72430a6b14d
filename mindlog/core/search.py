"""
Related-log search.

Finds the logs that mention a query directly and the logs linked to those
direct matches. The search runs over an already-fetched snapshot and does
no I/O; related titles must be resolved by the caller beforehand.
"""

from collections.abc import Sequence

from mindlog.schemas import LogRecord


def search_logs(query: str, all_logs: Sequence[LogRecord]) -> list[LogRecord]:
    """
    Filter logs by a text query, following links one hop.

    Matching is case-insensitive substring containment. The result lists
    direct matches (query in title or description) first, then indirect
    matches: logs that link to a direct match, or whose cached related
    titles contain the query. Input order is kept inside each group and
    every id appears at most once.

    Args:
        query: Search text; surrounding whitespace is ignored
        all_logs: Snapshot of the logs to search

    Returns:
        The matching records (the same objects as in ``all_logs``). An empty
        query returns every log in input order.

    Example:
        >>> apple = LogRecord(id="A", title="Apple Pie")
        >>> banana = LogRecord(id="B", title="Banana", related_log_ids=["A"])
        >>> [log.id for log in search_logs("apple", [apple, banana])]
        ['A', 'B']
    """
    needle = query.strip().lower()
    if not needle:
        return list(all_logs)

    matched: list[LogRecord] = []
    seen_ids: set[str] = set()

    for log in all_logs:
        if log.id in seen_ids:
            continue
        if needle in log.title.lower() or needle in (log.description or "").lower():
            matched.append(log)
            seen_ids.add(log.id)

    # Indirect matches link to a direct match only, never to another indirect one
    direct_ids = frozenset(seen_ids)

    for log in all_logs:
        if log.id in seen_ids:
            continue
        linked_to_direct = any(related_id in direct_ids for related_id in log.related_log_ids)
        related_title_hit = any(needle in title.lower() for title in log.related_log_titles)
        if linked_to_direct or related_title_hit:
            matched.append(log)
            seen_ids.add(log.id)

    return matched
