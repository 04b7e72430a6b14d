"""Tests for core.search module."""

import pytest

from mindlog.core import search_logs
from mindlog.schemas import LogRecord


def _log(
    log_id: str,
    title: str,
    description: str | None = "",
    related_ids: list[str] | None = None,
    related_titles: list[str] | None = None,
) -> LogRecord:
    return LogRecord(
        id=log_id,
        title=title,
        description=description,
        related_log_ids=related_ids or [],
        related_log_titles=related_titles or [],
    )


@pytest.fixture
def fruit_logs() -> list[LogRecord]:
    """Apple, Banana (linked to Apple) and Cherry."""
    return [
        _log("A", "Apple Pie"),
        _log("B", "Banana", related_ids=["A"], related_titles=["Apple Pie"]),
        _log("C", "Cherry"),
    ]


def _ids(logs: list[LogRecord]) -> list[str]:
    return [log.id for log in logs]


class TestEmptyQuery:
    """Tests for queries that are empty after trimming."""

    def test_empty_query_returns_all(self, fruit_logs: list[LogRecord]) -> None:
        """Test that an empty query returns every log in input order."""
        assert search_logs("", fruit_logs) == fruit_logs

    def test_whitespace_query_returns_all(self, fruit_logs: list[LogRecord]) -> None:
        """Test that a whitespace-only query is treated as empty."""
        assert search_logs("   \t ", fruit_logs) == fruit_logs

    def test_empty_query_on_empty_input(self) -> None:
        """Test empty query over no logs."""
        assert search_logs("", []) == []


class TestDirectMatches:
    """Tests for the direct-match pass."""

    def test_title_match_and_linked_log(self, fruit_logs: list[LogRecord]) -> None:
        """Test the apple scenario: A matches directly, B via its link to A."""
        assert _ids(search_logs("apple", fruit_logs)) == ["A", "B"]

    def test_no_match(self, fruit_logs: list[LogRecord]) -> None:
        """Test a query nothing matches."""
        assert search_logs("nomatch", fruit_logs) == []

    def test_case_insensitive(self, fruit_logs: list[LogRecord]) -> None:
        """Test that matching ignores case on both sides."""
        assert _ids(search_logs("BANANA", fruit_logs)) == ["B"]

    def test_query_is_trimmed(self, fruit_logs: list[LogRecord]) -> None:
        """Test that surrounding whitespace is ignored."""
        assert _ids(search_logs("  cherry  ", fruit_logs)) == ["C"]

    def test_description_match(self) -> None:
        """Test matching on the description."""
        logs = [_log("A", "Notes", description="Thoughts about gardening")]

        assert _ids(search_logs("garden", logs)) == ["A"]

    def test_missing_description(self) -> None:
        """Test that a None description is treated as empty."""
        logs = [_log("A", "Notes", description=None), _log("B", "Garden")]

        assert _ids(search_logs("garden", logs)) == ["B"]

    def test_substring_not_tokens(self) -> None:
        """Test plain substring containment across word boundaries."""
        logs = [_log("A", "pineapple")]

        assert _ids(search_logs("eapp", logs)) == ["A"]

    def test_result_elements_are_input_objects(self, fruit_logs: list[LogRecord]) -> None:
        """Test that results are the same objects, not copies."""
        results = search_logs("apple", fruit_logs)

        assert results[0] is fruit_logs[0]
        assert results[1] is fruit_logs[1]


class TestIndirectMatches:
    """Tests for the indirect-match pass."""

    def test_related_title_match(self) -> None:
        """Test a log whose cached related title contains the query."""
        logs = [
            _log("X", "Dessert ideas", related_ids=["gone"], related_titles=["Apple crumble"]),
        ]

        assert _ids(search_logs("apple", logs)) == ["X"]

    def test_related_title_is_case_insensitive(self) -> None:
        """Test that related titles are lowercased before matching."""
        logs = [_log("X", "Other", related_ids=["Z"], related_titles=["APPLE"])]

        assert _ids(search_logs("apple", logs)) == ["X"]

    def test_direct_matches_come_first(self) -> None:
        """Test that an earlier indirect match is placed after later direct ones."""
        logs = [
            _log("B", "Banana", related_ids=["A"]),
            _log("A", "Apple"),
            _log("D", "Apple juice"),
        ]

        assert _ids(search_logs("apple", logs)) == ["A", "D", "B"]

    def test_no_chaining_through_indirect_matches(self) -> None:
        """Test that a log linked only to an indirect match is not included."""
        logs = [
            _log("A", "Apple"),
            _log("B", "Banana", related_ids=["A"]),
            _log("C", "Cherry", related_ids=["B"]),
        ]

        assert _ids(search_logs("apple", logs)) == ["A", "B"]

    def test_no_chaining_regardless_of_order(self) -> None:
        """Test that indirect matches found earlier in the pass do not qualify others."""
        logs = [
            _log("C", "Cherry", related_ids=["B"]),
            _log("B", "Banana", related_ids=["A"]),
            _log("A", "Apple"),
        ]

        assert _ids(search_logs("apple", logs)) == ["A", "B"]

    def test_dangling_related_id(self) -> None:
        """Test that links to unknown ids neither match nor fail."""
        logs = [_log("A", "Apple"), _log("B", "Banana", related_ids=["missing"])]

        assert _ids(search_logs("apple", logs)) == ["A"]

    def test_titles_shorter_than_ids(self) -> None:
        """Test logs whose title list is shorter than the id list."""
        logs = [
            _log("A", "Apple"),
            _log("B", "Banana", related_ids=["Z", "A"], related_titles=["Zucchini"]),
        ]

        assert _ids(search_logs("apple", logs)) == ["A", "B"]


class TestResultProperties:
    """Tests for general properties of the result."""

    def test_duplicate_ids_appear_once(self) -> None:
        """Test that a duplicated record is returned a single time."""
        apple = _log("A", "Apple")
        logs = [apple, _log("A", "Apple again"), _log("B", "Banana", related_ids=["A"])]

        results = search_logs("apple", logs)

        assert _ids(results) == ["A", "B"]
        assert results[0] is apple

    def test_no_fabrication(self, fruit_logs: list[LogRecord]) -> None:
        """Test that every result comes from the input."""
        for query in ["a", "an", "pie", "cherry", "zzz"]:
            results = search_logs(query, fruit_logs)
            assert all(any(r is log for log in fruit_logs) for r in results)
            assert len(_ids(results)) == len(set(_ids(results)))

    def test_non_direct_results_satisfy_indirect_condition(self) -> None:
        """Test that every non-direct result is explained by a link or related title."""
        logs = [
            _log("1", "Alpha", related_ids=["2"], related_titles=["Beta"]),
            _log("2", "Beta", description="second letter"),
            _log("3", "Gamma", related_ids=["9"], related_titles=["Beta blocker"]),
            _log("4", "Delta", related_ids=["3"], related_titles=["Gamma"]),
        ]
        query = "beta"

        results = search_logs(query, logs)
        direct_ids = {
            log.id
            for log in logs
            if query in log.title.lower() or query in (log.description or "").lower()
        }

        assert _ids(results) == ["2", "1", "3"]
        for log in results:
            if log.id in direct_ids:
                continue
            assert any(rid in direct_ids for rid in log.related_log_ids) or any(
                query in title.lower() for title in log.related_log_titles
            )

    def test_input_not_mutated(self, fruit_logs: list[LogRecord]) -> None:
        """Test that the input sequence is left untouched."""
        before = list(fruit_logs)

        search_logs("apple", fruit_logs)

        assert fruit_logs == before
