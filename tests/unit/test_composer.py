"""Unit tests for the digest composer."""

from __future__ import annotations

from standup.digest.composer import DIGEST_TITLE, compose_digest, order_entries
from tests.helpers.standup_doubles import at, make_entry


class TestComposeDigest:
    """Tests for compose_digest."""

    def test_returns_none_for_no_entries(self) -> None:
        """An empty snapshot yields the nothing-to-send signal."""
        assert compose_digest([]) is None

    def test_renders_title_and_sections(self) -> None:
        """Each entry becomes a titled section with the three fields."""
        entry = make_entry(
            "u1", "Ada", did="Wrote docs", plan="Review PRs", blockers="None"
        )

        text = compose_digest([entry])

        assert text == (
            f"{DIGEST_TITLE}\n"
            "\n"
            "## Ada\n"
            "**Did:** Wrote docs\n"
            "**Plan:** Review PRs\n"
            "**Blockers:** None\n"
        )

    def test_sections_are_ordered_by_display_name(self) -> None:
        """Sections appear in case-insensitive display-name order."""
        entries = [
            make_entry("u1", "zed"),
            make_entry("u2", "Ada"),
            make_entry("u3", "bob"),
        ]

        text = compose_digest(entries)

        assert text is not None
        positions = [text.index(f"## {name}") for name in ("Ada", "bob", "zed")]
        assert positions == sorted(positions), "sections should be name-ordered"

    def test_fields_are_not_escaped_or_truncated(self) -> None:
        """Markdown and long text pass through unchanged."""
        long_text = "x" * 5000
        entry = make_entry("u1", "Ada", did="**already bold**", plan=long_text)

        text = compose_digest([entry])

        assert text is not None
        assert "**Did:** **already bold**" in text, "markdown should pass through"
        assert long_text in text, "long fields should not be truncated"

    def test_same_entries_in_any_order_compose_identically(self) -> None:
        """Output depends only on the set of entries."""
        a = make_entry("u1", "Ada")
        b = make_entry("u2", "Bob")

        assert compose_digest([a, b]) == compose_digest([b, a])


class TestOrderEntries:
    """Tests for order_entries."""

    def test_keeps_newest_entry_per_user(self) -> None:
        """Duplicate user identities collapse to the newest entry."""
        older = make_entry("u1", "Ada", did="old", timestamp=at(9, 0))
        newer = make_entry("u1", "Ada", did="new", timestamp=at(10, 0))

        ordered = order_entries([older, newer])

        assert [e.did for e in ordered] == ["new"], "expected only the newest"

    def test_ties_on_display_name_break_by_user_id(self) -> None:
        """Members sharing a display name are ordered by identity."""
        entries = [make_entry("u2", "Sam"), make_entry("u1", "Sam")]

        ordered = order_entries(entries)

        assert [e.user_id for e in ordered] == ["u1", "u2"]
