"""Markdown renderer for the daily standup digest.

Entries are already one-per-user, so composition only orders them and
renders one titled section per member. Field text is emitted exactly as
submitted; length limits and escaping are the transport's concern.

Sections are ordered by display name (case-insensitive), with the user
identity as a tie-breaker, so the output is deterministic for a given
set of entries.

Usage
-----
>>> from standup.digest.composer import compose_digest
>>> text = compose_digest(entries)
>>> if text is None:
...     pass  # nothing to send

"""

from __future__ import annotations

import typing as typ

from standup.digest.models import latest_per_user

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from standup.digest.models import ReportEntry

DIGEST_TITLE = "# Daily Standup Summary"


def order_entries(entries: cabc.Iterable[ReportEntry]) -> list[ReportEntry]:
    """Return ``entries`` in digest order.

    When more than one entry shares a user identity, only the newest is
    kept.
    """
    return sorted(
        latest_per_user(entries).values(),
        key=lambda entry: (entry.display_name.casefold(), entry.user_id),
    )


def _render_entry(lines: list[str], entry: ReportEntry) -> None:
    """Append the section for one member."""
    lines.append(f"## {entry.display_name}")
    lines.append(f"**Did:** {entry.did}")
    lines.append(f"**Plan:** {entry.plan}")
    lines.append(f"**Blockers:** {entry.blockers}")
    lines.append("")


def compose_digest(entries: cabc.Iterable[ReportEntry]) -> str | None:
    """Render ``entries`` as the digest message body.

    Parameters
    ----------
    entries
        Snapshot of pending entries.

    Returns
    -------
    str | None
        The Markdown digest, or ``None`` when there are no entries and
        nothing should be sent.

    """
    ordered = order_entries(entries)
    if not ordered:
        return None

    lines: list[str] = [DIGEST_TITLE, ""]
    for entry in ordered:
        _render_entry(lines, entry)
    return "\n".join(lines)
