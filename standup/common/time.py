"""Common time utilities."""

from __future__ import annotations

import datetime as dt


def localnow() -> dt.datetime:
    """Return an aware timestamp in the host's local timezone."""
    return dt.datetime.now().astimezone()
