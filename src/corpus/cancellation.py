"""Cooperative cancellation shared by ingestion and retrieval."""

import asyncio
from typing import Optional


def raise_if_cancelled(cancellation: Optional[asyncio.Event]) -> None:
    """Raise CancelledError if the caller has set the cancellation event.

    Checked before each network call so that a cancelled batch stops
    between pages instead of in the middle of one.
    """
    if cancellation is not None and cancellation.is_set():
        raise asyncio.CancelledError("Operation cancelled by caller")
