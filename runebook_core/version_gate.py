"""Decide whether a remote dataset is newer than the local watermark."""

from __future__ import annotations


def should_refresh(remote_version: int, local_watermark: int | None = None) -> bool:
    """Return True iff ``remote_version`` is strictly newer than the watermark.

    An unset watermark counts as 0, so any positive remote version triggers
    the first refresh. Equal or older versions never do.
    """
    watermark = 0 if local_watermark is None else local_watermark
    return remote_version > watermark
