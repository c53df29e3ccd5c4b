"""Helper utilities for audit logging."""

import re
import secrets
from datetime import UTC, datetime
from pathlib import Path

__all__ = ["generate_run_id"]

_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]+")


def generate_run_id(source: Path | str | None = None) -> str:
    """Generate a unique identifier for one load.

    Parameters
    ----------
    source : Path | str | None, optional
        File being loaded; its stem is embedded so that events of
        several loads appended to one log stay distinguishable.

    Returns
    -------
    str
        ``20240130T120000Z__<stem>__<hex>``, or ``<timestamp>__<hex>``
        without a source.

    Examples
    --------
        >>> generate_run_id("data/estc_2016.mrc")  # doctest: +SKIP
        '20240130T120000Z__estc_2016__9f2c41d0'
    """
    parts = [datetime.now(UTC).strftime("%Y%m%dT%H%M%SZ")]
    if source is not None:
        stem = _UNSAFE.sub("_", Path(source).stem)
        if stem:
            parts.append(stem)
    parts.append(secrets.token_hex(4))
    return "__".join(parts)
