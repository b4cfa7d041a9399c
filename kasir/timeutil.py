from __future__ import annotations

# kasir/timeutil.py
import datetime as dt
import logging

logger = logging.getLogger(__name__)

# Asia/Jakarta has no DST; a fixed offset avoids depending on system tzdata.
WIB = dt.timezone(dt.timedelta(hours=7), "WIB")


def now_text() -> str:
    """Current UTC time as ISO-8601 text, the form timestamps are written in."""
    return dt.datetime.now(dt.timezone.utc).isoformat()


def parse_time(value) -> dt.datetime | None:
    """
    Convert a stored timestamp into an aware datetime in Asia/Jakarta.
    Accepts datetimes (PostgreSQL) or ISO-8601 text (SQLite). Naive values are taken as UTC.
    Unparseable text is logged and yields None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, dt.datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = dt.datetime.fromisoformat(text)
        except ValueError as e:
            logger.warning("parse_time: %r: %s", value, e)
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed.astimezone(WIB)
