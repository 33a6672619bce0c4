"""Shared helpers (UTC datetimes)."""

from member_audit.shared.utils.datetime import ensure_utc, parse_iso_utc, utc_now

__all__ = ["ensure_utc", "parse_iso_utc", "utc_now"]
