from datetime import datetime, timezone


def utc_timestamp() -> str:
    """Current UTC time as an RFC 3339 string with second precision, e.g. 2024-05-01T12:00:00Z."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
