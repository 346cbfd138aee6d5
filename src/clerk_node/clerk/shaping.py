"""Turn host-supplied node parameters into Clerk request bodies and queries."""

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)

_UPPER_RE = re.compile(r"[A-Z]")

# Filters accepted by GET /users (and reused by other list endpoints)
_LIST_QUERY_FIELDS = (
    "emailAddress",
    "phoneNumber",
    "externalId",
    "username",
    "web3Wallet",
    "userId",
    "query",
    "orderBy",
)
_LIST_QUERY_DATE_FIELDS = ("lastActiveAtSince", "createdAtBefore", "createdAtAfter")


def parse_metadata(text: str | None) -> dict | None:
    """Parse a JSON metadata string; empty or invalid input yields None."""
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        logger.debug("Ignoring metadata that is not valid JSON")
        return None


def clean_object(obj: dict) -> dict:
    """Drop None and empty-string values. False, 0 and [] are kept."""
    return {k: v for k, v in obj.items() if v is not None and v != ""}


def to_snake_case(name: str) -> str:
    """``firstName`` -> ``first_name``. Every capital is split (``userID`` -> ``user_i_d``)."""
    return _UPPER_RE.sub(lambda m: f"_{m.group(0).lower()}", name)


def convert_keys_to_snake_case(obj: dict) -> dict:
    return {to_snake_case(k): v for k, v in obj.items()}


def split_list(value: str | list | None) -> list[str]:
    """Split a comma-separated parameter, trimming whitespace and dropping blanks."""
    if value is None:
        return []
    if isinstance(value, list):
        return [str(v).strip() for v in value if str(v).strip()]
    return [part.strip() for part in value.split(",") if part.strip()]


def _parse_datetime(value: str | int | float | datetime) -> datetime:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    else:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_epoch_millis(value: str | int | float | datetime) -> int:
    """Date parameter -> unix milliseconds, as Clerk list filters expect."""
    return int(_parse_datetime(value).timestamp() * 1000)


def to_iso8601(value: str | int | float | datetime) -> str:
    """Date parameter -> ISO-8601 UTC string with milliseconds and a ``Z`` suffix."""
    dt = _parse_datetime(value).astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def pick(params: dict, fields: tuple[str, ...]) -> dict:
    """Select ``fields`` from ``params`` and rename them to Clerk's snake_case.

    Unset options (None, "" or False) are left out so Clerk keeps its defaults.
    """
    selected = {f: params.get(f) for f in fields if params.get(f) is not False}
    return clean_object(convert_keys_to_snake_case(selected))


def build_list_query(filters: dict) -> dict:
    """Build the query string for list endpoints from a ``filters`` collection."""
    query = {
        to_snake_case(name): filters[name]
        for name in _LIST_QUERY_FIELDS
        if filters.get(name)
    }
    for name in _LIST_QUERY_DATE_FIELDS:
        if filters.get(name):
            query[to_snake_case(name)] = to_epoch_millis(filters[name])
    return query


def metadata_body(
    fields: dict,
    names: tuple[str, ...] = ("publicMetadata", "privateMetadata", "unsafeMetadata"),
) -> dict:
    """Parse the JSON metadata strings present in ``fields`` into ``*_metadata`` keys."""
    body = {to_snake_case(name): parse_metadata(fields.get(name)) for name in names if fields.get(name)}
    return clean_object(body)
