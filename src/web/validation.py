"""Request-level parsing helpers.

Route handlers read raw JSON bodies and query strings and validate them by hand;
these helpers raise HTTPException(400) with a message the client can show.
"""
import datetime as dt
import re
import uuid
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

from fastapi import HTTPException

# Versions 1-8, RFC 4122 variant. Ids generated by the database may be v4 or v7.
UUID_REGEX = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-8][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE)
EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_uuid(value: Any) -> bool:
    return isinstance(value, str) and bool(UUID_REGEX.match(value))


def bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=400, detail=message)


def not_found(entity: str) -> HTTPException:
    """Same response whether the row is missing or belongs to another organization."""
    return HTTPException(status_code=404, detail=f"{entity} not found or access denied")


def is_missing(value: Any) -> bool:
    return value is None or value == ""


def require_fields(data: dict, fields: Iterable[str], message: str) -> None:
    if any(is_missing(data.get(field)) for field in fields):
        raise bad_request(message)


def parse_text(value: Any, label: str) -> str:
    if not isinstance(value, str):
        raise bad_request(f"Invalid {label}. Must be a string.")
    return value


def parse_optional_text(value: Any, label: str) -> str | None:
    if value is None:
        return None
    return parse_text(value, label)


def parse_bool(value: Any, label: str) -> bool:
    if not isinstance(value, bool):
        raise bad_request(f"Invalid {label}. Must be a boolean.")
    return value


def parse_email(value: Any) -> str:
    """Trims and lowercases the address before checking its shape."""
    email = parse_text(value, "email").strip().lower()
    if not EMAIL_REGEX.match(email):
        raise bad_request("Invalid email format")
    return email


def parse_uuid(value: Any, label: str) -> uuid.UUID:
    if not is_valid_uuid(value):
        raise bad_request(f"Invalid {label} format. Must be a valid UUID.")
    return uuid.UUID(value)


def parse_optional_uuid(value: Any, label: str) -> uuid.UUID | None:
    if is_missing(value):
        return None
    return parse_uuid(value, label)


def parse_amount(value: Any, label: str) -> Decimal:
    """Parses a money value from a JSON number or numeric string."""
    if isinstance(value, bool):
        raise bad_request(f"Invalid {label}. Must be a number.")

    try:
        amount = Decimal(str(value).strip().replace(",", ""))
    except (InvalidOperation, ValueError):
        raise bad_request(f"Invalid {label}. Must be a number.")

    if not amount.is_finite():
        raise bad_request(f"Invalid {label}. Must be a finite number.")

    return amount


def parse_optional_amount(value: Any, label: str) -> Decimal | None:
    if is_missing(value):
        return None
    return parse_amount(value, label)


def parse_date(value: Any, label: str) -> dt.date:
    """Accepts a plain date or a full ISO timestamp, nothing with trailing text."""
    if isinstance(value, str):
        try:
            return dt.date.fromisoformat(value)
        except ValueError:
            pass
        try:
            # fromisoformat only understands a trailing "Z" from Python 3.11 on
            return dt.datetime.fromisoformat(value.removesuffix("Z") + ("+00:00" if value.endswith("Z") else "")).date()
        except ValueError:
            pass
    raise bad_request(f"Invalid {label}. Use the YYYY-MM-DD format.")


def parse_optional_date(value: Any, label: str) -> dt.date | None:
    if is_missing(value):
        return None
    return parse_date(value, label)


def parse_choice(value: Any, choices: Iterable[str], label: str) -> str:
    choices = tuple(choices)
    if value not in choices:
        raise bad_request(f"Invalid {label}. Must be one of: {', '.join(choices)}")
    return value


def parse_non_negative_int(value: Any, label: str) -> int | None:
    if is_missing(value):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise bad_request(f"Invalid {label}. Must be a non-negative integer.")
    if number < 0:
        raise bad_request(f"Invalid {label}. Must be a non-negative integer.")
    return number


async def read_json(request) -> dict:
    """Reads the request body as a JSON object."""
    try:
        data = await request.json()
    except ValueError:
        raise bad_request("Request body must be valid JSON")

    if not isinstance(data, dict):
        raise bad_request("Request body must be a JSON object")

    return data


def require_organization_id(value: Any) -> uuid.UUID:
    if is_missing(value):
        raise bad_request("Organization ID is required")
    return parse_uuid(value, "organization ID")
