"""External identifier codec.

External ids look like ``D-07``, ``E-132``, ``C-004``, ``APP-021``, ``L-9``.
Padding is cosmetic; decoding accepts any number of digits.
"""
import re

from hr_portal.core.exceptions import InvalidIdentifier
from hr_portal.models.access_request import ResourceType

PREFIXES: dict[ResourceType, str] = {
    ResourceType.DEPARTMENT: "D-",
    ResourceType.EMPLOYEE: "E-",
    ResourceType.CANDIDATE: "C-",
    ResourceType.JOB_APPLICATION: "APP-",
    ResourceType.LEAVE_REQUEST: "L-",
}

PADDING: dict[ResourceType, int] = {
    ResourceType.DEPARTMENT: 2,
    ResourceType.EMPLOYEE: 0,
    ResourceType.CANDIDATE: 3,
    ResourceType.JOB_APPLICATION: 3,
    ResourceType.LEAVE_REQUEST: 0,
}

ACCESS_REQUEST_PREFIX = "AR-"

_DIGITS = re.compile(r"[0-9]+")

# Longest prefix first so a short prefix never shadows a longer one.
_PREFIX_ORDER = sorted(PREFIXES.items(), key=lambda item: len(item[1]), reverse=True)


def encode(resource_type: ResourceType, numeric_id: int) -> str:
    width = PADDING[resource_type]
    return f"{PREFIXES[resource_type]}{numeric_id:0{width}d}"


def decode(external_id: str) -> tuple[ResourceType, int]:
    """Return ``(type, numeric_id)`` for a prefixed external id."""
    value = (external_id or "").strip()
    if not value:
        raise InvalidIdentifier("Identifier is required")

    upper = value.upper()
    for resource_type, prefix in _PREFIX_ORDER:
        if upper.startswith(prefix):
            return resource_type, _parse_numeral(value[len(prefix):], external_id)

    raise InvalidIdentifier(f"Unrecognised identifier '{external_id}'")


def parse_resource_id(resource_type: ResourceType, raw: str | int) -> int:
    """Parse a resource id given either bare (``15``) or prefixed (``E-15``)."""
    if isinstance(raw, int):
        if raw < 0:
            raise InvalidIdentifier(f"Invalid {resource_type.value} id '{raw}'")
        return raw

    value = (raw or "").strip()
    if not value:
        raise InvalidIdentifier(f"{resource_type.value} id is required")

    if _DIGITS.fullmatch(value):
        return int(value)

    decoded_type, numeric_id = decode(value)
    if decoded_type is not resource_type:
        raise InvalidIdentifier(
            f"Identifier '{raw}' is a {decoded_type.value} id, expected {resource_type.value}"
        )
    return numeric_id


def parse_resource_type(raw: str | None) -> ResourceType | None:
    """Case-insensitive tag lookup; ``None`` for anything outside the closed set."""
    if raw is None:
        return None
    normalized = raw.strip().lower()
    for resource_type in ResourceType:
        if resource_type.value.lower() == normalized:
            return resource_type
    return None


def encode_access_request_id(numeric_id: int) -> str:
    return f"{ACCESS_REQUEST_PREFIX}{numeric_id}"


def parse_access_request_id(raw: str) -> int:
    value = (raw or "").strip()
    if value.upper().startswith(ACCESS_REQUEST_PREFIX):
        value = value[len(ACCESS_REQUEST_PREFIX):]
    return _parse_numeral(value, raw)


def _parse_numeral(digits: str, original: str) -> int:
    if not _DIGITS.fullmatch(digits):
        raise InvalidIdentifier(f"Invalid identifier '{original}'")
    return int(digits)
