"""Admin identity helpers.

Admin ids are plain strings trusted as given by the transport layer.
Comparisons ignore case and surrounding whitespace.
"""


def normalize_admin_id(admin_id: str | None) -> str | None:
    if admin_id is None:
        return None
    value = admin_id.strip()
    return value or None


def same_admin(a: str | None, b: str | None) -> bool:
    a, b = normalize_admin_id(a), normalize_admin_id(b)
    if a is None or b is None:
        return False
    return a.casefold() == b.casefold()
