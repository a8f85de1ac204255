from uuid import UUID

from storefront.errors import InvalidInputError


def normalize_id(raw, label: str = "ID") -> str:
    """
    Return the canonical 32-hex form of an identifier.

    Anything that is not a UUID (hex or dashed) is malformed, which is
    reported as InvalidInputError, never as "not found".
    """
    if not isinstance(raw, str) or not raw:
        raise InvalidInputError(f"Invalid {label}")
    try:
        return UUID(raw).hex
    except ValueError:
        raise InvalidInputError(f"Invalid {label}")
