# storefront/identifiers.py
import uuid

from .errors import ValidationError


def new_id() -> str:
    return uuid.uuid4().hex


def is_valid_id(value) -> bool:
    if not isinstance(value, str) or not value:
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def parse_id(value, what: str = "ID") -> str:
    """Validate a document identifier and return its canonical (plain hex) form.

    Raises ValidationError for anything that is not a well-formed id, so callers
    never hit the store with garbage.
    """
    if not is_valid_id(value):
        raise ValidationError(f"{what} {value} is not valid")
    return uuid.UUID(value).hex
