import uuid
from datetime import datetime, timezone


def new_id() -> str:
    return str(uuid.uuid4())


def is_valid_id(value) -> bool:
    """Vrai si value est un identifiant UUID bien formé."""
    if not isinstance(value, str):
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def utcnow() -> datetime:
    # datetimes naïfs en UTC, comme stockés par la DB
    return datetime.now(timezone.utc).replace(tzinfo=None)
