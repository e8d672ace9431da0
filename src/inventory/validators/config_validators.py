"""Normalisers applied to raw environment and request values before validation."""


def to_uppercase(value: str | None) -> str | None:
    """
    Strip and upper-case an env value, leaving None (unset) untouched.
    """
    if value is None:
        return None
    return value.strip().upper()


def to_lowercase(value: str | None) -> str | None:
    """
    Strip and lower-case an env value, leaving None (unset) untouched.
    """
    if value is None:
        return None
    return value.strip().lower()


def to_text(value) -> str:
    """
    Coerce a raw JSON value to text the way form sanitisers do: None becomes "",
    everything else goes through str().
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)
