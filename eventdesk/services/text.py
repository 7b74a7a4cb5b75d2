"""Input sanitisation for free-text fields."""
import re

_UNSAFE_CHARS = re.compile(r"[<>]")


def sanitize_string(value: str) -> str:
    """Trim whitespace and strip angle brackets from user-supplied text."""
    if not isinstance(value, str):
        return ""
    return _UNSAFE_CHARS.sub("", value.strip())
