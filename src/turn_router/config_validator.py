"""
Environment lookup and value parsing for Turn Router settings.

Every helper raises ConfigurationError with a message naming the
offending variable, so startup failures point at the fix.
"""
import math
import os
import warnings
from typing import List, Optional, Tuple

from .exceptions import ConfigurationError

_PLACEHOLDER_MARKERS = (
    "your_",
    "<your",
    "placeholder",
    "xxx",
    "replace",
    "changeme",
)


def get_required_env(key: str, description: str = None) -> str:
    """
    Read a variable that must be set to a real value.

    :param key: Variable name
    :param description: What the variable is for, shown when it is missing
    :return: The variable's value
    :raises: ConfigurationError if unset, empty or a placeholder
    """
    value = os.getenv(key)

    if not value:
        raise ConfigurationError(
            f"{key} is required but not set ({description or key}).\n"
            f"Export it in the shell (export {key}=...) "
            f"or add {key}=... to a .env file in the working directory."
        )

    if _is_placeholder(value):
        raise ConfigurationError(
            f"{key} still holds a placeholder value ({_mask_secret(value)}); "
            f"set the real one."
        )

    return value


def get_optional_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """
    Read a variable that may be absent.

    A placeholder value counts as absent and triggers a UserWarning.

    :param key: Variable name
    :param default: Value used when unset
    :return: The variable's value, or default
    """
    value = os.getenv(key, default)

    if value and _is_placeholder(value):
        warnings.warn(f"Ignoring placeholder value for {key}", UserWarning)
        return default

    return value


def parse_float(value: str, name: str, minimum: float = None, maximum: float = None) -> float:
    """
    Parse a finite float, optionally bounded.

    :raises: ConfigurationError if not a number or out of range
    """
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")

    if not math.isfinite(parsed):
        raise ConfigurationError(f"{name} must be finite, got {value!r}")

    if minimum is not None and parsed < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {parsed}")

    if maximum is not None and parsed > maximum:
        raise ConfigurationError(f"{name} must be <= {maximum}, got {parsed}")

    return parsed


def parse_int(value: str, name: str, minimum: int = None) -> int:
    """Parse an integer, optionally bounded below."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")

    if minimum is not None and parsed < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {parsed}")

    return parsed


def parse_metadata_pairs(value: Optional[str], name: str) -> List[Tuple[str, str]]:
    """
    Parse "name:value,name:value" into a list of pairs.

    Empty or missing input yields an empty list.
    """
    if not value:
        return []

    pairs = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        if ":" not in item:
            raise ConfigurationError(
                f"{name} entries must look like name:value, got {item!r}"
            )
        key, _, val = item.partition(":")
        key, val = key.strip(), val.strip()
        if not key:
            raise ConfigurationError(f"{name} entry has an empty name: {item!r}")
        pairs.append((key, val))

    return pairs


def validate_subscription_key(key: str, key_name: str, min_length: int = 8) -> str:
    """
    Reject subscription keys that are missing, placeholders or implausibly short.

    :raises: ConfigurationError describing the problem
    """
    if not key:
        raise ConfigurationError(f"{key_name} is required.")

    if _is_placeholder(key):
        raise ConfigurationError(f"{key_name} looks like a placeholder, not a subscription key.")

    if len(key) < min_length:
        raise ConfigurationError(
            f"{key_name} is too short ({len(key)} chars, need at least {min_length})."
        )

    return key


def _is_placeholder(value: str) -> bool:
    lowered = (value or "").lower()
    return any(marker in lowered for marker in _PLACEHOLDER_MARKERS)


def _mask_secret(secret: str, show_chars: int = 4) -> str:
    """Show only the first and last few characters of a secret."""
    if not secret or len(secret) <= show_chars * 2:
        return "***"
    return f"{secret[:show_chars]}...{secret[-show_chars:]}"
