"""
Text normalization applied before phrase scoring.
"""
import re

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9 ]")


def normalize(text: str, ignore_non_alphanumeric: bool = True) -> str:
    """
    Strip everything except ASCII letters, digits and spaces, then trim.

    Returns the input unchanged when ``ignore_non_alphanumeric`` is False.

    :param text: Raw text
    :param ignore_non_alphanumeric: Whether to strip punctuation and symbols
    :return: Normalized text
    """
    if not ignore_non_alphanumeric:
        return text
    return _NON_ALPHANUMERIC.sub("", text).strip()
