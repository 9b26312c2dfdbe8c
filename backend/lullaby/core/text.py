"""Text normalization for speech.

Cleans raw text before segmentation: typographic punctuation is folded to
ASCII, whitespace is collapsed, and characters the voice cannot pronounce are
dropped with a warning instead of failing synthesis.
"""
import re
import string

from .logging import get_logger

logger = get_logger(__name__)

# Typographic characters and their plain replacements
REPLACEMENTS = {
    "‘": "'",   # left single quote
    "’": "'",   # right single quote / apostrophe
    "‚": "'",
    "“": '"',   # left double quote
    "”": '"',   # right double quote
    "„": '"',
    "–": "-",   # en dash
    "—": ", ",  # em dash reads as a pause
    "…": "...", # ellipsis
    " ": " ",   # non-breaking space
}

SUPPORTED_CHARACTERS = frozenset(
    string.ascii_letters + string.digits + " .,!?;:'\"-()$%&/+=@#*"
)


def normalize(text: str) -> tuple[str, list[str]]:
    """Normalize text for synthesis.

    Args:
        text: Raw input text

    Returns:
        (clean_text, warnings). Warnings are informational only.
    """
    warnings: list[str] = []

    for source, target in REPLACEMENTS.items():
        text = text.replace(source, target)

    text = re.sub(r"\s+", " ", text).strip()
    text = re.sub(r" ,", ",", text)

    unsupported = []
    kept = []
    for char in text:
        if char in SUPPORTED_CHARACTERS or char.isalpha():
            kept.append(char)
        elif char not in unsupported:
            unsupported.append(char)

    if unsupported:
        listed = ", ".join(repr(c) for c in unsupported)
        warnings.append(f"Unsupported character(s) removed: {listed}")
        text = re.sub(r" {2,}", " ", "".join(kept)).strip()

    if not text:
        warnings.append("Empty text after normalization")

    for warning in warnings:
        logger.warning(warning)

    return text, warnings

