"""Text normalization and validation for request text and model answers.

Three concerns live here:

1. **Cache-key normalization** -- every cache key is derived from an
   operation name plus the request text.  The text is normalized first so
   that trivially different spellings of the same request ("Paris, France"
   vs "  paris,  FRANCE ") share a cache entry:

       NFKC  ->  strip  ->  collapse whitespace runs  ->  casefold

   The normalized text is then hashed with SHA-256, which keeps keys a fixed
   length regardless of input size and makes collisions between different
   inputs vanishingly unlikely.

2. **Input validation** -- request text is required, non-blank and at most
   1000 characters; anything else is rejected before any I/O.

3. **Language-model output cleanup** -- models asked for "just the place
   name" still wrap answers in quotes or add commentary lines.
"""

import hashlib
import re
import unicodedata

from georesolve.utils.errors import InputValidationError

# Upper bound on descriptions and location names accepted from callers.
MAX_TEXT_LENGTH = 1000

_WHITESPACE_RE = re.compile(r"\s+")

# Characters a model commonly wraps a one-line answer in.
_WRAPPING_CHARS = "\"'`“”‘’"


def normalize_query(text: str) -> str:
    """Normalize request text for cache-key derivation.

    >>> normalize_query("  Lower  East Side,\\tManhattan ")
    'lower east side, manhattan'
    """
    normalized = unicodedata.normalize("NFKC", text).strip()
    normalized = _WHITESPACE_RE.sub(" ", normalized)
    return normalized.casefold()


def make_cache_key(operation: str, text: str) -> str:
    """Return the deterministic cache key for *operation* applied to *text*.

    Args:
        operation: Short operation label, e.g. ``"geocode"``.
        text: The raw request text; normalized before hashing.

    Returns:
        ``"{operation}:{sha256 hex digest}"``
    """
    digest = hashlib.sha256(normalize_query(text).encode("utf-8")).hexdigest()
    return f"{operation}:{digest}"


def clean_model_answer(raw: str) -> str:
    """Trim whitespace and wrapping quotes from a model answer.

    Only the first non-empty line is kept -- the prompt asks for a single
    line and anything after it is commentary.
    """
    lines = [line.strip() for line in raw.strip().splitlines() if line.strip()]
    if not lines:
        return ""
    return lines[0].strip(_WRAPPING_CHARS).strip()


def require_text(value: object, field_name: str, max_length: int = MAX_TEXT_LENGTH) -> str:
    """Validate caller-supplied text and return it trimmed.

    Raises
    ------
    InputValidationError
        If *value* is not a string, is blank, or exceeds *max_length*
        characters.  Raised before any cache or provider I/O happens.
    """
    if not isinstance(value, str):
        raise InputValidationError(f"{field_name} must be a string")
    text = value.strip()
    if not text:
        raise InputValidationError(f"{field_name} is required")
    if len(text) > max_length:
        raise InputValidationError(
            f"{field_name} must be at most {max_length} characters (got {len(text)})"
        )
    return text
