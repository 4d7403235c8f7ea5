"""Identifier normalization.

Counters and locks are scoped by a normalized identifier, typically an
email address. Normalizing here keeps ``"A@B.com "`` and ``"a@b.com"`` on
the same keys.
"""

from bastion.errors import ValidationError

MAX_IDENTIFIER_LENGTH = 320


def normalize_identifier(raw: object) -> str:
    """Return the canonical form of *raw*, or raise ``ValidationError``."""
    if not isinstance(raw, str):
        raise ValidationError(f"identifier must be a string, got {type(raw).__name__}")

    identifier = raw.strip().lower()
    if not identifier:
        raise ValidationError("identifier must not be empty")
    if len(identifier) > MAX_IDENTIFIER_LENGTH:
        raise ValidationError(f"identifier longer than {MAX_IDENTIFIER_LENGTH} characters")
    if any(ch.isspace() or not ch.isprintable() for ch in identifier):
        raise ValidationError("identifier contains whitespace or control characters")
    return identifier
