"""Masking of credentials before they reach logs or JSON output."""

MASKED = "*****"


def password(secret: str) -> str:
    """Replace a secret with a fixed mask. Empty secrets stay empty."""
    if not secret:
        return ""
    return MASKED
