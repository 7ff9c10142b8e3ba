from typing import Optional


def mask_key(key: Optional[str]) -> str:
    """Mask an API key for logging, keeping the first and last four characters."""
    if not key:
        return "<none>"
    if len(key) <= 8:
        return "****"
    return f"{key[:4]}...{key[-4:]}"
