"""Set helpers over GitHub logins.

Logins never contain whitespace, which lets them travel through prompts and
config files as plain words.
"""

from collections.abc import Iterable


def union(a: Iterable[str], b: Iterable[str]) -> frozenset[str]:
    """Every distinct login appearing in a or b."""
    return frozenset(a) | frozenset(b)


def difference(a: Iterable[str], b: Iterable[str]) -> frozenset[str]:
    """Logins present in a and absent from b."""
    return frozenset(a) - frozenset(b)


def validate_logins(logins: Iterable[str]) -> None:
    """Reject empty logins and logins with embedded whitespace.

    Raises:
        ValueError: On the first invalid login
    """
    for login in logins:
        if not login or any(ch.isspace() for ch in login):
            raise ValueError(f"invalid login {login!r}: must be non-empty without whitespace")
