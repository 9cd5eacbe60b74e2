"""
Helpers for lists of GitHub logins.

Reports must be byte-identical across runs on the same inputs, so every
collection of logins here is an ordered, de-duplicated list rather than a set.
"""

from collections.abc import Iterable


def unique(*groups: Iterable[str] | None) -> list[str]:
    """Concatenate the groups, keeping the first spelling of each login (case-insensitive)."""
    seen: set[str] = set()
    result: list[str] = []
    for group in groups:
        for item in group or ():
            key = item.casefold()
            if key not in seen:
                seen.add(key)
                result.append(item)
    return result


def same_login(a: str, b: str) -> bool:
    """GitHub logins are case-insensitive."""
    return a.casefold() == b.casefold()


def without(logins: Iterable[str], excluded: Iterable[str]) -> list[str]:
    """Logins not present in excluded, compared case-insensitively, order preserved."""
    excluded_keys = {login.casefold() for login in excluded}
    return [login for login in logins if login.casefold() not in excluded_keys]


def intersection(logins: Iterable[str], others: Iterable[str]) -> list[str]:
    """Logins also present in others, compared case-insensitively, order preserved."""
    other_keys = {login.casefold() for login in others}
    return [login for login in logins if login.casefold() in other_keys]
