"""
Rule evaluation utilities.
"""

from src.rules.utils.logins import intersection, same_login, unique, without

__all__ = [
    "intersection",
    "same_login",
    "unique",
    "without",
]
