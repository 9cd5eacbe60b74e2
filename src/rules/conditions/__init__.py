"""Conditions package: decides which pull requests a rule applies to."""

from src.rules.conditions.filesystem import files_matching_condition

__all__ = [
    "files_matching_condition",
]
