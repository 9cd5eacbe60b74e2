"""File conditions for review rules.

A rule applies to a pull request only when some of its modified files match the
rule's condition.
"""

import re
from collections.abc import Iterable

import structlog

from src.rules.models import RuleCondition

logger = structlog.get_logger(__name__)


def _matches_any(path: str, patterns: Iterable[str]) -> bool:
    # Unanchored search: "review-bot.yml" matches ".github/workflows/review-bot.yml"
    return any(re.search(pattern, path) for pattern in patterns)


def files_matching_condition(files: Iterable[str], condition: RuleCondition) -> list[str]:
    """Files matching any include pattern and no exclude pattern.

    Args:
        files: Modified file paths, in the order the pull request lists them.
        condition: The rule condition.

    Returns:
        Matching paths without duplicates. Ordered by the first include pattern
        that matched them, then by position in files.
    """
    files = list(files)
    matches: dict[str, None] = {}
    for pattern in condition.include:
        for path in files:
            if path not in matches and re.search(pattern, path):
                matches[path] = None

    if condition.exclude and matches:
        excluded = [path for path in matches if _matches_any(path, condition.exclude)]
        for path in excluded:
            del matches[path]
        logger.debug("files_excluded", excluded=excluded)

    return list(matches)
