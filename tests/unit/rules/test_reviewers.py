"""Tests for reviewer resolution and login helpers."""

import pytest

from src.core.errors import EmptyRequirementError, InsufficientPoolError
from src.rules.models import ReviewerGroup, ReviewerRequirement
from src.rules.reviewers import ensure_pool, resolve_group, resolve_requirement
from src.rules.utils import intersection, same_login, unique, without


class TestResolveRequirement:
    @pytest.mark.asyncio
    async def test_users_then_team_members(self, make_context, log) -> None:
        requirement = ReviewerRequirement(users=["a", "B"], teams=["core"])
        context = make_context(teams={"core": ["b", "c"]})

        assert await resolve_requirement(requirement, context, log) == ["a", "B", "c"]

    @pytest.mark.asyncio
    async def test_pool_too_small(self, make_context, log) -> None:
        requirement = ReviewerRequirement(users=["a"], teams=["core"], min_approvals=3)
        context = make_context(teams={"core": ["a", "b"]})

        with pytest.raises(InsufficientPoolError) as exc_info:
            await resolve_requirement(requirement, context, log)

        assert exc_info.value.required == 3
        assert exc_info.value.available == 2

    @pytest.mark.asyncio
    async def test_empty_group(self, make_context, log) -> None:
        with pytest.raises(EmptyRequirementError):
            await resolve_group(ReviewerGroup(), make_context(), log)

    def test_requirement_needs_reviewers(self) -> None:
        with pytest.raises(ValueError):
            ReviewerRequirement(min_approvals=1)

    def test_ensure_pool_without_candidates(self) -> None:
        with pytest.raises(EmptyRequirementError):
            ensure_pool(1, [])


class TestLogins:
    def test_unique_keeps_first_spelling(self) -> None:
        assert unique(["Alice", "bob"], ["alice", "carol"], None) == ["Alice", "bob", "carol"]

    def test_without(self) -> None:
        assert without(["a", "B", "c"], ["b"]) == ["a", "c"]

    def test_intersection_keeps_left_order(self) -> None:
        assert intersection(["c", "A", "b"], ["a", "c"]) == ["c", "A"]

    def test_same_login(self) -> None:
        assert same_login("Octocat", "octocat")
        assert not same_login("octocat", "octodog")
