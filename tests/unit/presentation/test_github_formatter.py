from src.core.errors import RuleEvaluationError
from src.presentation.github_formatter import (
    format_error_output,
    format_missing_config_output,
    format_report_output,
    format_rule_report,
)
from src.rules.models import RuleType
from src.rules.reports import MissingRankReport, MissingScoreReport, PullRequestReport, ReviewRequest, RuleReport


def basic_report(name: str = "core", missing_reviews: int = 1, **fields) -> RuleReport:
    return RuleReport(rule_name=name, rule_type=RuleType.BASIC, missing_reviews=missing_reviews, **fields)


def test_passing_report():
    output = format_report_output(PullRequestReport(modified_files=["README.md"]))

    assert output["title"] == "All required reviews fulfilled"
    assert "passed" in output["summary"]


def test_failing_report_title_lists_rules():
    report = PullRequestReport(reports=[basic_report("core"), basic_report("ci")])

    output = format_report_output(report)

    assert output["title"] == "Missing reviews from core, ci"
    assert "2 rules failed: core, ci" in output["summary"]
    assert "## core" in output["text"]
    assert "## ci" in output["text"]


def test_summary_lists_requested_reviewers():
    report = PullRequestReport(
        reports=[basic_report()],
        review_request=ReviewRequest(users=["alice"], teams=["core"]),
    )

    assert "Reviews requested from: @alice, core" in format_report_output(report)["summary"]


def test_fellows_only_failures_explain_why_nobody_is_requested():
    report = PullRequestReport(
        reports=[MissingRankReport(rule_name="fellows", rule_type=RuleType.FELLOWS, missing_reviews=1, missing_rank=3)]
    )

    assert "Fellows are not requested individually." in format_report_output(report)["summary"]


def test_rule_section():
    report = basic_report(
        missing_reviews=2,
        users_to_request=["alice"],
        teams_to_request=["core-devs"],
        counting_reviews=["bob"],
    )

    text = format_rule_report(report)

    assert "#### Missing 2 reviews" in text
    assert "Rule 'Basic' requires a given amount of reviews from users/teams." in text
    assert "### Missing users\n\n- alice\n" in text
    assert "### Missing reviews from teams\n\n- core-devs\n" in text
    assert "- @bob\n" in text


def test_rank_section():
    report = MissingRankReport(
        rule_name="fellows",
        rule_type=RuleType.FELLOWS,
        missing_reviews=1,
        missing_users=["alice"],
        missing_rank=3,
    )

    text = format_rule_report(report)

    assert "#### Missing 1 review\n" in text
    assert "Missing reviews from rank `3` or above" in text
    assert "- @alice\n" in text


def test_score_section():
    report = MissingScoreReport(
        rule_name="fellows",
        rule_type=RuleType.FELLOWS,
        missing_reviews=1,
        current_score=2,
        required_score=5,
        user_scores={"alice": 3},
    )

    text = format_rule_report(report)

    assert "Current score is `2` and the required score is `5`" in text
    assert "| @alice | 3 |" in text


def test_error_output_carries_only_the_message():
    error = RuleEvaluationError("core", ValueError("team 'ghosts' has no members"))

    output = format_error_output(error)

    assert output["title"] == "Error evaluating review policy"
    assert "Rule 'core' could not be evaluated: team 'ghosts' has no members" in output["summary"]
    assert "## core" not in output["text"]


def test_missing_config_output():
    output = format_missing_config_output(".github/review-bot.yml")

    assert output["title"] == "Review policy not configured"
    assert "`.github/review-bot.yml`" in output["text"]


def test_rule_section_lists_every_missing_user():
    report = basic_report(
        missing_reviews=1,
        missing_users=["bob-missing", "carol-missing"],
        teams_to_request=["core"],
        counting_reviews=["a"],
    )

    text = format_rule_report(report)

    assert "<summary>GitHub users whose approval counts</summary>" in text
    assert "- @bob-missing\n- @carol-missing\n" in text
