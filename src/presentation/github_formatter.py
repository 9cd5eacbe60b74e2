from typing import Any

from src.rules.models import RuleType
from src.rules.registry import EvaluatorRegistry
from src.rules.reports import MissingRankReport, MissingScoreReport, PullRequestReport, RuleReport


def to_handle(login: str) -> str:
    return f"@{login}"


def _bullets(items: list[str]) -> str:
    return "".join(f"- {item}\n" for item in items)


def _details(summary: str, body: str) -> str:
    return f"<details><summary>{summary}</summary>\n\n{body}\n\n</details>\n\n"


def format_rule_report(report: RuleReport) -> str:
    """Markdown section for one failing rule."""
    plural = "s" if report.missing_reviews > 1 else ""
    text = f"## {report.rule_name}\n\n"
    text += f"#### Missing {report.missing_reviews} review{plural}\n\n"

    explanation = EvaluatorRegistry.describe(report.rule_type)
    if explanation:
        text += _details("Rule explanation", explanation)

    if isinstance(report, MissingRankReport):
        text += "### Missing reviews from Fellows\n\n"
        text += f"Missing reviews from rank `{report.missing_rank}` or above\n\n"
        if report.missing_users:
            text += _details(
                "GitHub users whose approval counts",
                f"This is a list of all the GitHub users who are rank {report.missing_rank} or above:\n\n"
                + _bullets([to_handle(login) for login in report.missing_users]),
            )
    elif isinstance(report, MissingScoreReport):
        text += "### Missing score from Fellows\n\n"
        text += f"Current score is `{report.current_score}` and the required score is `{report.required_score}`\n\n"
        if report.user_scores:
            rows = "".join(f"| {to_handle(login)} | {score} |\n" for login, score in report.user_scores.items())
            text += _details("GitHub users whose approval counts", f"| User | Score |\n| --- | --- |\n{rows}")
    else:
        if report.users_to_request:
            text += "### Missing users\n\n" + _bullets(report.users_to_request) + "\n"
        if report.teams_to_request:
            text += "### Missing reviews from teams\n\n" + _bullets(report.teams_to_request) + "\n"
        if report.missing_users:
            text += _details(
                "GitHub users whose approval counts",
                "This is a list of all the GitHub users whose approval would count towards this rule:\n\n"
                + _bullets([to_handle(login) for login in report.missing_users]),
            )

    if report.counting_reviews:
        text += "### Users approvals that counted towards this rule\n\n"
        text += _bullets([to_handle(login) for login in report.counting_reviews]) + "\n"

    return text


def format_report_output(report: PullRequestReport) -> dict[str, Any]:
    """Format a pull request report for check run output."""
    if report.passed:
        return {
            "title": "All required reviews fulfilled",
            "summary": "✅ All review rules passed",
            "text": "Every rule that applies to the modified files has the approvals it needs.",
        }

    names = [rule_report.rule_name for rule_report in report.reports]
    plural = "s" if len(names) > 1 else ""
    fellows_only = all(rule_report.rule_type == RuleType.FELLOWS for rule_report in report.reports)

    summary = f"❌ {len(names)} rule{plural} failed: {', '.join(names)}"
    if report.review_request.users or report.review_request.teams:
        requested = [to_handle(login) for login in report.review_request.users] + report.review_request.teams
        summary += f"\n\nReviews requested from: {', '.join(requested)}"
    elif fellows_only:
        summary += "\n\nFellows are not requested individually."

    text = "# Review policy\n\n" + "".join(format_rule_report(rule_report) for rule_report in report.reports)

    return {"title": f"Missing review{plural} from {', '.join(names)}", "summary": summary, "text": text}


def format_error_output(error: Exception | str) -> dict[str, Any]:
    """Format a run-aborting error. Only the error message is shown, never a partial report."""
    message = str(error)
    return {
        "title": "Error evaluating review policy",
        "summary": f"❌ Error: {message}",
        "text": f"The review policy could not be evaluated:\n\n```\n{message}\n```\n\nPlease check the logs for more details.",
    }


def format_missing_config_output(config_path: str) -> dict[str, Any]:
    """Format check run output for a repository without a review policy file."""
    return {
        "title": "Review policy not configured",
        "summary": "Review policy setup required",
        "text": (
            "**Review policy not configured**\n\n"
            f"No policy file found at `{config_path}`.\n\n"
            "Create it with the rules that must be satisfied before merging:\n\n"
            "```yaml\n"
            "rules:\n"
            "  - name: Core developers\n"
            "    type: basic\n"
            "    condition:\n"
            "      include:\n"
            "        - '.*'\n"
            "    teams:\n"
            "      - core-devs\n"
            "    minApprovals: 2\n"
            "```\n\n"
            "Rules are read from the default branch only."
        ),
    }
