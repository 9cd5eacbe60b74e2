"""
Main configuration class that composes all configs.
"""

import os

from dotenv import load_dotenv

from src.core.config.github_config import GitHubConfig
from src.core.config.logging_config import LoggingConfig
from src.core.config.repo_config import RepoConfig
from src.core.config.review_config import ReviewConfig

# Load environment variables from a .env file
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Config:
    """Main configuration class."""

    def __init__(self) -> None:
        self.github = GitHubConfig(
            app_name=os.getenv("APP_NAME_GITHUB", ""),
            app_id=os.getenv("APP_CLIENT_ID_GITHUB", ""),
            private_key=os.getenv("PRIVATE_KEY_BASE64_GITHUB", ""),
            webhook_secret=os.getenv("WEBHOOK_SECRET_GITHUB", ""),
            api_base_url=os.getenv("GITHUB_API_BASE_URL", "https://api.github.com"),
        )

        self.repo_config = RepoConfig(
            config_path=os.getenv("REPO_CONFIG_PATH", ".github/review-bot.yml"),
        )

        self.review = ReviewConfig(
            request_reviewers=_env_flag("REQUEST_REVIEWERS"),
            check_run_name=os.getenv("CHECK_RUN_NAME", "approvalgate"),
            fellows_roster_repo=os.getenv("FELLOWS_ROSTER_REPO") or None,
            fellows_roster_path=os.getenv("FELLOWS_ROSTER_PATH", "fellows.yml"),
            teams_org=os.getenv("TEAMS_ORG") or None,
        )

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            format=os.getenv("LOG_FORMAT", "console"),
        )

        # Development settings
        self.debug = _env_flag("DEBUG")
        self.environment = os.getenv("ENVIRONMENT", "development")

    def validate(self) -> bool:
        """Validate configuration."""
        errors = []

        if not self.github.app_name:
            errors.append("APP_NAME_GITHUB is required")

        if not self.github.app_id:
            errors.append("APP_CLIENT_ID_GITHUB is required")

        if not self.github.private_key:
            errors.append("PRIVATE_KEY_BASE64_GITHUB is required")

        if not self.github.webhook_secret:
            errors.append("WEBHOOK_SECRET_GITHUB is required")

        if self.logging.format not in ("console", "json"):
            errors.append("LOG_FORMAT must be 'console' or 'json'")

        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

        return True


# Global config instance
config = Config()
