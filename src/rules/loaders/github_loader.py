"""
GitHub-based policy loader.

Loads the review policy from a file in the repository, implementing the
PolicyLoader interface.
"""

import json

import structlog
import yaml
from pydantic import ValidationError

from src.core.config import config
from src.core.errors import ConfigurationError, RulesFileNotFoundError
from src.integrations.github import GitHubClient
from src.rules.interface import PolicyLoader
from src.rules.models import ReviewPolicy

logger = structlog.get_logger(__name__)


def parse_policy(content: str, source: str = "policy") -> ReviewPolicy:
    """
    Parse and validate a policy document.

    JSON documents are accepted too; YAML is a superset, but a .json path is
    parsed with the json module so its errors read naturally.

    Raises:
        ConfigurationError: If the document is not valid YAML/JSON or does not
            match the policy schema.
    """
    try:
        data = json.loads(content) if source.endswith(".json") else yaml.safe_load(content)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"{source} could not be parsed: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{source} must be a mapping with a 'rules' key")

    try:
        return ReviewPolicy.model_validate(data)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
        )
        raise ConfigurationError(f"{source} is invalid: {details}", errors=e.errors()) from e


class GitHubPolicyLoader(PolicyLoader):
    """Loads the review policy from the repository's policy file."""

    def __init__(self, client: GitHubClient, config_path: str | None = None):
        self.github_client = client
        self.config_path = config_path or config.repo_config.config_path

    async def get_policy(self, repository: str, installation_id: int) -> ReviewPolicy:
        logger.info("policy_fetching", repo=repository, path=self.config_path, installation_id=installation_id)
        content = await self.github_client.get_file_content(repository, self.config_path, installation_id)
        if content is None:
            logger.warning("policy_file_missing", repo=repository, path=self.config_path)
            raise RulesFileNotFoundError(f"Rules file not found: {self.config_path}")

        policy = parse_policy(content, source=self.config_path)
        logger.info("policy_loaded", repo=repository, rules=len(policy.rules))
        return policy
