"""
Central configuration for the blocklist check service.
Values come from environment variables, with defaults for the public FireHOL repository.
"""
import os
from dataclasses import dataclass
from typing import Optional

# Remote blocklist repository
BLOCKLIST_REPO_OWNER = os.getenv('BLOCKLIST_REPO_OWNER', 'firehol')
BLOCKLIST_REPO_NAME = os.getenv('BLOCKLIST_REPO_NAME', 'blocklist-ipsets')
BLOCKLIST_REPO_REF = os.getenv('BLOCKLIST_REPO_REF', 'master')
BLOCKLIST_SUFFIX = os.getenv('BLOCKLIST_SUFFIX', '.ipset')

GITHUB_API_BASE = os.getenv('GITHUB_API_BASE', 'https://api.github.com')
GITHUB_RAW_BASE = os.getenv('GITHUB_RAW_BASE', 'https://raw.githubusercontent.com')
GITHUB_TOKEN = os.getenv('GITHUB_TOKEN') or None

# HTTP client
HTTP_TIMEOUT_TOTAL = float(os.getenv('HTTP_TIMEOUT_TOTAL', '30'))
HTTP_TIMEOUT_CONNECT = float(os.getenv('HTTP_TIMEOUT_CONNECT', '10'))
USER_AGENT = os.getenv('USER_AGENT', 'ipcheck/1.0')

# Number of blocklist files fetched at once (1 = strictly sequential)
SCAN_CONCURRENCY = max(1, int(os.getenv('SCAN_CONCURRENCY', '1')))

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()


@dataclass(frozen=True)
class Settings:
    """Snapshot of the settings used for one check"""
    repo_owner: str = BLOCKLIST_REPO_OWNER
    repo_name: str = BLOCKLIST_REPO_NAME
    repo_ref: str = BLOCKLIST_REPO_REF
    suffix: str = BLOCKLIST_SUFFIX
    api_base: str = GITHUB_API_BASE
    raw_base: str = GITHUB_RAW_BASE
    github_token: Optional[str] = GITHUB_TOKEN
    timeout_total: float = HTTP_TIMEOUT_TOTAL
    timeout_connect: float = HTTP_TIMEOUT_CONNECT
    user_agent: str = USER_AGENT
    scan_concurrency: int = SCAN_CONCURRENCY

    @property
    def catalog_url(self) -> str:
        return f"{self.api_base}/repos/{self.repo_owner}/{self.repo_name}/git/trees/{self.repo_ref}"

    def raw_url(self, path: str) -> str:
        """Build the raw content URL for a file in the blocklist repository"""
        return f"{self.raw_base}/{self.repo_owner}/{self.repo_name}/{self.repo_ref}/{path}"


def load_settings(**overrides) -> Settings:
    """
    Build a Settings instance from the environment defaults.

    Args:
        **overrides: Field values that replace the defaults

    Returns:
        Settings instance
    """
    return Settings(**overrides)
