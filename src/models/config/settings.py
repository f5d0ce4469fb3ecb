import logging
from pydantic_settings import BaseSettings
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from models.infrastructure.github_client import GitHubConfig
    from models.achievements import EndpointConfig


class Settings(BaseSettings):
    password_hash: str = ""
    github_token: str = ""
    github_api_url: str = "https://api.github.com"
    repo_owner: str = "benpomeranz"
    repo_name: str = "benpomeranz.github.io"
    file_path: str = "achievements/achievements.csv"
    branch: str = "main"
    max_csv_size: int = 50000
    commit_message: str = "Update achievements data"
    user_agent: str = "achievements-worker"
    request_timeout: float = 30.0
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    class Config:
        env_file = ".env"

    def to_github_config(self):
        from models.infrastructure.github_client import GitHubConfig
        return GitHubConfig(
            api_url=self.github_api_url,
            token=self.github_token,
            owner=self.repo_owner,
            repo=self.repo_name,
            user_agent=self.user_agent,
            timeout=self.request_timeout,
        )

    def to_endpoint_config(self):
        from models.achievements import EndpointConfig
        return EndpointConfig(
            password_hash=self.password_hash,
            file_path=self.file_path,
            branch=self.branch,
            max_csv_size=self.max_csv_size,
            commit_message=self.commit_message,
        )


# noinspection PyArgumentList
settings = Settings()

logger.debug("=== Settings Debug ===")
logger.debug(f"GitHub API: {settings.github_api_url}")
logger.debug(f"Repository: {settings.repo_owner}/{settings.repo_name}")
logger.debug(f"File: {settings.file_path}@{settings.branch}")
logger.debug(f"Max CSV size: {settings.max_csv_size}")
logger.debug(f"Password hash configured: {bool(settings.password_hash)}")
logger.debug(f"GitHub token configured: {bool(settings.github_token)}")
logger.debug("=== End Settings Debug ===")
