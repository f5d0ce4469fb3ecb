import logging
from typing import Any
from urllib.parse import quote

import requests
from pydantic import BaseModel, Field

from models.achievements import CommitRecord, FileRevision

logger = logging.getLogger(__name__)


class GitHubConfig(BaseModel):
    api_url: str = "https://api.github.com"
    token: str
    owner: str
    repo: str
    user_agent: str = "achievements-worker"
    timeout: float = 30.0


class CommitRejectedError(Exception):
    """The contents API refused a commit, e.g. because the base sha is stale"""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"GitHub rejected commit with status {status_code}")


class GitHubContentsClient(BaseModel):
    """Reads and writes single files through the GitHub contents API.

    `http` is anything exposing `request(method, url, **kwargs)` and
    returning a requests-style response; a `requests.Session` by default.
    """
    config: GitHubConfig
    http: Any = Field(default=None, exclude=True)

    class Config:
        arbitrary_types_allowed = True

    def __init__(self, config: GitHubConfig, http: Any = None, **kwargs):
        super().__init__(config=config, **kwargs)
        self.http = http if http is not None else requests.Session()

    def _contents_url(self, path: str) -> str:
        return (
            f"{self.config.api_url.rstrip('/')}/repos/"
            f"{self.config.owner}/{self.config.repo}/contents/{quote(path)}"
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.token}",
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": self.config.user_agent,
        }

    def get_revision(self, path: str, branch: str) -> FileRevision | None:
        """Get current revision of a file, or None if it cannot be read"""
        response = self.http.request(
            "GET",
            self._contents_url(path),
            params={"ref": branch},
            headers=self._headers(),
            timeout=self.config.timeout,
        )
        if not response.ok:
            logger.debug(
                f"No readable revision for {path}@{branch} (status {response.status_code})"
            )
            return None
        data = response.json()
        # A directory path yields a list of entries
        if not isinstance(data, dict):
            return None
        sha = data.get("sha")
        if not sha:
            return None
        return FileRevision(path=path, branch=branch, sha=sha)

    def commit(self, path: str, record: CommitRecord) -> str | None:
        """Write a file, returning the sha of the new content"""
        headers = self._headers()
        headers["Content-Type"] = "application/json"
        response = self.http.request(
            "PUT",
            self._contents_url(path),
            json=record.to_payload(),
            headers=headers,
            timeout=self.config.timeout,
        )
        if not response.ok:
            raise CommitRejectedError(response.status_code, response.text)
        try:
            return response.json().get("content", {}).get("sha")
        except ValueError:
            return None
