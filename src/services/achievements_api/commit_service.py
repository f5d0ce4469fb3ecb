import base64
import json
import logging

from fastapi import HTTPException

from models.achievements import (
    CSV_HEADER_PREFIX,
    CommitRecord,
    EndpointConfig,
    RequestAction,
    SaveRequest,
    SaveResponse,
    VerifyResponse,
)
from models.infrastructure.github_client import CommitRejectedError, GitHubContentsClient
from models.security.digest import Digest, sha256_hex, timing_safe_equal

logger = logging.getLogger(__name__)


class CommitService:
    """Password-gated save of the achievements CSV into the remote store"""

    def __init__(
        self,
        config: EndpointConfig,
        store: GitHubContentsClient,
        digest: Digest = sha256_hex,
    ):
        self.config = config
        self.store = store
        self.digest = digest

    def handle(self, body: bytes) -> dict:
        """Handle one raw POST body, returning the success payload.

        Client errors are raised as HTTPException. A body that is not UTF-8
        or not a JSON object raises ValueError and is reported like any other
        internal failure. Both size ceilings count characters, not bytes.
        """
        text = body.decode("utf-8")
        if len(text) > self.config.max_body_size:
            raise HTTPException(status_code=413, detail="Payload too large")

        request = self.parse(text)
        self.authenticate(request.password)

        if request.action == RequestAction.VERIFY.value:
            return VerifyResponse().model_dump()

        csv = self.validate_csv(request.csv)
        self.save(csv)
        return SaveResponse().model_dump()

    @staticmethod
    def parse(text: str) -> SaveRequest:
        parsed = json.loads(text)
        if not isinstance(parsed, dict):
            raise ValueError("Request body is not a JSON object")
        return SaveRequest.model_validate(parsed)

    def authenticate(self, password) -> None:
        if not password or not isinstance(password, str):
            raise HTTPException(status_code=400, detail="Missing password")

        password_hash = self.digest(password.encode("utf-8"))
        if not timing_safe_equal(password_hash, self.config.password_hash):
            logger.warning("Rejected request with invalid password")
            raise HTTPException(status_code=403, detail="Invalid password")

    def validate_csv(self, csv) -> str:
        if not csv or not isinstance(csv, str):
            raise HTTPException(status_code=400, detail="Missing csv")
        if len(csv) > self.config.max_csv_size:
            raise HTTPException(status_code=413, detail="CSV too large")
        if not csv.startswith(CSV_HEADER_PREFIX):
            raise HTTPException(status_code=400, detail="Invalid CSV format")
        return csv

    def build_commit(self, csv: str, sha: str | None) -> CommitRecord:
        content = base64.b64encode(csv.encode("utf-8")).decode("ascii")
        return CommitRecord(
            message=self.config.commit_message,
            content=content,
            branch=self.config.branch,
            sha=sha,
        )

    def save(self, csv: str) -> None:
        """Read-modify-write of the tracked file.

        The sha read here is sent back with the commit so the store rejects
        the write if the file changed in between. A missing file means no sha
        and the same commit creates it.
        """
        revision = self.store.get_revision(self.config.file_path, self.config.branch)
        base_sha = revision.sha if revision is not None else None

        record = self.build_commit(csv, base_sha)
        try:
            new_sha = self.store.commit(self.config.file_path, record)
        except CommitRejectedError as e:
            logger.error(f"GitHub API error ({e.status_code}): {e.body}")
            raise HTTPException(status_code=500, detail="Save failed")

        logger.info(
            f"Committed {self.config.file_path}@{self.config.branch}: "
            f"{base_sha or 'new file'} -> {new_sha}"
        )
