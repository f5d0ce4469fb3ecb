import hashlib
import logging
import os
import threading

import pytest

from models.achievements import CommitRecord, EndpointConfig, FileRevision
from models.infrastructure.github_client import CommitRejectedError

PASSWORD = "correct horse battery staple"
PASSWORD_HASH = hashlib.sha256(PASSWORD.encode("utf-8")).hexdigest()
FILE_PATH = "achievements/achievements.csv"
BRANCH = "main"

VALID_CSV = (
    "id,name,description,prerequisites,icon\n"
    "1,First Steps,Walk — then run,,boot\n"
    "2,Café Regular,Order a café crème,1,cup\n"
)


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Configure logging for all test sessions"""
    log_level_str = os.getenv("TEST_LOG_LEVEL", "INFO")
    log_level = logging.DEBUG if log_level_str == "DEBUG" else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
        force=True,
    )


class MockStoreClient:
    """In-memory contents store that only accepts writes based on the current sha"""

    def __init__(self, files: dict[str, str] | None = None, read_barrier: threading.Barrier | None = None):
        self.files: dict[str, tuple[str, str]] = {}
        self.reads = 0
        self.commits: list[CommitRecord] = []
        self.rejected: list[CommitRecord] = []
        self.read_barrier = read_barrier
        self._lock = threading.Lock()
        self._counter = 0
        for path, content in (files or {}).items():
            self.files[path] = (self._next_sha(), content)

    def _next_sha(self) -> str:
        self._counter += 1
        return hashlib.sha1(f"blob-{self._counter}".encode()).hexdigest()

    def get_revision(self, path: str, branch: str) -> FileRevision | None:
        with self._lock:
            self.reads += 1
            current = self.files.get(path)
        if self.read_barrier is not None:
            self.read_barrier.wait(timeout=5)
        if current is None:
            return None
        return FileRevision(path=path, branch=branch, sha=current[0])

    def commit(self, path: str, record: CommitRecord) -> str:
        with self._lock:
            current = self.files.get(path)
            current_sha = current[0] if current else None
            if record.sha != current_sha:
                self.rejected.append(record)
                raise CommitRejectedError(409, f'{{"message": "{path} does not match {record.sha}"}}')
            new_sha = self._next_sha()
            self.files[path] = (new_sha, record.content)
            self.commits.append(record)
            return new_sha

    @property
    def calls(self) -> int:
        return self.reads + len(self.commits) + len(self.rejected)


@pytest.fixture
def endpoint_config() -> EndpointConfig:
    return EndpointConfig(
        password_hash=PASSWORD_HASH,
        file_path=FILE_PATH,
        branch=BRANCH,
        max_csv_size=50000,
        commit_message="Update achievements data",
    )


@pytest.fixture
def store() -> MockStoreClient:
    return MockStoreClient()
