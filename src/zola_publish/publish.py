"""Publish and preview collaborators.

Thin wrappers over ``git`` and ``zola serve``.  The sync core never calls
these; the CLI does, and records the outcome in the activity log.  Each
collaborator is a small protocol so callers can substitute their own.
"""

from __future__ import annotations

import logging
import re
import socket
import subprocess
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel

from zola_publish.config import Settings
from zola_publish.sync.enumerator import normalize_separators

logger = logging.getLogger(__name__)

PREVIEW_HOST = "127.0.0.1"
PREVIEW_PORT = 1111
GIT_TIMEOUT = 120

_POSTS_SUFFIX_RE = re.compile(r"/content/posts/?$")


def site_project_root(settings: Settings) -> Path:
    """Site project root: ``site_root`` if set, else the posts path
    without its trailing ``content/posts``."""
    if settings.site_root:
        return Path(normalize_separators(settings.site_root))
    posts = normalize_separators(settings.site_posts_path)
    return Path(_POSTS_SUFFIX_RE.sub("", posts) or "/")


# ---------------------------------------------------------------------------
# Publisher
# ---------------------------------------------------------------------------


class PublishOutcome(str, Enum):
    PUBLISHED = "published"
    NOTHING_TO_COMMIT = "nothing_to_commit"
    FAILED = "failed"


class PublishResult(BaseModel):
    outcome: PublishOutcome
    message: str
    details: list[str] = []

    model_config = {"frozen": True}


class Publisher(Protocol):
    def publish(self, workdir: Path) -> PublishResult: ...  # pragma: no cover


class GitPublisher:
    """Stage, commit and push everything in the site working tree.

    Args:
        branch: Remote branch to push to.
        remote: Remote name.
        repo_url: Shown in the result details only.
    """

    def __init__(
        self, branch: str = "main", remote: str = "origin", repo_url: str = ""
    ) -> None:
        self.branch = branch
        self.remote = remote
        self.repo_url = repo_url

    def _git(self, workdir: Path, *args: str) -> subprocess.CompletedProcess:
        logger.debug("git %s (cwd=%s)", " ".join(args), workdir)
        return subprocess.run(
            ["git", *args],
            cwd=str(workdir),
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
        )

    def publish(self, workdir: Path) -> PublishResult:
        message = f"Update blog posts - {date.today().isoformat()}"
        try:
            added = self._git(workdir, "add", ".")
            if added.returncode != 0:
                return self._failed("git add", added)

            committed = self._git(workdir, "commit", "-m", message)
            if committed.returncode != 0:
                output = committed.stdout + committed.stderr
                if "nothing to commit" in output:
                    return PublishResult(
                        outcome=PublishOutcome.NOTHING_TO_COMMIT,
                        message="No new changes to commit",
                    )
                return self._failed("git commit", committed)

            pushed = self._git(workdir, "push", self.remote, self.branch)
            if pushed.returncode != 0:
                return self._failed("git push", pushed)
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.error("Publishing failed: %s", exc)
            return PublishResult(
                outcome=PublishOutcome.FAILED, message=str(exc)
            )

        details = [f"Branch: {self.branch}", f"Commit: {message}"]
        if self.repo_url:
            details.insert(0, f"Repository: {self.repo_url}")
        return PublishResult(
            outcome=PublishOutcome.PUBLISHED,
            message="Published successfully",
            details=details,
        )

    @staticmethod
    def _failed(step: str, proc: subprocess.CompletedProcess) -> PublishResult:
        error = (proc.stderr or proc.stdout).strip()
        logger.error("%s failed: %s", step, error)
        return PublishResult(
            outcome=PublishOutcome.FAILED,
            message=f"{step} failed",
            details=[error] if error else [],
        )


# ---------------------------------------------------------------------------
# Preview launcher
# ---------------------------------------------------------------------------


class PreviewStatus(str, Enum):
    STARTED = "started"
    ALREADY_RUNNING = "already_running"
    FAILED = "failed"


class PreviewLauncher(Protocol):
    def launch(self, project_root: Path) -> PreviewStatus: ...  # pragma: no cover


def port_in_use(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.settimeout(0.5)
        return sock.connect_ex((host, port)) == 0


class ZolaPreviewLauncher:
    """Start ``zola serve`` in the background unless the port is taken."""

    def __init__(self, host: str = PREVIEW_HOST, port: int = PREVIEW_PORT) -> None:
        self.host = host
        self.port = port

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def launch(self, project_root: Path) -> PreviewStatus:
        if port_in_use(self.host, self.port):
            logger.info("Preview already running at %s", self.url)
            return PreviewStatus.ALREADY_RUNNING

        try:
            subprocess.Popen(
                [
                    "zola",
                    "serve",
                    "--interface",
                    self.host,
                    "--port",
                    str(self.port),
                ],
                cwd=str(project_root),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            logger.error("Failed to launch preview: %s", exc)
            return PreviewStatus.FAILED

        logger.info("Preview starting at %s", self.url)
        return PreviewStatus.STARTED
