from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from subprocess import PIPE, CalledProcessError, run
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


def _environ_without_git_dir() -> Dict[str, str]:
    # GIT_DIR would override the working directory we run git in.
    return {key: value for key, value in os.environ.items() if not key.upper().startswith("GIT_DIR")}


def _git(args: List[str], cwd: str) -> str:
    completed = run(
        ["git", *args],
        cwd=cwd,
        env=_environ_without_git_dir(),
        stdout=PIPE,
        stderr=PIPE,
        text=True,
        check=True,
    )
    return completed.stdout.strip()


class GitEnvironment:
    """
    Git details of the scanned tree, used to decorate the output.

    Each value is looked up once, on first access. A failing git command
    (no git binary, not a repository, no configured user) yields "".
    """

    def __init__(self, root: Path | str) -> None:
        self.root = str(Path(root).expanduser().absolute())
        self._lock = threading.Lock()
        self._cache: Dict[str, str] = {}

    def run(self, *args: str) -> str:
        try:
            return _git(list(args), self.root)
        except CalledProcessError as exc:
            logger.debug(f"git {' '.join(args)} failed: {exc.stderr.strip() if exc.stderr else exc}")
            return ""
        except OSError as exc:
            logger.debug(f"Cannot run git in {self.root}: {exc}")
            return ""

    def _cached(self, key: str, *args: str) -> str:
        with self._lock:
            if key not in self._cache:
                self._cache[key] = self.run(*args)
            return self._cache[key]

    @property
    def branch(self) -> str:
        return self._cached("branch", "rev-parse", "--abbrev-ref", "HEAD")

    @property
    def author(self) -> str:
        return self._cached("author", "config", "user.name")

    @property
    def project(self) -> str:
        toplevel = self._cached("toplevel", "rev-parse", "--show-toplevel")
        return Path(toplevel).name if toplevel else ""

    def as_dict(self) -> Dict[str, str]:
        return {
            "root": self.root,
            "branch": self.branch,
            "author": self.author,
            "project": self.project,
        }


def describe_environment(root: Path | str, env: Optional[GitEnvironment] = None) -> Dict[str, str]:
    env = env or GitEnvironment(root)
    details = env.as_dict()
    logger.info(
        f"Current root is {details['root']}, branch {details['branch'] or '-'}, "
        f"author {details['author'] or '-'}, project {details['project'] or '-'}"
    )
    return details
