"""RepositoryMirror - copies git history and wiki between repositories."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from projsync.logging import sanitize_for_log
from projsync.migration.exceptions import MirrorError

logger = logging.getLogger("projsync.migration.mirror")


class RepositoryMirror:
    """Mirrors repositories with `git clone --bare` and `git push --mirror`.

    Both repositories belong to the same owner. Temporary clones are created
    under `work_dir` and removed afterwards.
    """

    def __init__(
        self,
        owner: str,
        token: str,
        work_dir: str | Path = ".",
        host: str = "github.com",
    ) -> None:
        self.owner = owner
        self.token = token
        self.work_dir = Path(work_dir)
        self.host = host

    def _remote(self, repo: str, suffix: str = ".git") -> str:
        return f"https://x-access-token:{self.token}@{self.host}/{self.owner}/{repo}{suffix}"

    def _run_git(self, *args: str, cwd: Path | None = None) -> str:
        """Run a git command.

        Raises:
            subprocess.CalledProcessError: If command fails
        """
        result = subprocess.run(
            ["git", *args],
            cwd=cwd or self.work_dir,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()

    def mirror(self, origin: str, target: str) -> None:
        """Push every ref of `origin` to `target`.

        Raises:
            MirrorError: If cloning or pushing fails
        """
        clone_dir = self.work_dir / f"{origin}.git"
        logger.info("Cloning %s/%s repository...", self.owner, origin)
        try:
            self._run_git("clone", "--bare", self._remote(origin), str(clone_dir))
            logger.info("Pushing to %s/%s repository...", self.owner, target)
            self._run_git("push", "--mirror", self._remote(target), cwd=clone_dir)
        except subprocess.CalledProcessError as e:
            stderr = sanitize_for_log(e.stderr or "")
            logger.error("Failed to mirror %s to %s: %s", origin, target, stderr)
            raise MirrorError(f"Failed to mirror '{origin}' to '{target}': {stderr}") from e
        finally:
            shutil.rmtree(clone_dir, ignore_errors=True)

    def mirror_wiki(self, origin: str, target: str) -> bool:
        """Copy the wiki; failures are logged, not raised.

        The target wiki must already have a first page, otherwise GitHub has
        no wiki repository to push to.

        Returns:
            True if the wiki was pushed
        """
        clone_dir = self.work_dir / f"{origin}.wiki"
        logger.info("Copying wiki...")
        try:
            self._run_git("clone", self._remote(origin, ".wiki.git"), str(clone_dir))
            self._run_git(
                "remote", "set-url", "origin", self._remote(target, ".wiki.git"), cwd=clone_dir
            )
            self._run_git("push", "--mirror", cwd=clone_dir)
        except subprocess.CalledProcessError as e:
            logger.warning("Wiki clone/push failed: %s", sanitize_for_log(e.stderr or str(e)))
            return False
        finally:
            shutil.rmtree(clone_dir, ignore_errors=True)
        logger.info("Wiki pushed to %s/%s", self.owner, target)
        return True
