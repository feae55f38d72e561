"""
Local repository management for repolink.

Drives the ``git`` executable to open or initialize a work tree, inspect
and commit changes, manage remotes, and push with upstream tracking.
"""

import os
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from repolink.credentials import PushCredential
from repolink.exceptions import (
    AlreadyExistsConflictError,
    ConfigurationError,
    GitCommandError,
    NotFoundError,
    NothingToCommitError,
)
from repolink.logging import get_logger, log_git_command, mask_sensitive_data
from repolink.types.local import CommitRef, Repository

logger = get_logger("git")

FALLBACK_USER_NAME = "repolink"
FALLBACK_USER_EMAIL = "repolink@localhost"


class LocalRepoManager:
    """
    Operations on local git repositories.

    Example:
        ```python
        from repolink.git import LocalRepoManager

        git = LocalRepoManager()
        repo = git.ensure_repository("./my-project")
        if git.is_dirty(repo):
            git.commit_all(repo, "init")
        ```
    """

    def __init__(self, default_branch: str = "main", executable: str = "git") -> None:
        """
        Initialize the manager.

        Args:
            default_branch: Initial branch name for newly created repositories
            executable: git executable to run
        """
        self.default_branch = default_branch
        self.executable = executable

    # ------------------------------------------------------------------
    # Repository lifecycle
    # ------------------------------------------------------------------

    def ensure_repository(
        self,
        path: str | Path,
        force: bool = False,
        confirm: Callable[[str], bool] | None = None,
    ) -> Repository:
        """
        Open the repository at ``path``, initializing one if needed.

        An existing repository is opened as-is; its history and config are
        left alone. A missing or empty directory is initialized. A non-empty
        directory that is not a repository, or one nested inside another
        repository's work tree, is only initialized when ``force`` is set or
        ``confirm`` approves.

        Args:
            path: Directory to use
            force: Initialize ambiguous directories without asking
            confirm: Callback asked to approve initializing an ambiguous directory

        Returns:
            Repository handle; ``fresh`` is True if ``git init`` ran

        Raises:
            AlreadyExistsConflictError: If the directory state is ambiguous and
                initialization was not approved, or ``path`` is a file
        """
        path = Path(path).expanduser().resolve()

        if path.exists() and not path.is_dir():
            raise AlreadyExistsConflictError(str(path), "exists and is not a directory")

        if path.is_dir():
            toplevel = self._toplevel(path)
            if toplevel == path:
                logger.info("Using existing git repository at %s", path)
                return Repository(path=path, branch=self._branch_at(path), fresh=False)

            reason = None
            if toplevel is not None:
                reason = f"is inside the work tree of {toplevel}"
            elif any(path.iterdir()):
                reason = "is not empty and is not a git repository"

            if reason is not None and not force:
                prompt = f"{path} {reason}. Initialize a git repository here?"
                if confirm is None or not confirm(prompt):
                    raise AlreadyExistsConflictError(str(path), reason)
        else:
            path.mkdir(parents=True)

        self._run(["init", f"--initial-branch={self.default_branch}", str(path)], cwd=path)
        logger.info("Initialized git repository at %s", path)
        return Repository(path=path, branch=self._branch_at(path), fresh=True)

    def open_repository(self, path: str | Path) -> Repository:
        """
        Open an existing repository without initializing anything.

        Raises:
            NotFoundError: If ``path`` is not the top level of a work tree
        """
        path = Path(path).expanduser().resolve()
        if not path.is_dir() or self._toplevel(path) != path:
            raise NotFoundError(
                "NOT_A_REPOSITORY", f"{path} is not the top level of a git repository"
            )
        return Repository(path=path, branch=self._branch_at(path), fresh=False)

    def current_branch(self, repo: Repository) -> str | None:
        """Return the checked-out branch name (None when HEAD is detached)."""
        repo.branch = self._branch_at(repo.path)
        return repo.branch

    # ------------------------------------------------------------------
    # Working tree and commits
    # ------------------------------------------------------------------

    def is_dirty(self, repo: Repository) -> bool:
        """Return True if the work tree has untracked or modified files."""
        result = self._run(["status", "--porcelain"], cwd=repo.path)
        repo.dirty = bool(result.stdout.strip())
        return repo.dirty

    def commit_all(self, repo: Repository, message: str) -> CommitRef:
        """
        Stage every pending change and commit it.

        Raises:
            NothingToCommitError: If the work tree is clean
        """
        self._run(["add", "--all"], cwd=repo.path)
        if not self._has_staged(repo):
            raise NothingToCommitError(["git", "commit", "-m", message])
        return self._commit(repo, message)

    def commit_paths(
        self, repo: Repository, paths: Sequence[str | Path], message: str
    ) -> CommitRef:
        """
        Stage and commit only ``paths``, leaving other changes alone.

        Raises:
            NothingToCommitError: If none of the paths changed
        """
        rel = [self._relative(repo, p) for p in paths]
        self._run(["add", "--", *rel], cwd=repo.path)
        if not self._has_staged(repo, rel):
            raise NothingToCommitError(["git", "commit", "-m", message, "--", *rel])
        return self._commit(repo, message, rel)

    def head(self, repo: Repository) -> CommitRef | None:
        """Return the commit at HEAD, or None on an unborn branch."""
        result = self._run(["rev-parse", "--verify", "-q", "HEAD"], cwd=repo.path, check=False)
        if result.returncode != 0:
            return None
        oid = result.stdout.strip()
        log = self._run(["log", "-1", "--format=%B", oid], cwd=repo.path)
        return CommitRef(oid=oid, message=log.stdout.strip())

    def commit_count(self, repo: Repository) -> int:
        """Return the number of commits reachable from HEAD."""
        if self.head(repo) is None:
            return 0
        result = self._run(["rev-list", "--count", "HEAD"], cwd=repo.path)
        return int(result.stdout.strip())

    # ------------------------------------------------------------------
    # Remotes
    # ------------------------------------------------------------------

    def list_remotes(self, repo: Repository) -> dict[str, str]:
        """Return configured remotes as a name -> URL mapping."""
        result = self._run(["remote"], cwd=repo.path)
        remotes: dict[str, str] = {}
        for name in result.stdout.split():
            url = self._run(["remote", "get-url", name], cwd=repo.path)
            remotes[name] = url.stdout.strip()
        return remotes

    def add_remote(self, repo: Repository, name: str, url: str) -> None:
        """Register a remote named ``name`` pointing at ``url``."""
        self._run(["remote", "add", name, url], cwd=repo.path)
        logger.info("Added remote '%s': %s", name, url)

    def push(
        self,
        repo: Repository,
        remote: str,
        refspec: str,
        credential: PushCredential,
    ) -> None:
        """
        Push ``refspec`` to ``remote`` using ``credential``.

        Raises:
            GitCommandError: If the push is rejected or authentication fails
        """
        self._run(
            ["push", remote, refspec],
            cwd=repo.path,
            config=credential.git_config(),
            env=credential.git_env(),
        )
        logger.info("Pushed %s to '%s'", refspec, remote)

    def set_upstream(self, repo: Repository, branch: str, upstream: str) -> None:
        """Make ``branch`` track ``upstream`` (e.g. "origin/main")."""
        self._run(["branch", f"--set-upstream-to={upstream}", branch], cwd=repo.path)

    def upstream(self, repo: Repository, branch: str) -> str | None:
        """Return the upstream of ``branch`` (e.g. "origin/main"), or None."""
        result = self._run(
            ["rev-parse", "--abbrev-ref", f"{branch}@{{upstream}}"],
            cwd=repo.path,
            check=False,
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def run(
        self, repo: Repository, *args: str, check: bool = True
    ) -> subprocess.CompletedProcess[str]:
        """Run an arbitrary git subcommand inside ``repo``."""
        return self._run(list(args), cwd=repo.path, check=check)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run(
        self,
        args: list[str],
        cwd: Path,
        check: bool = True,
        config: list[str] | None = None,
        env: dict[str, str] | None = None,
    ) -> subprocess.CompletedProcess[str]:
        cmd = [self.executable, *(config or []), *args]
        log_git_command(cmd, str(cwd))

        proc_env = None
        if env:
            proc_env = os.environ.copy()
            proc_env.update(env)

        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                env=proc_env,
            )
        except FileNotFoundError as e:
            raise ConfigurationError(f"git executable not found: {self.executable}") from e

        if check and result.returncode != 0:
            raise GitCommandError(
                [mask_sensitive_data(part) for part in cmd],
                result.returncode,
                mask_sensitive_data(result.stderr),
            )
        return result

    def _toplevel(self, path: Path) -> Path | None:
        result = self._run(["rev-parse", "--show-toplevel"], cwd=path, check=False)
        if result.returncode != 0 or not result.stdout.strip():
            return None
        return Path(result.stdout.strip()).resolve()

    def _branch_at(self, path: Path) -> str | None:
        result = self._run(["symbolic-ref", "--short", "-q", "HEAD"], cwd=path, check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def _has_staged(self, repo: Repository, paths: Sequence[str] = ()) -> bool:
        args = ["status", "--porcelain"]
        if paths:
            args.extend(["--", *paths])
        result = self._run(args, cwd=repo.path)
        # First porcelain column is the index status
        return any(
            line and line[0] not in " ?!" for line in result.stdout.splitlines()
        )

    def _commit(
        self, repo: Repository, message: str, paths: Sequence[str] = ()
    ) -> CommitRef:
        args = ["commit", "-q", "-m", message]
        if paths:
            args.extend(["--", *paths])
        self._run(args, cwd=repo.path, config=self._identity_config(repo))

        head = self.head(repo)
        if head is None:
            raise GitCommandError(["git", *args], 0, "commit did not create HEAD")
        repo.branch = self._branch_at(repo.path)
        logger.info("Committed %s: %s", head.oid[:7], message)
        return head

    def _identity_config(self, repo: Repository) -> list[str]:
        """Fallback committer identity for machines without user.name/user.email."""
        config: list[str] = []
        for key, fallback in (
            ("user.name", FALLBACK_USER_NAME),
            ("user.email", FALLBACK_USER_EMAIL),
        ):
            result = self._run(["config", "--get", key], cwd=repo.path, check=False)
            if result.returncode != 0 or not result.stdout.strip():
                config.extend(["-c", f"{key}={fallback}"])
        return config

    def _relative(self, repo: Repository, path: str | Path) -> str:
        p = Path(path)
        if p.is_absolute():
            p = p.resolve().relative_to(repo.path)
        return p.as_posix()
