"""
Link workflow: local directory -> git repository -> new hosted remote.

Steps, in order (none is revisited):

 1. identify         - resolve the username behind the access token
 2. ensure_local     - open or initialize the repository
 3. resolve_name     - explicit name, IDE project name, or directory name
 4. scaffold         - optional IDE project marker + ignores
 5. store_username   - record the username in local config
 6. readme           - write and commit README.md if missing
 7. check_remotes    - abort if any remote is configured
 8. check_name       - abort if the name is already taken remotely
 9. provision        - create the hosted repository
10. persist_linkage  - record the remote's metadata in local config
11. add_remote       - register the remote
12. push             - push the current branch and set its upstream
13. notify           - show the web URL (interactive runs only)

Nothing is rolled back. A failure after `provision` is raised as
PartialLinkageError because the hosted repository now exists unlinked.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from repolink.config_store import ConfigStore
from repolink.credentials import PushCredential, SshCredential, resolve_push_credential
from repolink.exceptions import (
    ConfigurationError,
    ConflictError,
    NameConflictError,
    PartialLinkageError,
    RemoteAlreadyConfiguredError,
    RepoLinkError,
)
from repolink.git import LocalRepoManager
from repolink.logging import get_logger
from repolink.provisioner import RemoteRepoProvisioner
from repolink.registry import RemoteRegistry
from repolink.scaffold import ProjectMarker, write_readme
from repolink.types.config import DEFAULT_SCHEMA, LinkageSchema
from repolink.types.local import Repository
from repolink.types.repos import Protocol, RemoteDescriptor

logger = get_logger("orchestrator")

DEFAULT_DESCRIPTION = "Work of staggering genius"
INITIAL_COMMIT_MESSAGE = "init"
README_COMMIT_MESSAGE = "add README.md"


class LinkStep(str, Enum):
    """Workflow step names, as reported in errors and LinkReport."""

    IDENTIFY = "identify"
    ENSURE_LOCAL = "ensure_local"
    RESOLVE_NAME = "resolve_name"
    SCAFFOLD = "scaffold"
    STORE_USERNAME = "store_username"
    README = "readme"
    CHECK_REMOTES = "check_remotes"
    CHECK_NAME = "check_name"
    PROVISION = "provision"
    PERSIST_LINKAGE = "persist_linkage"
    ADD_REMOTE = "add_remote"
    PUSH = "push"
    NOTIFY = "notify"


@dataclass
class LinkRequest:
    """What to link, and how."""

    path: str | Path = "."
    name: str | None = None
    description: str | None = None
    remote_name: str = "origin"
    protocol: Protocol | str = Protocol.HTTPS
    # Explicit push credential; must match protocol. Resolved from protocol/ssh_key when omitted
    credential: PushCredential | None = None
    ssh_key: str | Path | None = None
    scaffold: bool = True
    force: bool = False
    confirm: Callable[[str], bool] | None = None
    interactive: bool = False
    # Provider-specific flags for repository creation, e.g. {"private": True}
    options: dict[str, Any] = field(default_factory=dict)


@dataclass
class StepRecord:
    """Outcome of one workflow step."""

    step: str
    status: str  # "done", "skipped" or "failed"
    detail: str = ""


@dataclass
class LinkReport:
    """Everything the workflow learned and did."""

    request: LinkRequest
    identity: str | None = None
    repository: Repository | None = None
    name: str | None = None
    description: str | None = None
    descriptor: RemoteDescriptor | None = None
    remote_url: str | None = None
    steps: list[StepRecord] = field(default_factory=list)

    def record(self, step: LinkStep, status: str, detail: str = "") -> None:
        self.steps.append(StepRecord(step=step.value, status=status, detail=detail))

    @property
    def failed_step(self) -> str | None:
        for record in self.steps:
            if record.status == "failed":
                return record.step
        return None

    @property
    def success(self) -> bool:
        return self.failed_step is None and any(
            r.step == LinkStep.PUSH.value and r.status == "done" for r in self.steps
        )

    @property
    def partial(self) -> bool:
        """The hosted repository exists but a later step failed."""
        return self.descriptor is not None and self.failed_step is not None


@dataclass
class _LinkRun:
    request: LinkRequest
    report: LinkReport
    protocol: Protocol
    credential: PushCredential | None = None
    repo: Repository | None = None


# A step returns (status, detail)
StepResult = tuple[str, str]


class LinkOrchestrator:
    """
    Runs the link workflow over injected collaborators.

    Example:
        ```python
        from repolink import HostingClient, LinkOrchestrator, LinkRequest

        with HostingClient.from_env() as client:
            orchestrator = LinkOrchestrator.from_client(client)
            report = orchestrator.run(LinkRequest(path="./demo", options={"private": True}))
            print(report.descriptor.html_url)
        ```
    """

    def __init__(
        self,
        manager: LocalRepoManager,
        registry: RemoteRegistry,
        provisioner: RemoteRepoProvisioner,
        config_store: ConfigStore,
        schema: LinkageSchema = DEFAULT_SCHEMA,
        project_marker: ProjectMarker | None = None,
        notifier: Callable[[str], None] | None = None,
    ) -> None:
        self.manager = manager
        self.registry = registry
        self.provisioner = provisioner
        self.config_store = config_store
        self.schema = schema
        self.project_marker = project_marker
        self.notifier = notifier

    @classmethod
    def from_client(
        cls,
        client: Any,
        schema: LinkageSchema = DEFAULT_SCHEMA,
        project_marker: ProjectMarker | None = None,
        notifier: Callable[[str], None] | None = None,
        default_branch: str = "main",
    ) -> "LinkOrchestrator":
        """Wire the default collaborators around a HostingClient (or a mock)."""
        manager = LocalRepoManager(default_branch=default_branch)
        return cls(
            manager=manager,
            registry=RemoteRegistry(manager, client),
            provisioner=RemoteRepoProvisioner(client),
            config_store=ConfigStore(manager, schema),
            schema=schema,
            project_marker=project_marker,
            notifier=notifier,
        )

    def run(self, request: LinkRequest) -> LinkReport:
        """
        Execute every step in order.

        Returns:
            LinkReport describing each step

        Raises:
            RepoLinkError: The first failure, with ``step`` set. Failures after
                provisioning are wrapped in PartialLinkageError.
        """
        try:
            protocol = Protocol(request.protocol)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid protocol: {request.protocol!r}. Must be 'https' or 'ssh'"
            ) from e

        report = LinkReport(request=request)
        run = _LinkRun(request=request, report=report, protocol=protocol)

        plan: list[tuple[LinkStep, Callable[[_LinkRun], StepResult]]] = [
            (LinkStep.IDENTIFY, self._identify),
            (LinkStep.ENSURE_LOCAL, self._ensure_local),
            (LinkStep.RESOLVE_NAME, self._resolve_name),
            (LinkStep.SCAFFOLD, self._scaffold),
            (LinkStep.STORE_USERNAME, self._store_username),
            (LinkStep.README, self._readme),
            (LinkStep.CHECK_REMOTES, self._check_remotes),
            (LinkStep.CHECK_NAME, self._check_name),
            (LinkStep.PROVISION, self._provision),
            (LinkStep.PERSIST_LINKAGE, self._persist_linkage),
            (LinkStep.ADD_REMOTE, self._add_remote),
            (LinkStep.PUSH, self._push),
            (LinkStep.NOTIFY, self._notify),
        ]

        for step, action in plan:
            try:
                status, detail = action(run)
            except RepoLinkError as exc:
                report.record(step, "failed", str(exc))
                logger.error("Step '%s' failed: %s", step.value, exc)
                exc.step = step.value
                if report.descriptor is not None:
                    raise PartialLinkageError(step.value, exc, report.descriptor) from exc
                raise
            report.record(step, status, detail)

        return report

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _identify(self, run: _LinkRun) -> StepResult:
        identity = self.provisioner.resolve_identity()
        run.report.identity = identity
        logger.info("Hosting service username: %s", identity)

        run.credential = self._push_credential(run)
        if isinstance(run.credential, SshCredential):
            fingerprint = run.credential.fingerprint()
            if fingerprint:
                logger.info("Pushing with SSH key %s", fingerprint)
            else:
                logger.info("Pushing with the default ssh configuration / ssh-agent")
        return "done", f"user={identity} protocol={run.protocol.value}"

    def _ensure_local(self, run: _LinkRun) -> StepResult:
        request = run.request
        repo = self.manager.ensure_repository(
            request.path, force=request.force, confirm=request.confirm
        )
        run.repo = run.report.repository = repo

        if repo.fresh and self.manager.is_dirty(repo):
            commit = self.manager.commit_all(repo, INITIAL_COMMIT_MESSAGE)
            return "done", f"initialized {repo.path}, committed {commit.oid[:7]}"
        if repo.fresh:
            return "done", f"initialized {repo.path}"
        return "done", f"opened {repo.path}"

    def _resolve_name(self, run: _LinkRun) -> StepResult:
        repo = self._repo(run)
        name = run.request.name
        source = "argument"
        if not name and self.project_marker is not None:
            name = self.project_marker.project_name(repo.path)
            source = "project file"
        if not name:
            name = repo.path.name
            source = "directory"
        run.report.name = name
        logger.info("Name of directory / project / remote repository: %s", name)
        return "done", f"{name} (from {source})"

    def _scaffold(self, run: _LinkRun) -> StepResult:
        marker = self.project_marker
        if not run.request.scaffold or marker is None:
            return "skipped", "disabled"

        repo = self._repo(run)
        if marker.is_marked(repo.path):
            return "skipped", "already a project"

        logger.info("Adding project files to %s", repo.path)
        written = marker.apply(repo.path, self._name(run))
        commit = self.manager.commit_paths(repo, written, marker.commit_message)
        return "done", f"committed {commit.oid[:7]}"

    def _store_username(self, run: _LinkRun) -> StepResult:
        identity = run.report.identity or ""
        logger.info("Storing username '%s' in local git config", identity)
        self.config_store.set_fields(self._repo(run), {self.schema.user_field: identity})
        return "done", self.schema.key(self.schema.user_field)

    def _readme(self, run: _LinkRun) -> StepResult:
        repo = self._repo(run)
        description = run.request.description or DEFAULT_DESCRIPTION
        run.report.description = description

        readme, created = write_readme(repo.path, self._name(run), description)
        if not created:
            return "skipped", f"{readme.name} already exists"
        commit = self.manager.commit_paths(repo, [readme], README_COMMIT_MESSAGE)
        return "done", f"committed {commit.oid[:7]}"

    def _check_remotes(self, run: _LinkRun) -> StepResult:
        remotes = self.registry.list_remotes(self._repo(run))
        if remotes:
            raise RemoteAlreadyConfiguredError(remotes)
        return "done", "no remotes"

    def _check_name(self, run: _LinkRun) -> StepResult:
        name = self._name(run)
        owned = self.registry.list_owned_repo_names(run.report.identity or "")
        # Hosted repository names are case-insensitive
        if name.lower() in {n.lower() for n in owned}:
            raise NameConflictError(name)
        return "done", f"{len(owned)} owned repositories checked"

    def _provision(self, run: _LinkRun) -> StepResult:
        descriptor = self.provisioner.create_repository(
            self._name(run), run.report.description, run.request.options
        )
        run.report.descriptor = descriptor
        return "done", descriptor.html_url

    def _persist_linkage(self, run: _LinkRun) -> StepResult:
        linkage = self.schema.project(
            self._descriptor(run), run.protocol, run.request.remote_name
        )
        logger.info("Storing remote repository info in local git config")
        self.config_store.set_local(self._repo(run), linkage)
        return "done", f"{len(linkage)} keys"

    def _add_remote(self, run: _LinkRun) -> StepResult:
        url = self._descriptor(run).url_for(run.protocol)
        self.manager.add_remote(self._repo(run), run.request.remote_name, url)
        run.report.remote_url = url
        return "done", f"{run.request.remote_name} -> {url}"

    def _push(self, run: _LinkRun) -> StepResult:
        repo = self._repo(run)
        branch = self.manager.current_branch(repo)
        if branch is None:
            raise ConflictError("DETACHED_HEAD", f"{repo.path}: HEAD is not on a branch")

        remote = run.request.remote_name
        assert run.credential is not None
        logger.info("Pushing to '%s' and setting remote tracking branch", remote)
        self.manager.push(repo, remote, f"refs/heads/{branch}", run.credential)

        upstream = f"{remote}/{branch}"
        self.manager.set_upstream(repo, branch, upstream)
        return "done", f"{branch} -> {upstream}"

    def _notify(self, run: _LinkRun) -> StepResult:
        if not run.request.interactive or self.notifier is None:
            return "skipped", "non-interactive"
        url = self._descriptor(run).html_url
        self.notifier(url)
        return "done", url

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _push_credential(self, run: _LinkRun) -> PushCredential:
        explicit = run.request.credential
        if explicit is not None:
            if explicit.protocol is not run.protocol:
                raise ConfigurationError(
                    f"credential protocol '{explicit.protocol.value}' does not match "
                    f"requested protocol '{run.protocol.value}'"
                )
            return explicit
        return resolve_push_credential(
            run.protocol, self.provisioner.client.token, run.request.ssh_key
        )

    @staticmethod
    def _repo(run: _LinkRun) -> Repository:
        assert run.repo is not None
        return run.repo

    @staticmethod
    def _name(run: _LinkRun) -> str:
        assert run.report.name is not None
        return run.report.name

    @staticmethod
    def _descriptor(run: _LinkRun) -> RemoteDescriptor:
        assert run.report.descriptor is not None
        return run.report.descriptor
