"""repolink command line interface."""

import logging
import os
import sys
from pathlib import Path
from typing import Any

import click

from repolink import __version__
from repolink.client import HostingClient
from repolink.config_store import ConfigStore
from repolink.credentials import DEFAULT_TOKEN_ENV_VARS, resolve_pat
from repolink.exceptions import AuthenticationError, PartialLinkageError, RepoLinkError
from repolink.git import LocalRepoManager
from repolink.logging import configure_logging
from repolink.orchestrator import LinkOrchestrator, LinkReport, LinkRequest
from repolink.scaffold import RStudioProjectMarker
from repolink.types.config import DEFAULT_SCHEMA

_VERBOSITY = {0: None, 1: logging.INFO, 2: logging.DEBUG}


def _parse_kv_pairs(pairs: tuple[str, ...]) -> dict[str, Any]:
    """Parse key=value options; true/false become booleans."""
    result: dict[str, Any] = {}
    for p in pairs:
        if "=" not in p:
            raise click.BadParameter(f"expected key=value, got {p!r}", param_hint="--option")
        k, v = p.split("=", 1)
        value: Any = v.strip()
        if value.lower() in ("true", "false"):
            value = value.lower() == "true"
        result[k.strip()] = value
    return result


def _print_report(report: LinkReport) -> None:
    for step in report.steps:
        detail = f"  ({step.detail})" if step.detail else ""
        click.echo(f"  [{step.status:8s}] {step.step}{detail}")


def _fail(exc: RepoLinkError) -> None:
    prefix = f"step '{exc.step}' failed: " if exc.step else ""
    click.echo(f"Error: {prefix}{exc}", err=True)
    if isinstance(exc, PartialLinkageError):
        click.echo(
            f"The remote repository {exc.descriptor.html_url} exists but is not fully "
            "linked. Finish the remaining steps by hand or delete it and run again.",
            err=True,
        )
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", count=True, help="-v for progress, -vv for git/HTTP detail")
def main(verbose: int) -> None:
    """repolink - link a local project to a new hosted repository."""
    level = _VERBOSITY.get(min(verbose, 2))
    if level is None:
        level = logging.getLevelName(os.getenv("REPOLINK_LOG_LEVEL", "WARNING").upper())
        if not isinstance(level, int):
            level = logging.WARNING
    configure_logging(level=level, format_string="%(levelname)s %(name)s: %(message)s")


@main.command(name="init")
@click.argument("path", default=".", type=click.Path(file_okay=False, path_type=Path))
@click.option("--name", default=None, help="Repository name (default: project or directory name)")
@click.option("--description", default=None, help="Short repository description")
@click.option("--remote-name", default="origin", show_default=True, help="Name of the new remote")
@click.option(
    "--protocol",
    type=click.Choice(["https", "ssh"]),
    default="https",
    show_default=True,
    help="Transfer protocol for the remote URL and push",
)
@click.option("--ssh-key", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Private key for ssh pushes (default: ~/.ssh/id_ed25519 or ~/.ssh/id_rsa)")
@click.option("--token", default=None, help=f"Access token (default: ${' / $'.join(DEFAULT_TOKEN_ENV_VARS)})")
@click.option("--rstudio/--no-rstudio", default=True, show_default=True,
              help="Make the directory an RStudio project")
@click.option("--private", is_flag=True, help="Create a private repository")
@click.option("--option", "options", multiple=True, help="Extra API field key=value (repeatable)")
@click.option("--force", is_flag=True, help="Initialize non-empty directories without asking")
@click.option("--default-branch", default="main", show_default=True,
              help="Initial branch for newly initialized repositories")
def init_command(path: Path, **kwargs: Any) -> None:
    """Put PATH under version control and link it to a new hosted repository."""
    options = _parse_kv_pairs(kwargs["options"])
    if kwargs["private"]:
        options["private"] = True

    token = kwargs["token"] or resolve_pat()
    if not token:
        _fail(AuthenticationError(
            "MISSING_TOKEN",
            f"No access token; pass --token or set {' or '.join(DEFAULT_TOKEN_ENV_VARS)}",
        ))
        return

    interactive = sys.stdin.isatty()
    request = LinkRequest(
        path=path,
        name=kwargs["name"],
        description=kwargs["description"],
        remote_name=kwargs["remote_name"],
        protocol=kwargs["protocol"],
        ssh_key=kwargs["ssh_key"],
        scaffold=kwargs["rstudio"],
        force=kwargs["force"],
        confirm=(lambda prompt: click.confirm(prompt, default=False)) if interactive else None,
        interactive=interactive,
        options=options,
    )

    base_url = os.environ.get("REPOLINK_API_URL", HostingClient.DEFAULT_BASE_URL)
    with HostingClient(token=token, base_url=base_url) as client:
        orchestrator = LinkOrchestrator.from_client(
            client,
            project_marker=RStudioProjectMarker(),
            notifier=lambda url: click.echo(f"View the new repository at {url}"),
            default_branch=kwargs["default_branch"],
        )
        try:
            report = orchestrator.run(request)
        except RepoLinkError as exc:
            _fail(exc)
            return

    _print_report(report)
    if report.descriptor is not None:
        click.echo(f"Linked {report.repository.path if report.repository else path} "
                   f"to {report.remote_url}")


@main.command(name="config")
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
def config_command(path: Path) -> None:
    """Show the linkage metadata stored in PATH's local git config."""
    manager = LocalRepoManager()
    store = ConfigStore(manager, DEFAULT_SCHEMA)
    try:
        repo = manager.open_repository(path)
        linkage = store.read_linkage(repo)
    except RepoLinkError as exc:
        _fail(exc)
        return

    if not linkage:
        click.echo("No linkage recorded.")
        return
    for key in sorted(linkage):
        click.echo(f"{key}={linkage[key]}")


if __name__ == "__main__":
    main()
