#!/usr/bin/env python3
"""
repolink - Complete Link Workflow Example

Creates a real repository on the hosting service and pushes a new local
project to it:
1. Resolve the identity behind GITHUB_PAT / GITHUB_TOKEN
2. Initialize the project directory and make it an RStudio project
3. Create the hosted repository (private)
4. Record the linkage and push

Usage:
    GITHUB_PAT=ghp_... python examples/python/link_workflow.py ./my-project
"""

import logging
import sys
from pathlib import Path

# Add SDK to path for development
sdk_path = Path(__file__).parent.parent.parent / "sdk" / "python"
sys.path.insert(0, str(sdk_path))

from repolink import (  # noqa: E402
    HostingClient,
    LinkOrchestrator,
    LinkRequest,
    PartialLinkageError,
    RepoLinkError,
    RStudioProjectMarker,
    configure_logging,
)


def main() -> None:
    """Run the complete link workflow."""
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)

    configure_logging(level=logging.INFO)
    path = Path(sys.argv[1])

    print("=== repolink Example ===\n")

    try:
        with HostingClient.from_env() as client:
            orchestrator = LinkOrchestrator.from_client(
                client,
                project_marker=RStudioProjectMarker(),
                notifier=lambda url: print(f"\nView it at {url}"),
            )
            report = orchestrator.run(
                LinkRequest(
                    path=path,
                    description="Created by the repolink example",
                    options={"private": True},
                    interactive=True,
                )
            )
    except PartialLinkageError as e:
        print(f"Repository {e.descriptor.html_url} was created but step '{e.step}' failed:")
        print(f"  {e.cause}")
        sys.exit(1)
    except RepoLinkError as e:
        print(f"Error in step '{e.step}': {e}")
        sys.exit(1)

    print("\nSteps:")
    for step in report.steps:
        print(f"  {step.step:16s} {step.status:8s} {step.detail}")

    print("\n=== Example Complete ===")


if __name__ == "__main__":
    main()
