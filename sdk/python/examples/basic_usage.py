#!/usr/bin/env python3
"""
Basic repolink usage example.

Links a throwaway directory to a mocked hosting service whose "hosted"
repository is a local bare repository, so nothing leaves the machine.
Run with: python examples/basic_usage.py
"""

import subprocess
import tempfile
from pathlib import Path

from repolink import DEFAULT_SCHEMA, ConfigurationError, LinkOrchestrator, LinkRequest, RepoLinkError
from repolink.credentials import HttpsCredential
from repolink.testing import MockHostingClient, create_mock_descriptor

print("=== repolink Basic Usage Example ===\n")

# 1. Exception hierarchy
print("1. Testing exception classes...")
try:
    raise ConfigurationError("No access token; set GITHUB_PAT")
except RepoLinkError as e:
    print(f"   Caught RepoLinkError: {e}")
    print(f"   Code: {e.code}, Message: {e.message}")

print("\n   OK: Exception classes working\n")

# 2. Linkage schema
print("2. Linkage config keys...")
for key in DEFAULT_SCHEMA.keys:
    print(f"   {key}")

print("\n   OK: Schema working\n")

# 3. Push credentials never embed the token in a URL
print("3. HTTPS push credential...")
credential = HttpsCredential(token="ghp_example")
print(f"   repr: {credential!r}")
print(f"   git args: {credential.git_config()[0]} http.extraHeader=...")

print("\n   OK: Credential working\n")

# 4. Full workflow against a mocked hosting service
print("4. Linking a directory...")
with tempfile.TemporaryDirectory() as tmp:
    root = Path(tmp)
    remote = root / "remote.git"
    subprocess.run(["git", "init", "--bare", "-q", str(remote)], check=True)

    project = root / "demo"
    project.mkdir()
    (project / "analysis.R").write_text("summary(cars)\n")

    client = MockHostingClient(login="octocat")
    client.repos.configure_create(
        response=create_mock_descriptor(name="demo", owner="octocat", clone_url=str(remote))
    )

    orchestrator = LinkOrchestrator.from_client(client, notifier=print)
    report = orchestrator.run(
        LinkRequest(path=project, description="An example project", force=True, interactive=True)
    )

    for step in report.steps:
        print(f"   [{step.status:8s}] {step.step}  {step.detail}")
    print(f"   Remote URL: {report.remote_url}")
    print(f"   repos.create called {client.call_count('repos.create')} time(s)")

print("\n   OK: Workflow complete\n")
print("=== All examples completed ===")
