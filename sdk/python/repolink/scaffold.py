"""
Project scaffolding: IDE project markers and the README.

A ProjectMarker is the pluggable strategy LinkOrchestrator uses to recognize
and create IDE project files. RStudioProjectMarker is the built-in one.
"""

from abc import ABC, abstractmethod
from importlib import resources
from pathlib import Path
from string import Template

README_NAME = "README.md"


def _template(name: str) -> Template:
    text = (resources.files("repolink") / "templates" / name).read_text(encoding="utf-8")
    return Template(text)


def write_readme(path: Path, name: str, description: str) -> tuple[Path, bool]:
    """
    Write ``README.md`` into ``path`` unless one already exists.

    Returns:
        (readme path, True if the file was created)
    """
    readme = path / README_NAME
    if readme.exists():
        return readme, False
    readme.write_text(
        _template(README_NAME).safe_substitute(name=name, description=description),
        encoding="utf-8",
    )
    return readme, True


def git_ignore(path: Path, patterns: list[str]) -> Path:
    """Append any of ``patterns`` missing from ``path/.gitignore``."""
    gitignore = path / ".gitignore"
    existing: list[str] = []
    if gitignore.exists():
        existing = gitignore.read_text(encoding="utf-8").splitlines()

    missing = [p for p in patterns if p not in existing]
    if missing or not gitignore.exists():
        lines = existing + missing
        gitignore.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return gitignore


class ProjectMarker(ABC):
    """Strategy for recognizing and creating an IDE project in a directory."""

    #: Commit message used after apply()
    commit_message: str = "project init"

    @abstractmethod
    def is_marked(self, path: Path) -> bool:
        """Return True if ``path`` is already a project of this kind."""
        pass

    @abstractmethod
    def project_name(self, path: Path) -> str | None:
        """Return the project name recorded in ``path``, if any."""
        pass

    @abstractmethod
    def apply(self, path: Path, name: str) -> list[Path]:
        """Create the project files in ``path`` and return the files written."""
        pass


class RStudioProjectMarker(ProjectMarker):
    """RStudio projects: a ``<name>.Rproj`` file plus standard ignores."""

    commit_message = "rstudio init"
    suffix = ".Rproj"
    ignore_patterns = [".Rproj.user", ".Rhistory", ".RData"]

    def _project_files(self, path: Path) -> list[Path]:
        return sorted(p for p in path.glob(f"*{self.suffix}") if p.is_file())

    def is_marked(self, path: Path) -> bool:
        return bool(self._project_files(path))

    def project_name(self, path: Path) -> str | None:
        files = self._project_files(path)
        # Several project files make the name ambiguous
        if len(files) != 1:
            return None
        return files[0].stem

    def apply(self, path: Path, name: str) -> list[Path]:
        rproj = path / f"{name}{self.suffix}"
        rproj.write_text(_template("template.Rproj").template, encoding="utf-8")
        gitignore = git_ignore(path, self.ignore_patterns)
        return [gitignore, rproj]
