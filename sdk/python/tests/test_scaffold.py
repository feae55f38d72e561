"""Tests for README and IDE project scaffolding."""

from pathlib import Path

from repolink.scaffold import RStudioProjectMarker, git_ignore, write_readme


def test_write_readme(tmp_path: Path) -> None:
    readme, created = write_readme(tmp_path, "demo", "Work of staggering genius")

    assert created is True
    assert readme == tmp_path / "README.md"
    assert readme.read_text() == "# demo\n\nWork of staggering genius\n"


def test_write_readme_never_overwrites(tmp_path: Path) -> None:
    (tmp_path / "README.md").write_text("mine\n")

    readme, created = write_readme(tmp_path, "demo", "ignored")

    assert created is False
    assert readme.read_text() == "mine\n"


def test_readme_keeps_dollar_signs(tmp_path: Path) -> None:
    readme, _ = write_readme(tmp_path, "demo", "costs $5 and $HOME")

    assert "costs $5 and $HOME" in readme.read_text()


def test_git_ignore_appends_missing_patterns(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("*.log\n.Rhistory\n")

    git_ignore(tmp_path, [".Rproj.user", ".Rhistory", ".RData"])

    assert (tmp_path / ".gitignore").read_text().splitlines() == [
        "*.log",
        ".Rhistory",
        ".Rproj.user",
        ".RData",
    ]


def test_git_ignore_creates_file(tmp_path: Path) -> None:
    path = git_ignore(tmp_path, ["a", "b"])

    assert path.read_text() == "a\nb\n"


class TestRStudioProjectMarker:
    """RStudio project detection and creation."""

    def test_apply(self, tmp_path: Path) -> None:
        marker = RStudioProjectMarker()
        assert marker.is_marked(tmp_path) is False

        written = marker.apply(tmp_path, "demo")

        assert written == [tmp_path / ".gitignore", tmp_path / "demo.Rproj"]
        assert (tmp_path / "demo.Rproj").read_text().startswith("Version: 1.0\n")
        assert marker.is_marked(tmp_path) is True
        assert marker.project_name(tmp_path) == "demo"

    def test_project_name_none_when_ambiguous(self, tmp_path: Path) -> None:
        (tmp_path / "a.Rproj").write_text("")
        (tmp_path / "b.Rproj").write_text("")

        marker = RStudioProjectMarker()

        assert marker.is_marked(tmp_path) is True
        assert marker.project_name(tmp_path) is None

    def test_project_name_none_when_unmarked(self, tmp_path: Path) -> None:
        assert RStudioProjectMarker().project_name(tmp_path) is None

    def test_commit_message(self) -> None:
        assert RStudioProjectMarker().commit_message == "rstudio init"
