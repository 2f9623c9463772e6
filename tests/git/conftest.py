"""Test fixtures for git module."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pygit2
import pytest

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def temp_repo(tmp_path: Path) -> Generator[pygit2.Repository, None, None]:
    """Create a temporary git repository with initial commit."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()

    repo = pygit2.init_repository(str(repo_path), initial_head="main")

    # Configure user
    repo.config["user.name"] = "Test User"
    repo.config["user.email"] = "test@example.com"

    # Create initial commit
    (repo_path / "README.md").write_text("# Test Repo\n")
    (repo_path / "app.py").write_text("one\ntwo\nthree\n")
    (repo_path / "package-lock.json").write_text("{}\n")
    repo.index.add("README.md")
    repo.index.add("app.py")
    repo.index.add("package-lock.json")
    repo.index.write()
    tree = repo.index.write_tree()
    sig = pygit2.Signature("Test User", "test@example.com")
    repo.create_commit("refs/heads/main", sig, sig, "Initial commit", tree, [])

    # Set HEAD to main
    repo.set_head("refs/heads/main")

    yield repo


@pytest.fixture
def unborn_repo(tmp_path: Path) -> Generator[pygit2.Repository, None, None]:
    """Repository without any commit yet."""
    repo_path = tmp_path / "fresh"
    repo_path.mkdir()
    yield pygit2.init_repository(str(repo_path), initial_head="main")


@pytest.fixture
def bare_repo(tmp_path: Path) -> Generator[pygit2.Repository, None, None]:
    """Create a bare repository."""
    bare_path = tmp_path / "bare.git"
    yield pygit2.init_repository(str(bare_path), bare=True)
