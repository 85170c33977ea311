# coding: utf-8
""" Tests for the git history queries """

import os
import shutil

import pytest

from project_stats.base import (EMPTY_TREE, ProjectEnvironmentError,
                                ReportError)
from project_stats.git import GitRepo

pytestmark = pytest.mark.skipif(
    shutil.which("git") is None, reason="git not available")


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Repository
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def test_discover(git_repo):
    repo = GitRepo.discover()
    assert os.path.realpath(repo.path) == os.path.realpath(git_repo.path)


def test_discover_from_subdirectory(git_repo, monkeypatch):
    monkeypatch.chdir(git_repo.path / "Casks")
    path = GitRepo.discover().path
    assert os.path.realpath(path) == os.path.realpath(git_repo.path)


def test_discover_outside(outside):
    with pytest.raises(ProjectEnvironmentError, match="not inside a git"):
        GitRepo.discover()


def test_discover_missing_directory(tmp_path):
    with pytest.raises(ProjectEnvironmentError):
        GitRepo.discover(str(tmp_path / "i-do-not-exist"))


def test_current_branch(git_repo):
    repo = GitRepo.discover()
    assert repo.current_branch() == "master"
    git_repo("checkout", "-q", "topic")
    assert repo.current_branch() == "topic"


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Revisions
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def test_resolve(git_repo):
    repo = GitRepo.discover()
    head = git_repo("rev-parse", "HEAD")
    assert repo.resolve("HEAD") == head
    assert repo.resolve(head[:7]) == head
    assert repo.resolve("master") == head


def test_resolve_unknown(git_repo):
    repo = GitRepo.discover()
    assert repo.resolve("v999.999.999") is None
    assert repo.resolve("") is None
    assert repo.resolve("--all") is None


def test_initial_commit(git_repo):
    repo = GitRepo.discover()
    initial = git_repo("rev-list", "--max-parents=0", "HEAD")
    assert repo.initial_commit() == initial
    assert repo.initial_commit("topic") == initial


def test_date(git_repo):
    date = GitRepo.discover().date("HEAD")
    assert date[:2] == "20"
    assert "T" in date


def test_latest_tag(git_repo):
    repo = GitRepo.discover()
    assert repo.latest_tag() is None
    git_repo("tag", "v1.0", "HEAD~1")
    assert repo.latest_tag() == "v1.0"
    git_repo("tag", "v1.1")
    assert repo.latest_tag() == "v1.1"


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Queries
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def test_authors_skip_merges(git_repo):
    repo = GitRepo.discover()
    assert sorted(repo.authors(["HEAD"], ["."])) == [
        "x@example.com", "y@example.com"]
    assert repo.authors(["HEAD"], ["Casks"]) == ["x@example.com"]
    assert repo.authors(["HEAD"], ["doc", "*.md"], "%an") == ["Y"]
    assert repo.authors(["HEAD"], ["lib"]) == []


def test_authors_in_range(git_repo):
    repo = GitRepo.discover()
    initial = repo.initial_commit()
    assert repo.authors([f"{initial}..HEAD"], ["."]) == ["y@example.com"]
    assert repo.authors(["HEAD..HEAD"], ["."]) == []


def test_authors_invalid_range(git_repo):
    with pytest.raises(ReportError):
        GitRepo.discover().authors(["nothing..HEAD"], ["."])


def test_changes(git_repo):
    repo = GitRepo.discover()
    initial = repo.initial_commit()
    assert repo.changes(EMPTY_TREE, "HEAD", ["Casks"]) == [
        ("A", "Casks/foo.rb")]
    assert repo.changes(initial, "HEAD", ["Casks"]) == []
    git_repo.commit("Casks/foo.rb", "Update foo", content="updated\n")
    git_repo.commit("Casks/bar.rb", "Add bar")
    git_repo("rm", "-q", "Casks/foo.rb")
    git_repo("commit", "-q", "-m", "Remove foo")
    git_repo.commit("Casks/baz.rb", "Add baz")
    assert repo.changes("HEAD~2", "HEAD", ["Casks"]) == [
        ("A", "Casks/baz.rb"), ("D", "Casks/foo.rb")]
    assert repo.changes(initial, "HEAD~2", ["Casks"]) == [
        ("A", "Casks/bar.rb"), ("M", "Casks/foo.rb")]


def test_changes_renames_are_additions(git_repo):
    repo = GitRepo.discover()
    git_repo("mv", "Casks/foo.rb", "Casks/foobar.rb")
    git_repo("commit", "-q", "-m", "Rename foo")
    assert repo.changes("HEAD~1", "HEAD", ["Casks"]) == [
        ("D", "Casks/foo.rb"), ("A", "Casks/foobar.rb")]


def test_files(git_repo):
    repo = GitRepo.discover()
    assert repo.files("HEAD", ["Casks"]) == ["Casks/foo.rb"]
    assert repo.files("HEAD", ["."]) == ["Casks/foo.rb", "doc/readme.md"]
    assert repo.files("HEAD", ["lib"]) == []


def test_non_ascii_paths(git_repo):
    repo = GitRepo.discover()
    git_repo.commit("Casks/café.rb", "Add café")
    git_repo.commit("Casks/with\ttab.rb", "Add tab")
    assert repo.files("HEAD", ["Casks"]) == [
        "Casks/café.rb", "Casks/foo.rb", "Casks/with\ttab.rb"]
    assert repo.changes("HEAD~2", "HEAD", ["Casks"]) == [
        ("A", "Casks/café.rb"), ("A", "Casks/with\ttab.rb")]


def test_commits_without_author_email(git_repo):
    repo = GitRepo.discover()
    git_repo.write("lib/anon.rb")
    git_repo("add", "lib/anon.rb")
    git_repo("commit", "-q", "-m", "Anonymous", "--author", "Anon <>")
    sha = git_repo("rev-parse", "HEAD")
    assert repo.authors(["HEAD"], ["lib"]) == []
    assert repo.authors(["HEAD"], ["lib"], "%H") == [sha]
