# coding: utf-8
""" Shared fixtures: config reset, fake history store & git repos """

import fnmatch
import os
import subprocess

import pytest

import project_stats.base
from project_stats.base import EMPTY_TREE

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Config
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~


@pytest.fixture(autouse=True)
def reset_config(monkeypatch):
    """ Start each test with the built-in config only """
    monkeypatch.delenv(project_stats.base.CONFIG_VARIABLE, raising=False)
    project_stats.base.Config.parser = None
    yield
    project_stats.base.Config.parser = None


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Fake History Store
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class FakeCommit():
    """ Commit with author and changed paths (path: A/M/D) """

    def __init__(self, sha, email, name=None, changes=None, merge=False):
        self.sha = sha
        self.email = email
        self.name = name or email.split("@")[0].strip("\"'")
        self.changes = changes or {}
        self.merge = merge


class FakeRepo():
    """ Linear history store answering the git queries """

    def __init__(self, commits, branch="master", tags=None):
        self.commits = commits
        self.branch = branch
        self.tags = tags or {}

    def _index(self, reference):
        if reference == "HEAD" and self.commits:
            return len(self.commits) - 1
        reference = self.tags.get(reference, reference)
        for index, commit in enumerate(self.commits):
            if commit.sha == reference:
                return index
        raise KeyError(reference)

    def _select(self, revisions):
        spec = revisions[0]
        if ".." in spec:
            start, end = spec.split("..")
            return self.commits[self._index(start) + 1:self._index(end) + 1]
        return self.commits[:self._index(spec) + 1]

    def _tree(self, revision):
        """ Map of present paths to their version """
        tree = {}
        if revision == EMPTY_TREE:
            return tree
        for version, commit in enumerate(
                self.commits[:self._index(revision) + 1]):
            for path, status in commit.changes.items():
                if status == "D":
                    tree.pop(path, None)
                else:
                    tree[path] = version
        return tree

    @staticmethod
    def _matches(path, patterns):
        return any(
            pattern == "." or path == pattern
            or path.startswith(f"{pattern}/")
            or fnmatch.fnmatch(path, pattern)
            for pattern in patterns)

    def resolve(self, reference):
        try:
            return self.commits[self._index(reference)].sha
        except KeyError:
            return None

    def date(self, reference):
        return f"2020-01-{self._index(reference) + 1:02d}T12:00:00+00:00"

    def initial_commit(self, reference="HEAD"):
        return self.commits[0].sha if self.commits else None

    def current_branch(self):
        return self.branch

    def latest_tag(self, reference="HEAD"):
        if not self.tags:
            return None
        return max(self.tags, key=lambda tag: self._index(tag))

    def authors(self, revisions, paths, field="%ae"):
        fields = {"%ae": "email", "%an": "name", "%H": "sha"}
        values = [
            getattr(commit, fields[field])
            for commit in self._select(revisions)
            if not commit.merge
            and any(self._matches(path, paths) for path in commit.changes)]
        # Empty lines are dropped from the git output as well
        return [value for value in values if value]

    def changes(self, base, end, paths):
        before, after = self._tree(base), self._tree(end)
        changes = []
        for path in sorted(set(before) | set(after)):
            if not self._matches(path, paths):
                continue
            if path not in before:
                changes.append(("A", path))
            elif path not in after:
                changes.append(("D", path))
            elif before[path] != after[path]:
                changes.append(("M", path))
        return changes

    def files(self, revision, paths):
        return sorted(
            path for path in self._tree(revision)
            if self._matches(path, paths))


@pytest.fixture
def fake_repo():
    """ Fake history store class """
    return FakeRepo


@pytest.fixture
def fake_commit():
    """ Fake commit class """
    return FakeCommit


@pytest.fixture
def scenario():
    """
    Cask added by x, docs by y, merged by x

    The merge commit touches the docs as well but must never be
    counted as an individual contribution.
    """
    return FakeRepo([
        FakeCommit("aaa1", "x@example.com", changes={"Casks/foo.rb": "A"}),
        FakeCommit("bbb2", "y@example.com", changes={"doc/readme.md": "M"}),
        FakeCommit("ccc3", "x@example.com", merge=True,
                   changes={"doc/readme.md": "M"}),
        ])


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Git Repositories
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class Git():
    """ Run git commands in a test repository """

    def __init__(self, path):
        self.path = path

    def __call__(self, *arguments, email="x@example.com", name="X"):
        environment = dict(
            os.environ,
            HOME=str(self.path.parent),
            GIT_CONFIG_NOSYSTEM="1",
            GIT_AUTHOR_NAME=name,
            GIT_AUTHOR_EMAIL=email,
            GIT_COMMITTER_NAME=name,
            GIT_COMMITTER_EMAIL=email)
        return subprocess.run(
            ["git", *arguments], cwd=self.path, env=environment,
            check=True, capture_output=True, text=True).stdout.strip()

    def write(self, path, content="cask\n"):
        target = self.path / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

    def commit(self, path, message, content="cask\n", **author):
        self.write(path, content)
        self("add", path, **author)
        self("commit", "-q", "-m", message, **author)
        return self("rev-parse", "HEAD")


@pytest.fixture
def outside(tmp_path, monkeypatch):
    """ Directory which is not inside any git repository """
    directory = tmp_path / "outside"
    directory.mkdir()
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    monkeypatch.chdir(directory)
    return directory


@pytest.fixture
def git_repo(tmp_path, monkeypatch):
    """
    Real git repository with the cask scenario

    Commit A adds Casks/foo.rb (x), commit B adds doc/readme.md (y) on
    a topic branch, commit C merges the topic branch (x).
    """
    path = tmp_path / "project"
    path.mkdir()
    git = Git(path)
    git("init", "-q")
    git("symbolic-ref", "HEAD", "refs/heads/master")
    git.commit("Casks/foo.rb", "Add foo")
    git("checkout", "-q", "-b", "topic")
    git.commit("doc/readme.md", "Document", email="y@example.com", name="Y")
    git("checkout", "-q", "master")
    git("merge", "-q", "--no-ff", "-m", "Merge topic", "topic")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    monkeypatch.chdir(path)
    return git
