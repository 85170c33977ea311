"""
Git history queries

All history traversal and diffing is delegated to the ``git`` command.
Each query runs a single read-only git process in the repository root.
The aggregator relies on the methods below only so that any object
providing them (e.g. a fake store in tests) can stand in for git.
"""

import os
import subprocess

from project_stats.base import ProjectEnvironmentError, ReportError
from project_stats.utils import log, pretty

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Git Repository
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~


class GitRepo():
    """ Git repository investigator """

    def __init__(self, path):
        """ Initialize the path. """
        self.path = path

    @classmethod
    def discover(cls, path=None):
        """ Find the root of the repository containing given path """
        path = path or os.getcwd()
        try:
            root = cls(path).root()
        except ReportError as error:
            raise ProjectEnvironmentError(
                f"Unable to find the project root from '{path}'.") from error
        if root is None:
            raise ProjectEnvironmentError(
                f"Directory '{path}' is not inside a git repository.")
        log.info("Using project root '%s'", root)
        return cls(root)

    def _run(self, *arguments, check=True, strip=True):
        """
        Run git with given arguments, return the output

        Output is stripped unless ``strip`` is disabled. Failing
        commands raise ``ReportError`` unless ``check`` is disabled in
        which case ``None`` is returned.
        """
        command = ["git", *arguments]
        log.details(pretty(command))
        try:
            with subprocess.Popen(
                    command,
                    cwd=self.path,
                    encoding='utf-8',
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE
                    ) as process:
                output, errors = process.communicate()
        except OSError as error:
            log.debug(error)
            raise ReportError(
                f"Unable to run git in '{self.path}'.") from error
        log.debug("git %s output:", arguments[0])
        log.data(output)
        if process.returncode != 0:
            log.debug(errors.strip())
            if check:
                raise ReportError(
                    f"Command '{' '.join(command)}' failed: {errors.strip()}")
            return None
        return output.strip() if strip else output

    @staticmethod
    def _lines(output):
        """ Split output into non-empty lines """
        if not output:
            return []
        return [line for line in output.split("\n") if line]

    def _paths(self, *arguments):
        """ NUL separated output fields, paths are never quoted """
        output = self._run(*arguments, strip=False)
        return [field for field in output.split("\0") if field]

    def root(self):
        """ Top level directory of the working tree """
        return self._run("rev-parse", "--show-toplevel", check=False)

    def resolve(self, reference):
        """ Canonical commit id for given reference, None if unknown """
        # Never let a reference be interpreted as an option
        if not reference or reference.startswith("-"):
            return None
        return self._run(
            "rev-parse", "--verify", "--quiet", f"{reference}^{{commit}}",
            check=False) or None

    def date(self, reference):
        """ Commit date in the ISO 8601 format """
        return self._run("log", "-1", "--format=%cI", reference)

    def initial_commit(self, reference="HEAD"):
        """ Oldest root commit reachable from given reference """
        output = self._run(
            "rev-list", "--max-parents=0", "--reverse", reference,
            check=False)
        roots = self._lines(output)
        return roots[0] if roots else None

    def current_branch(self):
        """ Name of the checked out branch, 'HEAD' when detached """
        return self._run("rev-parse", "--abbrev-ref", "HEAD", check=False)

    def latest_tag(self, reference="HEAD"):
        """ Most recent tag reachable from given reference """
        return self._run(
            "describe", "--tags", "--abbrev=0", reference, check=False) or None

    def authors(self, revisions, paths, field="%ae"):
        """
        Author field of each non-merge commit touching given paths

        Returns one entry per commit in the history selected by the
        ``revisions`` arguments (e.g. ``['v1.0..HEAD']``), the default
        field is the author email.
        """
        log.info("Checking %s in %s for %s", field, " ".join(revisions),
                 " ".join(paths))
        return self._lines(self._run(
            "log", "--no-merges", f"--format={field}", *revisions,
            "--", *paths))

    def changes(self, base, end, paths):
        """ Named-status pairs (status, path) between two revisions """
        log.info("Checking changes between %s and %s", base, end)
        fields = self._paths(
            "diff", "--name-status", "--no-renames", "-z", base, end,
            "--", *paths)
        # Status and path alternate
        return [
            (status[0], path)
            for status, path in zip(fields[0::2], fields[1::2])]

    def files(self, revision, paths):
        """ Files present at given revision under given paths """
        return self._paths(
            "ls-tree", "-r", "--name-only", "-z", revision, "--", *paths)
