""" StatsAggregator & Stats, the core of the data gathering """

from __future__ import annotations

import argparse
from collections import Counter
from typing import Any, Optional

from project_stats import utils
from project_stats.base import (RELEASE, Category, Config, HistoryRange,
                                ReferenceNotFoundError, Revision)
from project_stats.release import latest_release
from project_stats.utils import log

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Results
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~


class PackageDelta():
    """
    Package inventory changes between two revisions

    Counts are taken from the named-status diff of the two snapshots.
    A package added and deleted again within the range is present in
    neither snapshot and thus counted nowhere. The ``new`` count is
    the net inventory growth and can be negative when more packages
    were removed than added. It always equals the difference between
    the package totals at the end and at the start of the range.
    """

    def __init__(self, added=0, modified=0, deleted=0, total=0):
        self.added = added
        self.modified = modified
        self.deleted = deleted
        self.total = total

    @property
    def new(self) -> int:
        """ Net number of added packages """
        return self.added - self.deleted

    @property
    def updated(self) -> int:
        """ Number of modified packages """
        return self.modified

    def __repr__(self) -> str:
        return (f"PackageDelta(added={self.added}, modified={self.modified}, "
                f"deleted={self.deleted}, total={self.total})")


class Results():
    """ Statistics gathered for a single report """

    def __init__(self, history: HistoryRange, full: HistoryRange) -> None:
        self.history = history
        self.full = full
        # Values below are keyed by the category name
        self.contributors: dict[str, int] = {}
        self.all_time: dict[str, tuple[int, int]] = {}
        self.commits: dict[str, int] = {}
        self.doc_authors = ""
        self.package_authors = 0
        self.packages = PackageDelta()

    @property
    def bounded(self) -> bool:
        """ True unless the full history is covered """
        return not self.history.full


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Stats Aggregator
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class StatsAggregator():
    """
    Range based history statistics

    Queries the history store (see ``project_stats.git.GitRepo``) for
    authors and commits touching the configured path categories and
    for the package inventory changes. Queries are run one after
    another, nothing is shared between them except the ``Results``.
    """

    def __init__(self, repo: Any, config: Optional[Config] = None) -> None:
        self.repo = repo
        self.config = config or Config()

    def revision(self, reference: str) -> Revision:
        """ Resolve reference, raise if it does not exist """
        sha = self.repo.resolve(reference)
        if sha is None:
            raise ReferenceNotFoundError(reference)
        return Revision(reference, sha, self.repo.date(sha))

    def check_branch(self) -> None:
        """ Warn when not on the primary branch """
        branch = self.repo.current_branch()
        if branch != self.config.branch:
            log.warning(
                "Current branch is '%s', not '%s'.", branch, self.config.branch)

    def full_range(self, end: Revision) -> HistoryRange:
        """ Range covering the whole history up to the end """
        initial = self.repo.initial_commit(end.sha)
        if initial is None:
            raise ReferenceNotFoundError(
                "initial commit",
                f"Unable to find the initial commit of '{end.reference}'.")
        return HistoryRange(self.revision(initial), end, full=True)

    def resolve_range(self, argument: Optional[str] = None) -> HistoryRange:
        """
        Detect the history range for given argument

        No argument selects the full history since the initial commit,
        ``release`` the history since the latest release tag, anything
        else is used as a revision reference. The end is the head.
        """
        self.check_branch()
        end = self.revision("HEAD")
        full = self.full_range(end)
        if argument is None:
            return full
        if argument == RELEASE:
            reference = latest_release(self.repo, self.config)
        else:
            reference = argument
        start = self.revision(reference)
        # Starting at the initial commit means the full history
        if start == full.start:
            return full
        return HistoryRange(start, end)

    def authors(self, history: HistoryRange, category: Category,
                field: str = "%ae") -> set[str]:
        """ Unique authors of non-merge commits touching the category """
        return {
            utils.unquote(author)
            for author in self.repo.authors(
                history.revisions, category.paths, field)}

    def count_unique_authors(
            self, history: HistoryRange, category: Category) -> int:
        """ Number of distinct author emails """
        return len(self.authors(history, category))

    def count_commits(self, history: HistoryRange, category: Category) -> int:
        """ Number of non-merge commits """
        return len(self.repo.authors(
            history.revisions, category.paths, field="%H"))

    def all_time_and_delta(
            self,
            category: Category,
            full: HistoryRange,
            history: HistoryRange) -> tuple[int, int]:
        """
        All time authors and authors new since the range start

        Prior authors are those of the history up to the range start
        (included). Only the prior authors present in the full history
        are counted so that ``all_time - new == prior`` always holds,
        even for a start which is not an ancestor of the end.
        """
        all_time = self.authors(full, category)
        prior = self.authors(
            HistoryRange(full.start, history.start, full=True), category)
        prior &= all_time
        return len(all_time), len(all_time) - len(prior)

    def filter_doc_authors(self, authors: list[str]) -> str:
        """ Sorted roster of doc authors without the bots """
        bots = set(self.config.bots)
        roster = {utils.unquote(author) for author in authors} - bots
        return ", ".join(sorted(roster))

    def compute_package_delta(self, history: HistoryRange) -> PackageDelta:
        """ Added, modified and deleted packages plus the current total """
        category = self.config.category(self.config.packages)
        extension = self.config.extension
        counts = Counter(
            status for status, path in self.repo.changes(
                history.base, history.end.sha, category.paths)
            if path.endswith(extension))
        total = len([
            path for path in self.repo.files(history.end.sha, category.paths)
            if path.endswith(extension)])
        delta = PackageDelta(
            added=counts["A"],
            modified=counts["M"],
            deleted=counts["D"],
            total=total)
        log.debug("Package changes: %s", delta)
        return delta

    def run(self, argument: Optional[str] = None) -> Results:
        """ Resolve the range and gather all statistics """
        # Both categories are needed, fail before running any query
        packages = self.config.category(self.config.packages)
        docs = self.config.category(self.config.docs)
        history = self.resolve_range(argument)
        full = history if history.full else self.full_range(history.end)
        results = Results(history, full)
        log.info("Gathering stats for %s", history)

        for category in self.config.categories:
            results.contributors[category.name] = self.count_unique_authors(
                history, category)
            if results.bounded:
                results.all_time[category.name] = self.all_time_and_delta(
                    category, full, history)
        for category in self.config.categories:
            results.commits[category.name] = self.count_commits(
                history, category)

        results.doc_authors = self.filter_doc_authors(self.repo.authors(
            history.revisions, docs.paths, field="%an"))

        results.package_authors = results.contributors[packages.name]
        results.packages = self.compute_package_delta(history)
        return results


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Stats
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class Stats():
    """ General statistics """
    _name: Optional[str]
    parent: Optional[StatsGroup] = None
    value: Any = None
    details: Optional[str] = None

    def __init__(
            self,
            name: Optional[str] = None,
            parent: Optional[StatsGroup] = None, *,
            options: Optional[argparse.Namespace] = None):
        """ Set the name and parent, get options from parent. """
        self._name = name
        self.parent = parent
        self.options = options or getattr(self.parent, 'options', None)

    @property
    def name(self) -> str:
        """ Use the first line of docs string unless name set. """
        if self._name:
            return self._name
        return [
            line.strip() for line in str(self.__doc__).split("\n")
            if line.strip()][0]

    @property
    def width(self) -> int:
        """ Maximum output width (from options or parent) """
        width = getattr(self.options, "width", None)
        if width:
            return width
        if self.parent is not None:
            return self.parent.width
        return utils.MAX_WIDTH

    def fetch(self, results: Results) -> None:
        """ Pick the value from results (implemented by respective class) """
        raise NotImplementedError()

    def show(self) -> None:
        """ Display the value with optional details. """
        text = f"{self.name}: {self.value}"
        if self.details:
            text += f" ({self.details})"
        utils.item(text, level=1, width=self.width)


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Stats Group
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class StatsGroupPlugin(type):
    """ Register report sections by their module name """
    registry: dict[str, "StatsGroupPlugin"] = {}
    ignore = set([
        "StatsGroupPlugin",
        "StatsGroup",
        "Report",
        ])

    def __init__(cls, name: str, _bases: tuple[type, ...], _attrs: dict[str, Any]):
        if name in StatsGroupPlugin.ignore:
            return

        plugin_name = cls.__module__.rsplit(".", maxsplit=1)[-1]
        registry = StatsGroupPlugin.registry

        if plugin_name in registry:
            orig = registry[plugin_name]
            log.warning("%s overriding %s", cls.__module__, orig.__module__)

        registry[plugin_name] = cls


class StatsGroup(Stats, metaclass=StatsGroupPlugin):
    """ Stats group """

    # Default order
    order = 500

    def __init__(
            self,
            name: Optional[str] = None,
            parent: Optional[StatsGroup] = None, *,
            options: Optional[argparse.Namespace] = None,
            config: Optional[Config] = None) -> None:
        super().__init__(name, parent, options=options)
        self.config = config or Config()
        self.stats: list[Stats] = []

    @property
    def width(self) -> int:
        """ Maximum output width (from options or config) """
        return getattr(self.options, "width", None) or self.config.width

    @property
    def separator(self) -> str:
        """ Banner character """
        return self.config.separator

    def fetch(self, results: Results) -> None:
        """ Fetch all children stats. """
        for stat in self.stats:
            stat.fetch(results)

    def show(self) -> None:
        """ Show the banner and list all children stats. """
        utils.header(self.name, self.separator, self.width)
        for stat in self.stats:
            stat.show()


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Report
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class Report(StatsGroup):
    """ Project statistics in one place """

    def __init__(self,
                 options: Optional[argparse.Namespace] = None,
                 config: Optional[Config] = None) -> None:
        """ Create all registered sections in their order. """
        super().__init__(options=options, config=config)
        self.stats = sorted(
            [section(parent=self, config=self.config)
             for section in StatsGroupPlugin.registry.values()],
            key=lambda section: section.order)

    def show(self) -> None:
        """ Show all sections. """
        for stat in self.stats:
            stat.show()
