"""
Package inventory

Number of package contributors, packages present at the end of the
range and the package changes within the range. The ``New`` count is
the net growth of the inventory (added minus deleted).
"""

from project_stats.stats import Stats, StatsGroup


class PackageAuthors(Stats):
    """ Contributors """

    def fetch(self, results):
        self.value = results.package_authors


class PackageTotal(Stats):
    """ Total """

    def fetch(self, results):
        self.value = results.packages.total


class PackageNew(Stats):
    """ New """

    def fetch(self, results):
        self.value = results.packages.new


class PackageUpdated(Stats):
    """ Updated """

    def fetch(self, results):
        self.value = results.packages.updated


class PackageAdded(Stats):
    """ Added """

    def fetch(self, results):
        self.value = results.packages.added


class PackageDeleted(Stats):
    """ Deleted """

    def fetch(self, results):
        self.value = results.packages.deleted


class CasksStats(StatsGroup):
    """ Casks """

    # Default order
    order = 400

    def __init__(self, name=None, parent=None, *, config=None):
        super().__init__(name, parent, config=config)
        # Use the package category as the section title
        self._name = name or str(self.config.category(self.config.packages))
        for stats in [PackageAuthors, PackageTotal, PackageNew,
                      PackageUpdated, PackageAdded, PackageDeleted]:
            self.stats.append(stats(parent=self))
