"""
Unique authors of non-merge commits for each path category

For a range not covering the full history the number of all time
contributors and the number of contributors new since the start of
the range are shown as well.
"""

from project_stats.stats import Stats, StatsGroup


class CategoryContributors(Stats):
    """ Category contributors """

    def __init__(self, category, parent):
        super().__init__(name=str(category), parent=parent)
        self.category = category

    def fetch(self, results):
        self.value = results.contributors[self.category.name]
        if self.category.name in results.all_time:
            all_time, new = results.all_time[self.category.name]
            self.details = f"{all_time} all time, {new} new"


class ContributorsStats(StatsGroup):
    """ Contributors """

    # Default order
    order = 100

    def __init__(self, name=None, parent=None, *, config=None):
        super().__init__(name, parent, config=config)
        for category in self.config.categories:
            self.stats.append(CategoryContributors(category, parent=self))
