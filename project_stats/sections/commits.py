""" Non-merge commits for each path category """

from project_stats.stats import Stats, StatsGroup


class CategoryCommits(Stats):
    """ Category commits """

    def __init__(self, category, parent):
        super().__init__(name=str(category), parent=parent)
        self.category = category

    def fetch(self, results):
        self.value = results.commits[self.category.name]


class CommitsStats(StatsGroup):
    """ Commits """

    # Default order
    order = 200

    def __init__(self, name=None, parent=None, *, config=None):
        super().__init__(name, parent, config=config)
        for category in self.config.categories:
            self.stats.append(CategoryCommits(category, parent=self))
