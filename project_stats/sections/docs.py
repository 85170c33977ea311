"""
Documentation contributors

Lists names of everybody who touched the documentation within the
range. Bots configured in the ``bots`` option are left out::

    [general]
    bots = BrewTestBot, dependabot[bot]
"""

from project_stats.stats import Stats, StatsGroup


class DocAuthors(Stats):
    """ Contributors """

    def fetch(self, results):
        self.value = results.doc_authors or "none"


class DocsStats(StatsGroup):
    """ Docs """

    # Default order
    order = 300

    def __init__(self, name=None, parent=None, *, config=None):
        super().__init__(name, parent, config=config)
        self.stats.append(DocAuthors(parent=self))
