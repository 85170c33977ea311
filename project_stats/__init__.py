"""
What happened in the project since the last release?

Report contributor, commit, documentation and cask statistics for the
history of a git project since the initial commit, the latest release
or any given revision.

The `stats`_ module contains the core of the stats gathering, the
history range handling and the report sections base classes. Config,
exceptions and revisions are placed in the `base`_ module, all git
queries live in the `git`_ module and the latest release lookup in
the `release`_ module. Generic utilities can be found in the `utils`_
module. Option parsing and other command line stuff resides in the
`cli`_ module. Individual report sections are in `sections`_.
"""
