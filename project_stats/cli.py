# coding: utf-8

"""
Command line interface for project_stats

This module takes care of processing command line options, resolving
the history range, gathering all stats and showing the report.
"""

import argparse
import re
import sys

import project_stats.base
from project_stats import utils
from project_stats.git import GitRepo
from project_stats.stats import Report, StatsAggregator
from project_stats.utils import log

USAGE = """
project_stats [options] [<commit-object>]

Contributor, commit, documentation and cask statistics of the project
since the initial commit, the latest release or any given revision.

Without <commit-object> the whole project history is covered. Use the
'release' keyword to report the history since the latest release tag.
Any other <commit-object> (tag, branch or commit hash) is used as the
start of the reported history. The end is always the current head.
""".strip()

# Help requested with any number of leading dashes, case insensitive
HELP_REGEXP = re.compile(r"^-+h(elp)?$", re.IGNORECASE)


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Options
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class Options(object):
    """ Command line options parser """

    def __init__(self, arguments=None):
        """ Prepare the parser. """
        self.parser = argparse.ArgumentParser(usage=USAGE, add_help=False)
        self._prepare_arguments(arguments)
        self.opt = self.arg = None

        # Enable debugging output (even before options are parsed)
        if "--debug" in self.arguments:
            log.setLevel(utils.LOG_DEBUG)

        self.parser.add_argument(
            "reference", nargs="?", metavar="commit-object",
            help="Start of the reported history, 'release' for the latest "
                 "release tag (default: the initial commit)")

        group = self.parser.add_argument_group("Utils")
        group.add_argument(
            "-h", "--help", action="store_true",
            help="Show this help message and exit")
        group.add_argument(
            "--config",
            metavar="FILE",
            help="Use alternate configuration file "
                 f"(default: ${project_stats.base.CONFIG_VARIABLE})")
        group.add_argument(
            "--width", type=int,
            help="Maximum width of the report output")
        group.add_argument(
            "--debug", action="store_true",
            help="Turn on debugging output, do not catch exceptions")

    def _prepare_arguments(self, arguments):
        """ Prepare arguments (both direct and from command line) """
        if arguments is not None:
            if isinstance(arguments, str):
                self.arguments = arguments.split()
            else:
                self.arguments = arguments
        else:
            self.arguments = sys.argv[1:]

    def help(self):
        """ Print usage and exit if help requested in any form """
        if any(HELP_REGEXP.match(argument) for argument in self.arguments):
            self.parser.print_help()
            raise SystemExit(0)

    def parse(self):
        """ Parse the options. """
        self.help()
        opt, arg = self.parser.parse_known_args(self.arguments)
        self.opt = opt
        self.arg = arg
        self.check()
        log.debug("Gathered options:")
        log.debug('options = %s', opt)
        return opt

    def check(self):
        """ Perform additional check for given options """
        if self.arg:
            raise project_stats.base.OptionError(
                f"Invalid argument: '{self.arg[0]}'")
        if self.opt.width is not None and self.opt.width < 20:
            raise project_stats.base.OptionError(
                f"Invalid width '{self.opt.width}', use at least 20.")


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Main
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def header(history):
    """ Report header describing the history range """
    text = f"Project stats from {history.start} to {history.end}"
    period = history.period()
    if period:
        text += f" ({period})"
    return f"{text}."


def main(arguments=None):
    """
    Parse options, gather stats and show the results

    Takes optional parameter ``arguments`` which can be either
    command line string or list of options. This is very useful
    for testing purposes. Function returns a tuple of the form::

        (results, report)

    with the gathered results and the report object. Nothing is
    printed before all stats are successfully gathered.
    """
    options = Options(arguments).parse()
    if options.config:
        config = project_stats.base.Config(path=options.config)
    else:
        config = project_stats.base.Config()
    options.width = options.width or config.width

    # Locate the project, gather all stats
    repo = GitRepo.discover()
    utils.load_sections()
    report = Report(options=options, config=config)
    results = StatsAggregator(repo, config).run(options.reference)
    report.fetch(results)

    # Show the report
    print(header(results.history))
    report.show()
    return results, report
