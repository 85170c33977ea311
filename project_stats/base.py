# coding: utf-8

""" Config, Revisions, History Ranges and Exceptions """

import codecs
import configparser
import io
import os
import re
from configparser import NoOptionError, NoSectionError

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta as delta

from project_stats import utils
from project_stats.utils import log

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Constants
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

# Environment variable with the config file location
CONFIG_VARIABLE = "PROJECT_STATS_CONFIG"

# Default maximum width
MAX_WIDTH = utils.MAX_WIDTH

# Default banner character
DEFAULT_SEPARATOR = utils.DEFAULT_SEPARATOR

# Argument selecting the latest release as the start point
RELEASE = "release"

# Default GitHub api and timeout for the release lookup
GITHUB_URL = "https://api.github.com/"
TIMEOUT = 60

# Git hash of the empty tree, base for diffs covering the full history
EMPTY_TREE = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

# Built-in configuration, the config file is read on top of it
DEFAULT_CONFIG = """
[general]
branch = master
packages = casks
docs = docs
extension = .rb
release = git
bots = BrewTestBot, Homebrew Bot, dependabot[bot], github-actions[bot]

[categories]
casks = Casks
code = bin cmd developer lib spec test Gemfile Rakefile
docs = doc *.md
any = .
"""


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Exceptions
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class GeneralError(Exception):
    """ General stats error """


class ConfigError(GeneralError):
    """ Stats configuration problem """


class ConfigFileError(ConfigError):
    """ Problem with the config file """


class OptionError(GeneralError):
    """ Invalid command line """


class ReportError(GeneralError):
    """ Report generation error """


class ProjectEnvironmentError(GeneralError):
    """ Project root or git repository not found """


class ReferenceNotFoundError(GeneralError):
    """ Revision reference does not exist """

    def __init__(self, reference, message=None):
        self.reference = reference
        super().__init__(
            message or f"Reference '{reference}' not found in the history.")


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Config
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class Config(object):
    """ Stats configuration """

    parser = None

    def __init__(self, config=None, path=None):
        """
        Read the configuration

        Built-in defaults are always loaded first. Custom config can be
        given as a string (config) or a file (path) and is read on top
        of them. If neither is provided the ``PROJECT_STATS_CONFIG``
        environment variable is checked for the file location.
        """
        # Read the config only once (unless explicitly provided)
        if self.parser is not None and config is None and path is None:
            return
        Config.parser = configparser.ConfigParser(interpolation=None)
        self.parser.read_string(DEFAULT_CONFIG)
        if config is not None:
            log.info("Inspecting config from string")
            log.debug(utils.pretty(config))
            self._update(io.StringIO(config))
            return
        if path is None:
            path = Config.path()
        if path is None:
            log.debug("No config file, using built-in defaults")
            return
        try:
            log.info("Inspecting config file '%s'.", path)
            with codecs.open(path, "r", "utf8") as config_file:
                self._update(config_file)
        except IOError as error:
            log.debug(error)
            Config.parser = None
            raise ConfigFileError(
                f"Unable to read the config file '{path}'.") from error

    def _update(self, stream):
        """ Read custom config, replace categories if defined """
        custom = configparser.ConfigParser(interpolation=None)
        custom.read_file(stream)
        if custom.has_section("categories"):
            self.parser.remove_section("categories")
        self.parser.read_dict(custom)

    def _get(self, option, fallback=None):
        """ Get option from the general section """
        try:
            return self.parser.get("general", option)
        except (NoOptionError, NoSectionError):
            return fallback

    @property
    def branch(self):
        """ Primary branch expected to be checked out """
        return self._get("branch", "master")

    @property
    def packages(self):
        """ Name of the package category """
        return self._get("packages", "casks")

    @property
    def docs(self):
        """ Name of the documentation category """
        return self._get("docs", "docs")

    @property
    def extension(self):
        """ File extension of the package definitions """
        return self._get("extension", ".rb")

    @property
    def bots(self):
        """ Author identifiers excluded from the doc contributors """
        return utils.split(
            self._get("bots", ""), separator=re.compile(r"\s*,\s*"))

    @property
    def release(self):
        """ Release lookup backend, git or github """
        release = self._get("release", "git")
        if release not in ("git", "github"):
            raise ConfigError(
                f"Invalid release lookup '{release}', use git or github.")
        return release

    @property
    def github(self):
        """ GitHub project (owner/name) used for the release lookup """
        github = self._get("github")
        if self.release == "github" and not github:
            raise ConfigError(
                "No GitHub project defined for the release lookup.")
        return github

    @property
    def url(self):
        """ GitHub api url """
        return self._get("url", GITHUB_URL)

    @property
    def token(self):
        """
        GitHub authentication token

        Taken from the ``token`` option or read from the file given by
        ``token_file``. Returns ``None`` when neither is set or the
        token is empty.
        """
        token = self._get("token")
        if token is None:
            token_file = self._get("token_file")
            if token_file is not None:
                path = os.path.expanduser(token_file)
                try:
                    with open(path, encoding="utf-8") as stream:
                        token = stream.read()
                except IOError as error:
                    raise ConfigFileError(
                        f"Unable to read the token file '{path}'.") from error
        if token is not None:
            token = token.strip()
        return token or None

    @property
    def timeout(self):
        """ Seconds to wait for the GitHub api """
        timeout = self._get("timeout", TIMEOUT)
        try:
            return int(timeout)
        except ValueError as error:
            raise ConfigError(
                f"Invalid timeout '{timeout}', should be integer.") from error

    @property
    def width(self):
        """ Maximum width of the report """
        try:
            return int(self._get("width", MAX_WIDTH))
        except ValueError:
            return MAX_WIDTH

    @property
    def separator(self):
        """ Banner character to use for the report """
        return self._get("separator", DEFAULT_SEPARATOR)

    @property
    def categories(self):
        """ Path categories in the configured order """
        try:
            items = self.parser.items("categories")
        except NoSectionError as error:
            raise ConfigError("No categories defined.") from error
        categories = [Category(name, utils.split(value))
                      for name, value in items]
        for category in categories:
            if not category.paths:
                raise ConfigError(
                    f"No paths defined for the '{category.name}' category.")
        return categories

    def category(self, name):
        """ Return category of given name """
        for category in self.categories:
            if category.name == name:
                return category
        raise ConfigError(f"Category '{name}' not found.")

    @staticmethod
    def path():
        """ Detect config file path from the environment """
        path = os.environ.get(CONFIG_VARIABLE)
        return os.path.expanduser(path) if path else None

    @staticmethod
    def example():
        """ Return config example """
        return "[general]\nbranch = main\nbots = Release Bot\n"


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Category
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class Category(object):
    """ Named set of path patterns """

    def __init__(self, name, paths):
        self.name = name
        self.paths = list(paths)

    def __str__(self):
        """ Category names are used as report labels """
        return self.name.capitalize()

    def __repr__(self):
        return f"Category({self.name!r}, {self.paths!r})"

    def __eq__(self, other):
        return (isinstance(other, Category)
                and (self.name, self.paths) == (other.name, other.paths))

    def __hash__(self):
        return hash((self.name, tuple(self.paths)))


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Revision
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class Revision(object):
    """
    Resolved revision reference

    Holds the reference as provided by the user (tag, branch, commit),
    the canonical commit id and the commit date if known. The date is
    expected in the ISO 8601 format as produced by ``git log %cI``.
    """

    def __init__(self, reference, sha, date=None):
        self.reference = reference
        self.sha = sha
        if date is None or hasattr(date, "year"):
            self.date = date
        else:
            self.date = isoparse(date)

    @property
    def short(self):
        """ Abbreviated commit id """
        return self.sha[:7]

    def __str__(self):
        """ Reference, short id and date """
        date = self.date.strftime("%Y-%m-%d") if self.date else None
        if self.reference == self.sha:
            return f"{self.short} ({date})" if date else self.short
        details = ", ".join(detail for detail in [self.short, date] if detail)
        return f"{self.reference} ({details})"

    def __eq__(self, other):
        return isinstance(other, Revision) and self.sha == other.sha

    def __hash__(self):
        return hash(self.sha)


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  History Range
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class HistoryRange(object):
    """
    Half-open interval of history (start, end]

    When the start is the initial commit of the project the range is
    marked as ``full`` and covers the whole history reachable from the
    end, the initial commit included.
    """

    def __init__(self, start, end, full=False):
        self.start = start
        self.end = end
        self.full = full

    @property
    def revisions(self):
        """ Revision range arguments for git log """
        if self.full:
            return [self.end.sha]
        return [f"{self.start.sha}..{self.end.sha}"]

    @property
    def base(self):
        """ Tree the package diff starts from """
        return EMPTY_TREE if self.full else self.start.sha

    def period(self):
        """ Human readable time between start and end """
        if self.start.date is None or self.end.date is None:
            return None
        difference = delta(self.end.date, self.start.date)
        parts = [
            utils.listed(value, unit)
            for value, unit in [
                (difference.years, "year"),
                (difference.months, "month"),
                (difference.days, "day")]
            if value > 0]
        return utils.listed(parts) if parts else "less than a day"

    def __str__(self):
        return f"{self.start} to {self.end}"

    def __eq__(self, other):
        return (isinstance(other, HistoryRange)
                and (self.start, self.end, self.full)
                == (other.start, other.end, other.full))

    def __hash__(self):
        return hash((self.start, self.end, self.full))
