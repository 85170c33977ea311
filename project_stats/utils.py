""" Logging, output formatting & utilities """

import importlib
import logging
import os
import pkgutil
import re
import sys
# pylint:disable=unused-import
from pprint import pformat as pretty  # noqa: F401 (used by other modules)

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Constants
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

# Default maximum width
MAX_WIDTH = 79

# Default banner character
DEFAULT_SEPARATOR = "="

# Coloring
COLOR_ON = 1
COLOR_OFF = 0
COLOR_AUTO = 2

# Logging
LOG_ERROR = logging.ERROR
LOG_WARN = logging.WARN
LOG_INFO = logging.INFO
LOG_DEBUG = logging.DEBUG
LOG_DETAILS = 7
LOG_DATA = 4
LOG_ALL = 1

# Quote characters wrapped around author identifiers by some git setups
QUOTES = "\"'"


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Utils
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def load_sections(package="project_stats.sections"):
    """
    Import all modules of the given package

    Importing a section module registers its stats group classes.
    Modules with the ``test`` prefix are skipped. Returns the number
    of imported modules.
    """
    log.debug("Loading sections from %s", package)
    module = importlib.import_module(package)
    loaded = 0
    for _, name, is_pkg in pkgutil.iter_modules(
            module.__path__, prefix=f"{module.__name__}."):
        if is_pkg or name.rsplit(".", 1)[-1].startswith("test"):
            continue
        log.debug("Importing %s", name)
        importlib.import_module(name)
        loaded += 1
    return loaded


def header(text, separator=DEFAULT_SEPARATOR, separator_width=MAX_WIDTH):
    """ Show text as a banner. """
    hr = separator_width * separator
    print(f"\n{hr}\n {text}\n{hr}")


def item(text, level=0, width=MAX_WIDTH):
    """ Print indented item. """
    indent = level * 4
    spaces = " " * indent
    print(f"{spaces}{shorted(str(text), width - indent)}")


def shorted(text, width=MAX_WIDTH):
    """
    Shorten text, make sure it's not cut in the middle of a word

    When multiple lines are provided in the text, each of them is
    shortened separately.
    """
    lines = []
    for line in text.split("\n"):
        if len(line) <= width:
            lines.append(line)
        else:
            # Remove any word after first overlapping non-word character
            lines.append("{0}...".format(
                re.sub(r"\W+\w*$", "", line[:width - 2])))
    return "\n".join(lines)


def unquote(identifier):
    """ Strip wrapping quote characters and whitespace """
    return identifier.strip().strip(QUOTES)


def pluralize(singular=None):
    """ Naively pluralize words """
    if singular.endswith("y") and not singular.endswith("ay"):
        plural = f"{singular[:-1]}ies"
    elif singular.endswith("s"):
        plural = f"{singular}es"
    else:
        plural = f"{singular}s"
    return plural


def listed(items, singular=None, plural=None):
    """
    Convert an iterable into a human readable list, or with singular
    given, into a simple count description::

        listed(["a", "b", "c"]) ......... a, b and c
        listed(3, "commit") ............. 3 commits
        listed(1, "cask") ............... 1 cask
    """
    if singular is not None:
        count = items if isinstance(items, int) else len(list(items))
        if count == 1:
            return f"{count} {singular}"
        return f"{count} {plural or pluralize(singular)}"
    items = [str(item) for item in items]
    if len(items) < 2:
        return "".join(items)
    return ", ".join(items[0:-2] + [" and ".join(items[-2:])])


def split(values, separator=re.compile("[ ,]+")):
    """
    Convert space-or-comma-separated values into a single list

    Accepts both string and list, empty values are dropped::

        'Casks' ................... ['Casks']
        'doc *.md' ................ ['doc', '*.md']
        ['bin lib', 'spec'] ....... ['bin', 'lib', 'spec']
    """
    if not isinstance(values, list):
        values = [values]
    return [
        value for value in
        sum([separator.split(value.strip()) for value in values], [])
        if value]


def info(message, newline=True):
    """ Log provided info message to the standard error output """
    sys.stderr.write(message + ("\n" if newline else ""))


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Logging
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

class Logging():
    """ Logging Configuration """

    # Color mapping
    COLORS = {
        LOG_ERROR: "red",
        LOG_WARN: "yellow",
        LOG_INFO: "blue",
        LOG_DEBUG: "green",
        LOG_DETAILS: "cyan",
        LOG_DATA: "magenta",
        }
    # Environment variable mapping
    MAPPING = {
        0: LOG_WARN,
        1: LOG_INFO,
        2: LOG_DEBUG,
        3: LOG_DETAILS,
        4: LOG_DATA,
        5: LOG_ALL,
        }
    # Custom level names
    NAMES = {
        LOG_ALL: "ALL",
        LOG_DATA: "DATA",
        LOG_DETAILS: "DETAILS",
        }

    # Default log level is WARN
    _level = LOG_WARN

    # Already initialized loggers by their name
    _loggers: dict = {}

    def __init__(self, name='project_stats'):
        # Use existing logger if already initialized
        try:
            self.logger = Logging._loggers[name]
        # Otherwise create a new one, save it and set it
        except KeyError:
            self.logger = self._create_logger(name=name)
            Logging._loggers[name] = self.logger
            self.set()

    class ColoredFormatter(logging.Formatter):
        """ Custom color formatter for logging """

        def format(self, record):
            levelname = Logging.NAMES.get(record.levelno, record.levelname)
            text_color = Logging.COLORS.get(record.levelno, "black")
            # Color the log level, use brackets when coloring off
            if Coloring().enabled():
                level = color(f" {levelname} ", "lightwhite", text_color)
            else:
                level = f"[{levelname}]"
            return f"{level} {record.getMessage()}"

    @staticmethod
    def _create_logger(name='project_stats'):
        """ Create the logger, log to the standard error output """
        logger = logging.getLogger(name)
        handler = logging.StreamHandler()
        handler.setFormatter(Logging.ColoredFormatter())
        logger.addHandler(handler)
        # Additional logging methods for details and data
        logger.details = lambda message, *args: logger.log(
            LOG_DETAILS, message, *args)  # NOQA
        logger.data = lambda message, *args: logger.log(
            LOG_DATA, message, *args)  # NOQA
        logger.all = lambda message, *args: logger.log(
            LOG_ALL, message, *args)  # NOQA
        return logger

    def set(self, level=None):
        """
        Set the default log level

        If the level is not specified environment variable DEBUG is used
        with the following meaning::

            DEBUG=0 ... LOG_WARN (default)
            DEBUG=1 ... LOG_INFO
            DEBUG=2 ... LOG_DEBUG
            DEBUG=3 ... LOG_DETAILS
            DEBUG=4 ... LOG_DATA
            DEBUG=5 ... LOG_ALL (log all messages)
        """
        if level is not None:
            Logging._level = level
        else:
            try:
                Logging._level = Logging.MAPPING[int(os.environ["DEBUG"])]
            except (KeyError, ValueError):
                Logging._level = LOG_WARN
        self.logger.setLevel(Logging._level)

    def get(self):
        """ Get the current log level """
        return self.logger.level


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Coloring
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def color(text, text_color=None, background=None, light=False, enabled=True):
    """
    Return text in desired color if coloring enabled

    Available colors: black red green yellow blue magenta cyan white.
    Alternatively color can be prefixed with "light", e.g. lightgreen.
    """
    colors = {"black": 30, "red": 31, "green": 32, "yellow": 33,
              "blue": 34, "magenta": 35, "cyan": 36, "white": 37}
    if not enabled:
        return text
    if text_color and text_color.startswith("light"):
        light = True
        text_color = text_color[5:]
    text_color = text_color and f";{colors[text_color]}" or ""
    background = background and f";{colors[background] + 10}" or ""
    light = (1 if light else 0)
    return f"\033[{light}{text_color}{background}m{text}\033[1;m"


class Coloring():
    """ Coloring configuration """

    # Default color mode is auto-detected from the terminal presence
    _mode = None
    # We need only a single config instance
    _instance = None

    def __new__(cls, *args, **kwargs):
        """ Make sure we create a single instance only """
        if not cls._instance:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, mode=None):
        """ Initialize the coloring mode """
        if self._mode is not None:
            return
        self.set(mode)

    def set(self, mode=None):
        """
        Set the coloring mode

        Log levels are colored when enabled. By default the feature is
        enabled when the standard output is attached to a terminal::

            COLOR=0 ... COLOR_OFF .... coloring disabled
            COLOR=1 ... COLOR_ON ..... coloring enabled
            COLOR=2 ... COLOR_AUTO ... if terminal attached (default)
        """
        if mode is None:
            if self._mode is not None:
                return
            try:
                mode = int(os.environ["COLOR"])
            except (KeyError, ValueError):
                mode = COLOR_AUTO
        elif mode < 0 or mode > 2:
            raise RuntimeError(f"Invalid color mode '{mode}'")
        self._mode = mode

    def get(self):
        """ Get the current color mode """
        return self._mode

    def enabled(self):
        """ True if coloring is currently enabled """
        if self._mode == COLOR_AUTO:
            return sys.stdout.isatty()
        return self._mode == COLOR_ON


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Default Logger
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

# Create the default output logger
log = Logging('project_stats').logger
