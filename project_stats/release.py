"""
Latest release lookup

Config example::

    [general]
    release = github
    github = Homebrew/homebrew-cask
    url = https://api.github.com/
    token = <authentication-token>
    timeout = 10

By default (``release = git``) the most recent tag reachable from the
current head is used. With ``release = github`` the tag of the latest
published GitHub release of the configured project is fetched. The
token is optional, ``token_file`` can be used instead to keep it out
of the config file.
"""

import requests

from project_stats.base import ReferenceNotFoundError, ReportError
from project_stats.utils import log, pretty

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  GitHub
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~


class GitHub():
    """ GitHub release investigator """
    # pylint: disable=too-few-public-methods

    def __init__(self, *, url, project, token=None, timeout=60):
        """ Initialize url and headers """
        self.url = url.rstrip("/")
        self.project = project
        self.timeout = timeout
        if token is not None:
            self.headers = {'Authorization': f'token {token}'}
        else:
            self.headers = {}

    def latest(self):
        """ Tag name of the latest release """
        url = f"{self.url}/repos/{self.project}/releases/latest"
        log.debug("GitHub query: %s", url)
        try:
            response = requests.get(
                url, headers=self.headers, timeout=self.timeout)
        except requests.exceptions.RequestException as error:
            log.debug(error)
            raise ReportError(
                f"GitHub request on {self.url} failed.") from error
        log.debug("GitHub status code: %s", response.status_code)
        if response.status_code == 401:
            raise ReportError(
                "Defined token is not valid. "
                "Either update it or remove it.")
        if response.status_code == 404:
            raise ReferenceNotFoundError(
                "release",
                f"No release found for the '{self.project}' project.")
        if response.status_code != 200:
            raise ReportError(f"GitHub query failed: {response.text}")
        try:
            data = response.json()
        except requests.exceptions.JSONDecodeError as error:
            log.debug(error)
            raise ReportError(
                f"GitHub JSON failed: {response.text}.") from error
        log.data(pretty(data))
        try:
            return data["tag_name"]
        except (KeyError, TypeError) as error:
            raise ReportError(
                f"No tag name in the GitHub release data: {data}") from error


# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
#  Lookup
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

def latest_release(repo, config):
    """ Identifier of the most recent release tag """
    if config.release == "github":
        tag = GitHub(
            url=config.url,
            project=config.github,
            token=config.token,
            timeout=config.timeout).latest()
    else:
        tag = repo.latest_tag()
        if tag is None:
            raise ReferenceNotFoundError(
                "release", "No release tag found in the history.")
    log.info("Latest release is '%s'", tag)
    return tag
