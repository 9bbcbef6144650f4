"""
README publishing module.

Replaces the marked report section of the viewer's profile README and
commits the result through the GitHub content API using PyGithub.
"""

import datetime
import logging
import re
from typing import Optional

from github import Auth, Github, GithubException, InputGitAuthor

# Set up logging
logger = logging.getLogger("waka-readme.publisher")

START_MARKER = "<!--START_SECTION:waka-->"
END_MARKER = "<!--END_SECTION:waka-->"
SECTION_RE = re.compile(re.escape(START_MARKER) + r".*" + re.escape(END_MARKER), re.DOTALL)

BOT_NAME = "wakatime-generator-bot"
BOT_EMAIL = "41898282+github-actions[bot]@users.noreply.github.com"


def has_section(document: str) -> bool:
    return SECTION_RE.search(document) is not None


def splice_section(document: str, body: str) -> str:
    """
    Replace the marked section of ``document`` with ``body``.

    Everything from the first start marker to the last end marker is replaced
    by the markers wrapping the new body. Documents without the markers are
    returned unchanged.
    """
    section = f"{START_MARKER}\n{body}\n{END_MARKER}"
    return SECTION_RE.sub(lambda _: section, document)


class ReadmePublisher:
    """
    Write the report into the ``<login>/<login>`` profile README.

    Args:
        token: GitHub token with write access to the profile repository.
        dry_run: When True the spliced README is returned but never committed.
        client: Optional preconfigured PyGithub client, mainly for tests.
    """

    def __init__(self, token: str, dry_run: bool = False, client: Optional[Github] = None) -> None:
        self.dry_run = dry_run
        self._g = client or Github(auth=Auth.Token(token))

    def publish(self, login: str, body: str, commit_message: str) -> str:
        """
        Splice ``body`` into the profile README and commit it.

        Args:
            login: Viewer login, which names the profile repository
            body: Rendered report
            commit_message: Message for the README commit

        Returns:
            The new README content

        Raises:
            RuntimeError: If the README cannot be read or updated
        """
        try:
            repo = self._g.get_repo(f"{login}/{login}")
            readme = repo.get_readme()
            old_content = readme.decoded_content.decode("utf-8")
        except GithubException as e:
            error_msg = f"Failed to read README for {login}/{login}: {e}"
            logger.error(error_msg)
            raise RuntimeError(error_msg) from e

        if not has_section(old_content):
            logger.warning("README of %s/%s has no %s ... %s section; nothing to update",
                           login, login, START_MARKER, END_MARKER)
            return old_content

        new_content = splice_section(old_content, body)
        if self.dry_run:
            logger.info("Dry run: skipping commit to %s/%s", login, login)
            return new_content
        if new_content == old_content:
            logger.info("README already up to date")
            return new_content

        author = InputGitAuthor(BOT_NAME, BOT_EMAIL, datetime.datetime.now(datetime.timezone.utc).isoformat())
        try:
            repo.update_file(
                readme.path,
                commit_message,
                new_content,
                readme.sha,
                branch=repo.default_branch,
                committer=author,
                author=author,
            )
        except GithubException as e:
            error_msg = f"Failed to update README for {login}/{login}: {e}"
            logger.error(error_msg)
            raise RuntimeError(error_msg) from e

        logger.info("Committed report to %s/%s/%s", login, login, readme.path)
        return new_content
