"""Tests for splicing and committing the README section."""

import unittest
from unittest import mock

from github import GithubException, InputGitAuthor

from waka_readme.publisher import (
    END_MARKER,
    START_MARKER,
    ReadmePublisher,
    splice_section,
)

README = f"# Hi\n\n{START_MARKER}\nold stats\n{END_MARKER}\n\nBye\n"


class TestSpliceSection(unittest.TestCase):

    def test_replaces_between_markers(self):
        result = splice_section(README, "new stats")
        self.assertEqual(result, f"# Hi\n\n{START_MARKER}\nnew stats\n{END_MARKER}\n\nBye\n")

    def test_body_backslashes_kept_literally(self):
        result = splice_section(README, r"C:\path \1")
        self.assertIn("\nC:\\path \\1\n", result)

    def test_document_without_markers_unchanged(self):
        self.assertEqual(splice_section("# Hi\n", "new"), "# Hi\n")


class TestReadmePublisher(unittest.TestCase):
    """Test the PyGithub-backed sink."""

    def setUp(self):
        self.client = mock.MagicMock()
        self.repo = self.client.get_repo.return_value
        self.repo.default_branch = "main"
        self.readme = self.repo.get_readme.return_value
        self.readme.decoded_content = README.encode("utf-8")
        self.readme.path = "README.md"
        self.readme.sha = "abc123"

    def test_publish_commits_spliced_readme(self):
        publisher = ReadmePublisher("token", client=self.client)
        content = publisher.publish("octocat", "new stats", "update README.md.")

        self.client.get_repo.assert_called_once_with("octocat/octocat")
        args, kwargs = self.repo.update_file.call_args
        self.assertEqual(args, ("README.md", "update README.md.", content, "abc123"))
        self.assertEqual(kwargs["branch"], "main")
        self.assertIsInstance(kwargs["author"], InputGitAuthor)
        self.assertIs(kwargs["author"], kwargs["committer"])
        self.assertIn("new stats", content)

    def test_dry_run_does_not_commit(self):
        publisher = ReadmePublisher("token", dry_run=True, client=self.client)
        content = publisher.publish("octocat", "new stats", "msg")
        self.repo.update_file.assert_not_called()
        self.assertIn("new stats", content)

    def test_missing_markers_skips_commit(self):
        self.readme.decoded_content = b"# No markers\n"
        publisher = ReadmePublisher("token", client=self.client)
        self.assertEqual(publisher.publish("octocat", "body", "msg"), "# No markers\n")
        self.repo.update_file.assert_not_called()

    def test_read_failure_is_fatal(self):
        self.repo.get_readme.side_effect = GithubException(404, {"message": "Not Found"})
        publisher = ReadmePublisher("token", client=self.client)
        with self.assertRaises(RuntimeError):
            publisher.publish("octocat", "body", "msg")

    def test_write_failure_is_fatal(self):
        self.repo.update_file.side_effect = GithubException(409, {"message": "Conflict"})
        publisher = ReadmePublisher("token", client=self.client)
        with self.assertRaises(RuntimeError):
            publisher.publish("octocat", "body", "msg")


if __name__ == "__main__":
    unittest.main()
