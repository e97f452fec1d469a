"""Tests for GitHub pull request helper functions."""

from unittest.mock import MagicMock

import pytest
from github import GithubException, UnknownObjectException

from reviewbot_core.gh.pull_request import (
    create_review,
    get_issue_comment_bodies,
    get_pull,
    get_repo,
    post_comment,
)


class TestGetRepo:
    def test_uses_token(self, mocker):
        mock_github = mocker.patch("reviewbot_core.gh.pull_request.Github")
        get_repo("owner/repo", token="tok")
        mock_github.assert_called_once_with("tok")
        mock_github.return_value.get_repo.assert_called_once_with("owner/repo")


class TestGetPull:
    def test_returns_pull(self):
        repo = MagicMock()
        assert get_pull(repo, 3) is repo.get_pull.return_value
        repo.get_pull.assert_called_once_with(3)

    def test_missing_pull_raises_value_error(self):
        repo = MagicMock()
        repo.full_name = "owner/repo"
        repo.get_pull.side_effect = UnknownObjectException(404, {"message": "Not Found"}, None)
        with pytest.raises(ValueError, match="PR #3 not found in owner/repo"):
            get_pull(repo, 3)

    def test_auth_errors_are_not_reported_as_missing(self):
        repo = MagicMock()
        repo.get_pull.side_effect = GithubException(401, {"message": "Bad credentials"}, None)
        with pytest.raises(GithubException):
            get_pull(repo, 3)


class TestGetIssueCommentBodies:
    def test_returns_bodies_oldest_first(self):
        pr = MagicMock()
        pr.get_issue_comments.return_value = [MagicMock(body="first"), MagicMock(body="second")]
        assert get_issue_comment_bodies(pr) == ["first", "second"]

    def test_none_body_becomes_empty(self):
        pr = MagicMock()
        pr.get_issue_comments.return_value = [MagicMock(body=None)]
        assert get_issue_comment_bodies(pr) == [""]


class TestWrites:
    def test_post_comment(self):
        pr = MagicMock()
        post_comment(pr, "hello")
        pr.create_issue_comment.assert_called_once_with("hello")

    def test_create_review_sends_all_comments_in_one_call(self):
        pr = MagicMock()
        comments = [{"path": "a.py", "line": 1, "side": "RIGHT", "body": "x"}]
        create_review(pr, "summary", comments)
        pr.create_review.assert_called_once_with(event="COMMENT", comments=comments, body="summary")

    def test_create_review_omits_empty_body(self):
        pr = MagicMock()
        create_review(pr, "", [])
        assert "body" not in pr.create_review.call_args.kwargs
