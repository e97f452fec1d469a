from __future__ import annotations

from github import Github, UnknownObjectException


def get_repo(repo_name: str, token: str):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    try:
        return repo.get_pull(pr_number)
    except UnknownObjectException:
        raise ValueError(f"PR #{pr_number} not found in {repo.full_name}.")


def get_files(pr):
    return pr.get_files()


def get_issue_comment_bodies(pr) -> list[str]:
    """Return the PR's conversation comment bodies, oldest first."""
    return [comment.body or "" for comment in pr.get_issue_comments()]


def post_comment(pr, body: str) -> None:
    pr.create_issue_comment(body)


def create_review(pr, body: str, comments: list[dict]) -> None:
    """Create one COMMENT review carrying every inline comment in a single call."""
    kwargs = {"event": "COMMENT", "comments": comments}
    if body:
        kwargs["body"] = body
    pr.create_review(**kwargs)
