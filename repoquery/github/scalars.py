"""Scalar GitHub functions: star count and file contents."""

from __future__ import annotations

from typing import Any

from repoquery.github.common import GitHubOptions

_STARGAZER_COUNT_QUERY = """
query($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) { stargazerCount }
}
"""

_FILE_CONTENT_QUERY = """
query($owner: String!, $name: String!, $expression: String!) {
  repository(owner: $owner, name: $name) {
    object(expression: $expression) { ... on Blob { text } }
  }
}
"""


def _wait(options: GitHubOptions) -> None:
    if options.rate_limiter is not None:
        options.rate_limiter.wait()


def _split_full_name(full_name: Any) -> tuple[str, str]:
    parts = str(full_name).split("/")
    if len(parts) != 2:
        raise ValueError("invalid repo name, must be of format owner/name")
    return parts[0], parts[1]


def stargazer_count(options: GitHubOptions, *args: Any) -> int:
    """Return the star count of a repository given as ``owner/name`` or ``owner, name``."""
    _wait(options)
    if not args:
        raise ValueError("need to supply a repo")
    if len(args) == 1:
        owner, name = _split_full_name(args[0])
    else:
        owner, name = str(args[0]), str(args[1])

    options.log.info("fetching number of GitHub stargazers for: %s/%s", owner, name)
    data = options.client().query(_STARGAZER_COUNT_QUERY, {"owner": owner, "name": name})
    repository = data.get("repository") or {}
    return int(repository.get("stargazerCount") or 0)


def repo_file_content(options: GitHubOptions, *args: Any) -> str:
    """Return the text of a file in a repository.

    Accepts ``(owner/name, path)`` or ``(owner, name, path)``; a path without a
    revision is read at ``HEAD``.
    """
    _wait(options)
    if not args:
        raise ValueError("need to supply a repo")
    if len(args) == 1:
        raise ValueError("need to supply a file path")
    if len(args) == 2:
        owner, name = _split_full_name(args[0])
        expression = str(args[1])
    else:
        owner, name, expression = str(args[0]), str(args[1]), str(args[2])

    if ":" not in expression:
        expression = f"HEAD:{expression}"

    options.log.info("fetching GitHub file contents for %s (%s/%s)", expression, owner, name)
    variables = {"owner": owner, "name": name, "expression": expression}

    _wait(options)
    data = options.client().query(_FILE_CONTENT_QUERY, variables)
    repository = data.get("repository") or {}
    blob = repository.get("object") or {}
    return blob.get("text") or ""