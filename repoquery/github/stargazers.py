"""GitHub tables listing a repository's stargazers and a user's starred repositories."""

from __future__ import annotations

from typing import Any, Iterator

from repoquery.github.common import (
    Column,
    GitHubOptions,
    format_datetime,
    order_by_to_github_order,
    paginate,
    repo_owner_and_name,
)

STARGAZERS_COLUMNS: tuple[Column, ...] = (
    Column("owner", "TEXT", hidden=True, required=True),
    Column("reponame", "TEXT", hidden=True),
    Column("login", "TEXT"),
    Column("email", "TEXT"),
    Column("name", "TEXT"),
    Column("bio", "TEXT"),
    Column("company", "TEXT"),
    Column("avatar_url", "TEXT"),
    Column("created_at", "DATETIME"),
    Column("updated_at", "DATETIME"),
    Column("twitter", "TEXT"),
    Column("website", "TEXT"),
    Column("location", "TEXT"),
    Column("starred_at", "DATETIME", order_by=True),
)

STARRED_REPOS_COLUMNS: tuple[Column, ...] = (
    Column("login", "TEXT", hidden=True, required=True),
    Column("name", "TEXT"),
    Column("url", "TEXT"),
    Column("description", "TEXT"),
    Column("created_at", "DATETIME"),
    Column("pushed_at", "DATETIME"),
    Column("updated_at", "DATETIME"),
    Column("stargazer_count", "INT"),
    Column("name_with_owner", "TEXT"),
    Column("starred_at", "DATETIME", order_by=True),
)

_STAR_ORDER_FIELDS = {"starred_at": "STARRED_AT"}

_STARGAZERS_QUERY = """
query($owner: String!, $name: String!, $perpage: Int!, $stargazersCursor: String, $starorder: StarOrder) {
  repository(owner: $owner, name: $name) {
    owner { login }
    name
    stargazers(first: $perpage, after: $stargazersCursor, orderBy: $starorder) {
      edges {
        starredAt
        node {
          login email name bio company avatarUrl createdAt updatedAt
          twitterUsername websiteUrl location
        }
      }
      pageInfo { endCursor hasNextPage }
    }
  }
}
"""

_STARRED_REPOS_QUERY = """
query($login: String!, $perpage: Int!, $startcursor: String, $orderBy: StarOrder) {
  user(login: $login) {
    login
    starredRepositories(first: $perpage, after: $startcursor, orderBy: $orderBy) {
      edges {
        starredAt
        node {
          name url description createdAt pushedAt updatedAt stargazerCount nameWithOwner
        }
      }
      pageInfo { endCursor hasNextPage }
    }
  }
}
"""


def _star_order(order_by: str | None, desc: bool) -> dict[str, str] | None:
    if order_by is None:
        return None
    if order_by not in _STAR_ORDER_FIELDS:
        raise ValueError(f"cannot order by column {order_by!r}")
    return {"field": _STAR_ORDER_FIELDS[order_by], "direction": order_by_to_github_order(desc)}


def _page(connection: dict[str, Any] | None) -> tuple[list[Any], bool, str | None]:
    connection = connection or {}
    page_info = connection.get("pageInfo") or {}
    return (
        list(connection.get("edges") or []),
        bool(page_info.get("hasNextPage")),
        page_info.get("endCursor"),
    )


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _stargazer_row(edge: dict[str, Any]) -> dict[str, Any]:
    node = edge.get("node") or {}
    return {
        "login": _text(node.get("login")),
        "email": _text(node.get("email")),
        "name": _text(node.get("name")),
        "bio": _text(node.get("bio")),
        "company": _text(node.get("company")),
        "avatar_url": _text(node.get("avatarUrl")),
        "created_at": format_datetime(node.get("createdAt")),
        "updated_at": format_datetime(node.get("updatedAt")),
        "twitter": _text(node.get("twitterUsername")),
        "website": _text(node.get("websiteUrl")),
        "location": _text(node.get("location")),
        "starred_at": _text(edge.get("starredAt")),
    }


def _starred_repo_row(edge: dict[str, Any]) -> dict[str, Any]:
    node = edge.get("node") or {}
    return {
        "name": _text(node.get("name")),
        "url": _text(node.get("url")),
        "description": _text(node.get("description")),
        "created_at": format_datetime(node.get("createdAt")),
        "pushed_at": format_datetime(node.get("pushedAt")),
        "updated_at": format_datetime(node.get("updatedAt")),
        "stargazer_count": int(node.get("stargazerCount") or 0),
        "name_with_owner": _text(node.get("nameWithOwner")),
        "starred_at": _text(edge.get("starredAt")),
    }


def stargazers(
    options: GitHubOptions,
    owner: str | None,
    reponame: str | None = None,
    order_by: str | None = None,
    desc: bool = False,
) -> Iterator[dict[str, Any]]:
    """Iterate over the stargazers of a repository, one dict per visible column set.

    The repository is given as ``owner/name`` in ``owner`` or as separate values.
    """
    repo_owner, repo_name = repo_owner_and_name(reponame, owner)
    order = _star_order(order_by, desc)
    options.log.info("starting GitHub stargazers iterator for %s/%s", repo_owner, repo_name)

    def fetch(cursor: str | None) -> tuple[list[Any], bool, str | None]:
        variables = {
            "owner": repo_owner,
            "name": repo_name,
            "perpage": options.per_page,
            "stargazersCursor": cursor,
            "starorder": order,
        }
        data = options.client().query(_STARGAZERS_QUERY, variables)
        repository = data.get("repository") or {}
        return _page(repository.get("stargazers"))

    return (_stargazer_row(edge) for edge in paginate(options, fetch))


def starred_repos(
    options: GitHubOptions,
    login: str | None,
    order_by: str | None = None,
    desc: bool = False,
) -> Iterator[dict[str, Any]]:
    """Iterate over the repositories starred by a user."""
    user_login = login or ""
    order = _star_order(order_by, desc)
    options.log.info("starting GitHub starred_repos iterator for %s", user_login)

    def fetch(cursor: str | None) -> tuple[list[Any], bool, str | None]:
        variables = {
            "perpage": options.per_page,
            "startcursor": cursor,
            "login": user_login,
            "orderBy": order,
        }
        data = options.client().query(_STARRED_REPOS_QUERY, variables)
        user = data.get("user") or {}
        return _page(user.get("starredRepositories"))

    return (_starred_repo_row(edge) for edge in paginate(options, fetch))