"""GitHub tables listing the issues and pull requests of a repository."""

from __future__ import annotations

from typing import Any, Iterator

from repoquery.github.common import (
    Column,
    GitHubOptions,
    bool_to_int,
    format_datetime,
    order_by_to_github_order,
    paginate,
    repo_owner_and_name,
)

ISSUES_COLUMNS: tuple[Column, ...] = (
    Column("owner", "TEXT", hidden=True, not_null=True, required=True),
    Column("reponame", "TEXT", hidden=True, not_null=True),
    Column("author_login", "TEXT"),
    Column("body", "TEXT"),
    Column("closed", "BOOLEAN"),
    Column("closed_at", "DATETIME"),
    Column("comment_count", "INT", order_by=True),
    Column("created_at", "DATETIME", order_by=True),
    Column("created_via_email", "BOOLEAN"),
    Column("database_id", "TEXT"),
    Column("editor_login", "TEXT"),
    Column("includes_created_edit", "BOOLEAN"),
    Column("label_count", "INT"),
    Column("last_edited_at", "DATETIME"),
    Column("locked", "BOOLEAN"),
    Column("milestone_count", "INT"),
    Column("number", "INT"),
    Column("participant_count", "INT"),
    Column("published_at", "DATETIME"),
    Column("reaction_count", "INT"),
    Column("state", "TEXT"),
    Column("title", "TEXT"),
    Column("updated_at", "DATETIME", order_by=True),
    Column("url", "TEXT"),
)

PULL_REQUESTS_COLUMNS: tuple[Column, ...] = (
    Column("owner", "TEXT", hidden=True, not_null=True, required=True),
    Column("reponame", "TEXT", hidden=True, not_null=True),
    Column("additions", "INT"),
    Column("author_login", "TEXT"),
    Column("author_association", "TEXT"),
    Column("base_ref_oid", "TEXT"),
    Column("base_ref_name", "TEXT"),
    Column("base_repository_name", "TEXT"),
    Column("body", "TEXT"),
    Column("changed_files", "INT"),
    Column("closed", "BOOLEAN"),
    Column("closed_at", "DATETIME"),
    Column("comment_count", "INT", order_by=True),
    Column("commit_count", "INT"),
    Column("created_at", "DATETIME", order_by=True),
    Column("created_via_email", "BOOLEAN"),
    Column("database_id", "INT"),
    Column("deletions", "INT"),
    Column("editor_login", "TEXT"),
    Column("head_ref_name", "TEXT"),
    Column("head_ref_oid", "TEXT"),
    Column("head_repository_name", "TEXT"),
    Column("is_draft", "BOOLEAN"),
    Column("label_count", "INT"),
    Column("last_edited_at", "DATETIME"),
    Column("locked", "BOOLEAN"),
    Column("maintainer_can_modify", "BOOLEAN"),
    Column("mergeable", "TEXT"),
    Column("merged", "BOOLEAN"),
    Column("merged_at", "DATETIME"),
    Column("merged_by", "TEXT"),
    Column("number", "INT"),
    Column("participant_count", "INT"),
    Column("published_at", "DATETIME"),
    Column("review_decision", "TEXT"),
    Column("state", "TEXT"),
    Column("title", "TEXT"),
    Column("updated_at", "DATETIME", order_by=True),
    Column("url", "TEXT"),
)

_ISSUE_ORDER_FIELDS = {
    "comment_count": "COMMENTS",
    "created_at": "CREATED_AT",
    "updated_at": "UPDATED_AT",
}

_ISSUES_QUERY = """
query($owner: String!, $name: String!, $perpage: Int!, $issuecursor: String, $issueorder: IssueOrder) {
  repository(owner: $owner, name: $name) {
    owner { login }
    name
    issues(first: $perpage, after: $issuecursor, orderBy: $issueorder) {
      edges {
        cursor
        node {
          author { login }
          body
          closed
          closedAt
          comments { totalCount }
          createdAt
          createdViaEmail
          databaseId
          editor { login }
          includesCreatedEdit
          isReadByViewer
          labels { totalCount }
          lastEditedAt
          locked
          milestone { number }
          number
          participants { totalCount }
          publishedAt
          reactions { totalCount }
          state
          title
          updatedAt
          url
        }
      }
      pageInfo { endCursor hasNextPage }
    }
  }
}
"""

_PULL_REQUESTS_QUERY = """
query($owner: String!, $name: String!, $perpage: Int!, $prcursor: String, $prorder: IssueOrder) {
  repository(owner: $owner, name: $name) {
    owner { login }
    name
    pullRequests(first: $perpage, after: $prcursor, orderBy: $prorder) {
      nodes {
        activeLockReason
        additions
        author { login }
        authorAssociation
        baseRefOid
        baseRefName
        baseRepository { nameWithOwner }
        body
        changedFiles
        closed
        closedAt
        comments { totalCount }
        commits { totalCount }
        createdAt
        createdViaEmail
        databaseId
        deletions
        editor { login }
        headRefName
        headRefOid
        headRepository { nameWithOwner }
        isCrossRepository
        isDraft
        labels { totalCount }
        lastEditedAt
        locked
        maintainerCanModify
        mergeable
        merged
        mergedAt
        mergedBy { login }
        number
        participants { totalCount }
        publishedAt
        reviewDecision
        state
        title
        updatedAt
        url
      }
      pageInfo { endCursor hasNextPage }
    }
  }
}
"""


def _issue_order(order_by: str | None, desc: bool) -> dict[str, str] | None:
    if order_by is None:
        return None
    if order_by not in _ISSUE_ORDER_FIELDS:
        raise ValueError(f"cannot order by column {order_by!r}")
    return {"field": _ISSUE_ORDER_FIELDS[order_by], "direction": order_by_to_github_order(desc)}


def _nested(node: Any, *keys: str) -> Any:
    value = node
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _int(value: Any) -> int:
    return int(value or 0)


def _page(connection: dict[str, Any] | None, key: str) -> tuple[list[Any], bool, str | None]:
    connection = connection or {}
    page_info = connection.get("pageInfo") or {}
    return (
        list(connection.get(key) or []),
        bool(page_info.get("hasNextPage")),
        page_info.get("endCursor"),
    )


def _issue_row(edge: dict[str, Any] | None) -> dict[str, Any]:
    node = (edge or {}).get("node") or {}
    return {
        "author_login": _text(_nested(node, "author", "login")),
        "body": _text(node.get("body")),
        "closed": bool_to_int(node.get("closed")),
        "closed_at": format_datetime(node.get("closedAt")),
        "comment_count": _int(_nested(node, "comments", "totalCount")),
        "created_at": format_datetime(node.get("createdAt")),
        "created_via_email": bool_to_int(node.get("createdViaEmail")),
        "database_id": _int(node.get("databaseId")),
        "editor_login": _text(_nested(node, "editor", "login")),
        "includes_created_edit": bool_to_int(node.get("includesCreatedEdit")),
        "label_count": _int(_nested(node, "labels", "totalCount")),
        "last_edited_at": format_datetime(node.get("lastEditedAt")),
        "locked": bool_to_int(node.get("locked")),
        # the column is declared but never filled, so it always reads NULL
        "milestone_count": None,
        "number": _int(node.get("number")),
        "participant_count": _int(_nested(node, "participants", "totalCount")),
        "published_at": format_datetime(node.get("publishedAt")),
        "reaction_count": _int(_nested(node, "reactions", "totalCount")),
        "state": _text(node.get("state")),
        "title": _text(node.get("title")),
        "updated_at": format_datetime(node.get("updatedAt")),
        "url": _text(node.get("url")),
    }


def _pull_request_row(node: dict[str, Any] | None) -> dict[str, Any]:
    node = node or {}
    return {
        "additions": _int(node.get("additions")),
        "author_login": _text(_nested(node, "author", "login")),
        "author_association": _text(node.get("authorAssociation")),
        "base_ref_oid": _text(node.get("baseRefOid")),
        "base_ref_name": _text(node.get("baseRefName")),
        "base_repository_name": _text(_nested(node, "baseRepository", "nameWithOwner")),
        "body": _text(node.get("body")),
        "changed_files": _int(node.get("changedFiles")),
        "closed": bool_to_int(node.get("closed")),
        "closed_at": format_datetime(node.get("closedAt")),
        "comment_count": _int(_nested(node, "comments", "totalCount")),
        "commit_count": _int(_nested(node, "commits", "totalCount")),
        "created_at": format_datetime(node.get("createdAt")),
        "created_via_email": bool_to_int(node.get("createdViaEmail")),
        "database_id": _int(node.get("databaseId")),
        "deletions": _int(node.get("deletions")),
        "editor_login": _text(_nested(node, "editor", "login")),
        "head_ref_name": _text(node.get("headRefName")),
        "head_ref_oid": _text(node.get("headRefOid")),
        "head_repository_name": _text(_nested(node, "headRepository", "nameWithOwner")),
        "is_draft": bool_to_int(node.get("isDraft")),
        "label_count": _int(_nested(node, "labels", "totalCount")),
        "last_edited_at": format_datetime(node.get("lastEditedAt")),
        "locked": bool_to_int(node.get("locked")),
        "maintainer_can_modify": bool_to_int(node.get("maintainerCanModify")),
        "mergeable": _text(node.get("mergeable")),
        "merged": bool_to_int(node.get("merged")),
        "merged_at": format_datetime(node.get("mergedAt")),
        "merged_by": _text(_nested(node, "mergedBy", "login")),
        "number": _int(node.get("number")),
        "participant_count": _int(_nested(node, "participants", "totalCount")),
        "published_at": format_datetime(node.get("publishedAt")),
        "review_decision": _text(node.get("reviewDecision")),
        "state": _text(node.get("state")),
        "title": _text(node.get("title")),
        "updated_at": format_datetime(node.get("updatedAt")),
        "url": _text(node.get("url")),
    }


def repo_issues(
    options: GitHubOptions,
    owner: str | None,
    reponame: str | None = None,
    order_by: str | None = None,
    desc: bool = False,
) -> Iterator[dict[str, Any]]:
    """Iterate over the issues of a repository given as ``owner/name`` or separately."""
    repo_owner, repo_name = repo_owner_and_name(reponame, owner)
    order = _issue_order(order_by, desc)
    options.log.info("starting GitHub repo_issues iterator for %s/%s", repo_owner, repo_name)

    def fetch(cursor: str | None) -> tuple[list[Any], bool, str | None]:
        variables = {
            "owner": repo_owner,
            "name": repo_name,
            "perpage": options.per_page,
            "issuecursor": cursor,
            "issueorder": order,
        }
        data = options.client().query(_ISSUES_QUERY, variables)
        repository = data.get("repository") or {}
        return _page(repository.get("issues"), "edges")

    return (_issue_row(edge) for edge in paginate(options, fetch))


def repo_pull_requests(
    options: GitHubOptions,
    owner: str | None,
    reponame: str | None = None,
    order_by: str | None = None,
    desc: bool = False,
) -> Iterator[dict[str, Any]]:
    """Iterate over the pull requests of a repository given as ``owner/name`` or separately."""
    repo_owner, repo_name = repo_owner_and_name(reponame, owner)
    order = _issue_order(order_by, desc)
    options.log.info(
        "starting GitHub repo_pull_requests iterator for %s/%s", repo_owner, repo_name
    )

    def fetch(cursor: str | None) -> tuple[list[Any], bool, str | None]:
        variables = {
            "owner": repo_owner,
            "name": repo_name,
            "perpage": options.per_page,
            "prcursor": cursor,
            "prorder": order,
        }
        data = options.client().query(_PULL_REQUESTS_QUERY, variables)
        repository = data.get("repository") or {}
        return _page(repository.get("pullRequests"), "nodes")

    return (_pull_request_row(node) for node in paginate(options, fetch))