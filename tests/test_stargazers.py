import itertools

import pytest

from repoquery.github.common import GitHubOptions
from repoquery.github.stargazers import (
    STARGAZERS_COLUMNS,
    STARRED_REPOS_COLUMNS,
    stargazers,
    starred_repos,
)


class FakeClient:
    def __init__(self, pages):
        self.pages = pages
        self.calls = []

    def query(self, query, variables):
        self.calls.append(dict(variables))
        return self.pages[len(self.calls) - 1]


class CountingLimiter:
    def __init__(self):
        self.waits = 0

    def wait(self):
        self.waits += 1


def _stargazer_edge(i):
    return {
        "starredAt": f"2021-01-01T00:00:{i % 60:02d}Z",
        "node": {
            "login": f"user{i}",
            "email": None,
            "name": f"User {i}",
            "bio": "",
            "company": "Example",
            "avatarUrl": "https://example.com/a.png",
            "createdAt": "2020-01-02T03:04:05Z",
            "updatedAt": "0001-01-01T00:00:00Z",
            "twitterUsername": None,
            "websiteUrl": "https://example.com",
            "location": "Nowhere",
        },
    }


def _stargazer_pages(count, per_page):
    pages = []
    for start in range(0, count, per_page):
        edges = [_stargazer_edge(i) for i in range(start, min(start + per_page, count))]
        has_next = start + per_page < count
        pages.append({
            "repository": {
                "stargazers": {
                    "edges": edges,
                    "pageInfo": {"endCursor": f"c{start + per_page}", "hasNextPage": has_next},
                }
            }
        })
    return pages


def _starred_pages(count, per_page):
    pages = []
    for start in range(0, count, per_page):
        edges = [
            {
                "starredAt": "2021-05-06T07:08:09Z",
                "node": {
                    "name": f"repo{i}",
                    "url": f"https://example.com/repo{i}",
                    "description": None,
                    "createdAt": "2019-03-04T05:06:07.5Z",
                    "pushedAt": None,
                    "updatedAt": "2020-01-01T00:00:00Z",
                    "stargazerCount": i,
                    "nameWithOwner": f"owner/repo{i}",
                },
            }
            for i in range(start, min(start + per_page, count))
        ]
        pages.append({
            "user": {
                "starredRepositories": {
                    "edges": edges,
                    "pageInfo": {"endCursor": f"s{start}", "hasNextPage": start + per_page < count},
                }
            }
        })
    return pages


def _options(client, limiter=None, per_page=100):
    return GitHubOptions(client=lambda: client, rate_limiter=limiter, per_page=per_page)


def test_stargazers_limit_500_rows_12_columns():
    client = FakeClient(_stargazer_pages(700, 100))
    rows = list(itertools.islice(stargazers(_options(client), "askgitdev/askgit"), 500))
    assert len(rows) == 500
    assert all(len(row) == 12 for row in rows)
    assert len(client.calls) == 5


def test_stargazer_visible_columns_match_table_definition():
    client = FakeClient(_stargazer_pages(1, 100))
    row = next(stargazers(_options(client), "askgitdev", "askgit"))
    visible = [c.name for c in STARGAZERS_COLUMNS if not c.hidden]
    assert list(row) == visible


def test_stargazers_pagination_passes_cursor():
    client = FakeClient(_stargazer_pages(250, 100))
    rows = list(stargazers(_options(client), "askgitdev/askgit"))
    assert len(rows) == 250
    assert [c["stargazersCursor"] for c in client.calls] == [None, "c100", "c200"]
    assert client.calls[0]["owner"] == "askgitdev"
    assert client.calls[0]["name"] == "askgit"
    assert client.calls[0]["perpage"] == 100


def test_stargazers_fetches_lazily():
    client = FakeClient(_stargazer_pages(300, 100))
    rows = list(itertools.islice(stargazers(_options(client), "a/b"), 10))
    assert len(rows) == 10
    assert len(client.calls) == 1


def test_stargazer_row_values():
    client = FakeClient(_stargazer_pages(1, 100))
    row = next(stargazers(_options(client), "a/b"))
    assert row["login"] == "user0"
    assert row["email"] == ""
    assert row["twitter"] == ""
    assert row["created_at"] == "2020-01-02T03:04:05Z"
    assert row["updated_at"] is None
    assert row["starred_at"] == "2021-01-01T00:00:00Z"


def test_stargazers_order_variable():
    client = FakeClient(_stargazer_pages(1, 100))
    list(stargazers(_options(client), "a/b", None, "starred_at", True))
    assert client.calls[0]["starorder"] == {"field": "STARRED_AT", "direction": "DESC"}


def test_stargazers_no_order_is_null():
    client = FakeClient(_stargazer_pages(1, 100))
    list(stargazers(_options(client), "a/b"))
    assert client.calls[0]["starorder"] is None


def test_stargazers_invalid_repo_name():
    client = FakeClient([])
    with pytest.raises(ValueError, match="owner/name"):
        stargazers(_options(client), "not-a-full-name")
    assert client.calls == []


def test_stargazers_waits_on_rate_limiter_per_page():
    limiter = CountingLimiter()
    client = FakeClient(_stargazer_pages(30, 10))
    rows = list(stargazers(_options(client, limiter, per_page=10), "a/b"))
    assert len(rows) == 30
    assert limiter.waits == 3


def test_starred_repos_limit_10_rows_9_columns():
    client = FakeClient(_starred_pages(50, 100))
    rows = list(itertools.islice(starred_repos(_options(client), "somebody"), 10))
    assert len(rows) == 10
    assert all(len(row) == 9 for row in rows)
    visible = [c.name for c in STARRED_REPOS_COLUMNS if not c.hidden]
    assert list(rows[0]) == visible


def test_starred_repos_row_values_and_variables():
    client = FakeClient(_starred_pages(3, 2))
    rows = list(starred_repos(_options(client, per_page=2), "somebody", "starred_at", False))
    assert [r["name"] for r in rows] == ["repo0", "repo1", "repo2"]
    assert rows[1]["stargazer_count"] == 1
    assert rows[0]["description"] == ""
    assert rows[0]["pushed_at"] is None
    assert rows[0]["created_at"] == "2019-03-04T05:06:07.5Z"
    assert rows[0]["name_with_owner"] == "owner/repo0"
    assert client.calls[0]["login"] == "somebody"
    assert client.calls[0]["orderBy"] == {"field": "STARRED_AT", "direction": "ASC"}
    assert [c["startcursor"] for c in client.calls] == [None, "s0"]


def test_starred_repos_rejects_unsupported_order():
    with pytest.raises(ValueError):
        starred_repos(_options(FakeClient([])), "somebody", "name", False)