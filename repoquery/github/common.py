"""Shared pieces of the GitHub functions and tables."""

from __future__ import annotations

import datetime as _dt
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Mapping

import requests

from repoquery.context import Context

GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"
DEFAULT_PER_PAGE = 100

_log = logging.getLogger("repoquery.github")


class GraphQLError(RuntimeError):
    """Raised when a GraphQL endpoint answers with errors."""


class RateLimiter:
    """Token bucket allowing ``burst`` requests, refilled one per ``interval`` seconds."""

    def __init__(
        self,
        interval: float,
        burst: int,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.interval = float(interval)
        self.burst = int(burst)
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(self.burst)
        self._last: float | None = None
        self._lock = threading.Lock()

    def wait(self) -> None:
        """Block until one request is allowed."""
        if self.interval <= 0:
            return
        if self.burst < 1:
            raise ValueError(f"wait(n=1) exceeds limiter's burst {self.burst}")
        with self._lock:
            now = self._clock()
            if self._last is not None:
                elapsed = max(now - self._last, 0.0)
                self._tokens = min(float(self.burst), self._tokens + elapsed / self.interval)
            self._last = now
            self._tokens -= 1
            delay = -self._tokens * self.interval if self._tokens < 0 else 0.0
        if delay > 0:
            self._sleep(delay)


class GraphQLClient:
    """Minimal GraphQL client posting queries over HTTP."""

    def __init__(
        self,
        url: str = GITHUB_GRAPHQL_URL,
        token: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.url = url
        self.token = token
        self.session = session or requests.Session()

    def query(self, query: str, variables: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Run ``query`` and return its ``data`` object."""
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        response = self.session.post(
            self.url, json={"query": query, "variables": dict(variables or {})}, headers=headers
        )
        response.raise_for_status()
        payload = response.json()
        errors = payload.get("errors")
        if errors:
            messages = [e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in errors]
            raise GraphQLError("; ".join(messages))
        return payload.get("data") or {}


@dataclass
class GitHubOptions:
    """Settings shared by the GitHub functions and tables."""

    client: Callable[[], Any] = GraphQLClient
    rate_limiter: Any = None
    per_page: int = DEFAULT_PER_PAGE
    logger: logging.Logger | None = None

    @property
    def log(self) -> logging.Logger:
        return self.logger or _log


@dataclass(frozen=True)
class Column:
    """A column of a GitHub table."""

    name: str
    type: str
    hidden: bool = False
    not_null: bool = False
    required: bool = False
    order_by: bool = False


def _ctx(ctx: Mapping[str, str] | None) -> Context:
    return ctx if isinstance(ctx, Context) else Context(ctx or {})


def get_github_token_from_ctx(ctx: Mapping[str, str] | None) -> str:
    """Return the ``githubToken`` value, or an empty string."""
    return _ctx(ctx).get("githubToken", "")


def _atoi(text: str) -> int | None:
    return Context({"v": text}).get_int("v")


def get_github_rate_limit_from_ctx(ctx: Mapping[str, str] | None) -> RateLimiter | None:
    """Build a rate limiter from ``githubRateLimit``.

    ``"2/3"`` allows 2 requests every 3 seconds, ``"5"`` allows 5 per second.
    Returns None when unset or unparseable.
    """
    context = _ctx(ctx)
    if "githubRateLimit" not in context:
        return None
    value = context["githubRateLimit"]
    if "/" in value:
        first_text, second_text = value.split("/", 1)
        first, second = _atoi(first_text), _atoi(second_text)
        if first is None or second is None:
            return None
        return RateLimiter(second, first)
    per_sec = context.get_int("githubRateLimit")
    if per_sec is None:
        return None
    return RateLimiter(1, per_sec)


def get_github_per_page_from_ctx(ctx: Mapping[str, str] | None) -> int:
    """Return ``githubPerPage`` if set and non-zero, otherwise 100."""
    value = _ctx(ctx).get_int("githubPerPage")
    return value if value else DEFAULT_PER_PAGE


def order_by_to_github_order(desc: bool) -> str:
    """Map a descending flag to a GitHub order direction."""
    return "DESC" if desc else "ASC"


def repo_owner_and_name(name: str | None, full_name_or_owner: str | None) -> tuple[str, str]:
    """Return ``(owner, name)`` from either ``owner/name`` or separate values."""
    if not name:
        parts = (full_name_or_owner or "").split("/")
        if len(parts) != 2:
            raise ValueError("invalid repo name, must be of format owner/name")
        return parts[0], parts[1]
    return full_name_or_owner or "", name


_ZERO_TIME = _dt.datetime(1, 1, 1, tzinfo=_dt.timezone.utc)


def format_datetime(value: str | _dt.datetime | None) -> str | None:
    """Format a timestamp as RFC 3339 with trimmed fractional seconds.

    Returns None for missing values and for the zero time.
    """
    if value is None or value == "":
        return None
    dt = _dt.datetime.fromisoformat(value) if isinstance(value, str) else value
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)
    try:
        if dt == _ZERO_TIME:
            return None
    except OverflowError:
        pass
    text = (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
        f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"
    )
    if dt.microsecond:
        text += "." + f"{dt.microsecond:06d}".rstrip("0")
    offset = dt.utcoffset() or _dt.timedelta(0)
    seconds = int(offset.total_seconds())
    if seconds == 0:
        return text + "Z"
    sign = "+" if seconds > 0 else "-"
    hours, minutes = divmod(abs(seconds) // 60, 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


def bool_to_int(value: bool) -> int:
    """Return 1 for a true value and 0 otherwise."""
    return 1 if value else 0


def paginate(
    options: GitHubOptions,
    fetch_page: Callable[[str | None], tuple[Iterable[Any], bool, str | None]],
) -> Iterator[Any]:
    """Yield items from successive pages, waiting on the rate limiter before each fetch.

    ``fetch_page(cursor)`` returns ``(items, has_next_page, end_cursor)``.
    """
    cursor: str | None = None
    while True:
        if options.rate_limiter is not None:
            options.rate_limiter.wait()
        options.log.info("fetching page (per-page=%s, cursor=%s)", options.per_page, cursor)
        items, has_next_page, end_cursor = fetch_page(cursor)
        yield from items
        if not has_next_page:
            return
        cursor = end_cursor