"""Release host access (GitHub, through the gh CLI).

The reconciliation logic codes against ``ReleaseHost``; ``GhReleaseHost``
implements it with ``gh api``. Reads are idempotent and retried on transient
failures; writes run exactly once.
"""

from __future__ import annotations

import json
from pathlib import Path
from time import sleep
from typing import Protocol

from relpr.core.result import Err, Ok, Result
from relpr.core.structured import (
    StrDict,
    as_obj_list,
    as_str_dict,
    get_bool,
    get_int,
    get_list,
    get_raw_str,
    get_str,
    get_table,
)
from relpr.platform.process import ProcessError, env_with
from relpr.platform.process import run as run_process
from relpr.services.release.errors import ReleaseError
from relpr.services.release.model import PullRequest, Release
from relpr.services.release.timeouts import (
    GH_READ_RETRY_ATTEMPTS,
    GH_READ_RETRY_DELAY_SECONDS,
    GH_TIMEOUT_SECONDS,
)


class ReleaseHost(Protocol):
    """Pull request and release operations the release runs need."""

    def search_open_pull_requests(self, query: str) -> Result[list[PullRequest], ReleaseError]: ...

    def create_pull_request(
        self, *, base: str, head: str, title: str, body: str
    ) -> Result[PullRequest, ReleaseError]: ...

    def update_pull_request(
        self, number: int, *, title: str, body: str
    ) -> Result[PullRequest, ReleaseError]: ...

    def create_release(
        self, *, tag_name: str, name: str, body: str, draft: bool, prerelease: bool = False
    ) -> Result[Release, ReleaseError]: ...

    def update_release(
        self,
        release_id: int,
        *,
        draft: bool,
        name: str | None = None,
        tag_name: str | None = None,
        body: str | None = None,
    ) -> Result[Release, ReleaseError]: ...

    def get_release(self, release_id: int) -> Result[Release, ReleaseError]: ...

    def list_pull_requests_for_commit(self, sha: str) -> Result[list[PullRequest], ReleaseError]: ...


def _is_transient_gh_error(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    markers = (
        "timed out",
        "timeout",
        "connection reset",
        "connection refused",
        "temporarily unavailable",
        "service unavailable",
        "bad gateway",
        "gateway timeout",
        "http 429",
        "http 500",
        "http 502",
        "http 503",
        "http 504",
    )
    return any(marker in text for marker in markers)


def parse_pull_request(data: StrDict) -> PullRequest | None:
    number = get_int(data, "number")
    if number is None:
        return None

    # Search results nest merge state under "pull_request".
    merged_at = get_str(data, "merged_at")
    if merged_at is None:
        nested = get_table(data, "pull_request")
        if nested is not None:
            merged_at = get_str(nested, "merged_at")

    return PullRequest(
        number=number,
        body=get_raw_str(data, "body") or "",
        merged_at=merged_at,
        id=get_int(data, "id"),
    )


def parse_release(data: StrDict) -> Release | None:
    release_id = get_int(data, "id")
    tag_name = get_str(data, "tag_name")
    draft = get_bool(data, "draft")
    if release_id is None or tag_name is None or draft is None:
        return None
    return Release(
        id=release_id,
        body=get_raw_str(data, "body") or "",
        tag_name=tag_name,
        draft=draft,
        name=get_str(data, "name"),
    )


class GhReleaseHost:
    """ReleaseHost backed by ``gh api``.

    Usage:
        host = GhReleaseHost(repo="owner/name", cwd=Path("."), token=token)
        release = host.get_release(123)
    """

    def __init__(
        self,
        *,
        repo: str,
        cwd: Path,
        token: str | None = None,
        retry_attempts: int = GH_READ_RETRY_ATTEMPTS,
    ) -> None:
        self.repo = repo
        self._cwd = cwd
        self._env = env_with({"GH_TOKEN": token}) if token else None
        self._retry_attempts = max(1, retry_attempts)

    def search_open_pull_requests(self, query: str) -> Result[list[PullRequest], ReleaseError]:
        obj = self._read(["search/issues", "--method", "GET", "-f", f"q={query}"])
        if isinstance(obj, Err):
            return obj

        data = as_str_dict(obj.value)
        items = get_list(data, "items") if data is not None else None
        if items is None:
            return Err(ReleaseError(kind="host_failed", message="unexpected search payload", hint=query))
        return Ok(self._pull_list(items))

    def create_pull_request(
        self, *, base: str, head: str, title: str, body: str
    ) -> Result[PullRequest, ReleaseError]:
        obj = self._write(
            f"repos/{self.repo}/pulls",
            method="POST",
            fields={"base": base, "head": head, "title": title, "body": body},
        )
        return obj.flat_map(self._as_pull)

    def update_pull_request(
        self, number: int, *, title: str, body: str
    ) -> Result[PullRequest, ReleaseError]:
        obj = self._write(
            f"repos/{self.repo}/pulls/{number}",
            method="PATCH",
            fields={"title": title, "body": body},
        )
        return obj.flat_map(self._as_pull)

    def create_release(
        self, *, tag_name: str, name: str, body: str, draft: bool, prerelease: bool = False
    ) -> Result[Release, ReleaseError]:
        obj = self._write(
            f"repos/{self.repo}/releases",
            method="POST",
            fields={"tag_name": tag_name, "name": name, "body": body},
            typed_fields={"draft": draft, "prerelease": prerelease},
        )
        return obj.flat_map(self._as_release)

    def update_release(
        self,
        release_id: int,
        *,
        draft: bool,
        name: str | None = None,
        tag_name: str | None = None,
        body: str | None = None,
    ) -> Result[Release, ReleaseError]:
        fields = {
            key: value
            for key, value in (("name", name), ("tag_name", tag_name), ("body", body))
            if value is not None
        }
        obj = self._write(
            f"repos/{self.repo}/releases/{release_id}",
            method="PATCH",
            fields=fields,
            typed_fields={"draft": draft},
        )
        return obj.flat_map(self._as_release)

    def get_release(self, release_id: int) -> Result[Release, ReleaseError]:
        obj = self._read([f"repos/{self.repo}/releases/{release_id}"])
        return obj.flat_map(self._as_release)

    def list_pull_requests_for_commit(self, sha: str) -> Result[list[PullRequest], ReleaseError]:
        obj = self._read([f"repos/{self.repo}/commits/{sha}/pulls"])
        if isinstance(obj, Err):
            return obj

        raw = as_obj_list(obj.value)
        if raw is None:
            return Err(
                ReleaseError(kind="host_failed", message=f"unexpected pulls payload for commit {sha}")
            )
        return Ok(self._pull_list(raw))

    def _pull_list(self, raw: list[object]) -> list[PullRequest]:
        out: list[PullRequest] = []
        for item in raw:
            d = as_str_dict(item)
            if d is None:
                continue
            pull = parse_pull_request(d)
            if pull is not None:
                out.append(pull)
        return out

    def _as_pull(self, obj: object) -> Result[PullRequest, ReleaseError]:
        data = as_str_dict(obj)
        pull = parse_pull_request(data) if data is not None else None
        if pull is None:
            return Err(ReleaseError(kind="host_failed", message="unexpected pull request payload"))
        return Ok(pull)

    def _as_release(self, obj: object) -> Result[Release, ReleaseError]:
        data = as_str_dict(obj)
        release = parse_release(data) if data is not None else None
        if release is None:
            return Err(ReleaseError(kind="host_failed", message="unexpected release payload"))
        return Ok(release)

    def _read(self, args: list[str]) -> Result[object, ReleaseError]:
        cmd = ["gh", "api", *args]
        for attempt in range(self._retry_attempts):
            result = run_process(cmd, cwd=self._cwd, env=self._env, timeout=GH_TIMEOUT_SECONDS)
            if isinstance(result, Ok):
                return self._decode(result.value, endpoint=args[0])

            error = result.error
            if attempt < self._retry_attempts - 1 and _is_transient_gh_error(error):
                sleep(GH_READ_RETRY_DELAY_SECONDS * (attempt + 1))
                continue
            return Err(
                ReleaseError(
                    kind="host_failed",
                    message=f"gh api failed: {args[0]}",
                    hint=error.stderr.strip() or None,
                )
            )

        return Err(ReleaseError(kind="host_failed", message=f"gh api failed: {args[0]}"))

    def _write(
        self,
        endpoint: str,
        *,
        method: str,
        fields: dict[str, str],
        typed_fields: dict[str, bool] | None = None,
    ) -> Result[object, ReleaseError]:
        # -f sends raw strings; -F lets gh convert true/false to JSON booleans.
        cmd = ["gh", "api", "--method", method, endpoint]
        for key, value in fields.items():
            cmd += ["-f", f"{key}={value}"]
        for key, flag in (typed_fields or {}).items():
            cmd += ["-F", f"{key}={'true' if flag else 'false'}"]

        result = run_process(cmd, cwd=self._cwd, env=self._env, timeout=GH_TIMEOUT_SECONDS)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="host_failed",
                    message=f"gh api {method} failed: {endpoint}",
                    hint=result.error.stderr.strip() or None,
                )
            )
        return self._decode(result.value, endpoint=endpoint)

    def _decode(self, payload: str, *, endpoint: str) -> Result[object, ReleaseError]:
        try:
            obj: object = json.loads(payload)
        except json.JSONDecodeError as e:
            return Err(
                ReleaseError(
                    kind="host_failed",
                    message=f"gh api returned invalid JSON: {e}",
                    hint=endpoint,
                )
            )
        return Ok(obj)
