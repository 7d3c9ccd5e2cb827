"""Async git collaborator: commit log, numstat, unified diff and porcelain status."""

from __future__ import annotations

import asyncio
import logging
import re

from intern_daily.analysis.models import Commit, FileStat

logger = logging.getLogger(__name__)

NO_SUBJECT = "(no subject)"


class GitError(Exception):
    """Raised when a git command fails or the path is not a work tree."""


async def run_git(repo_path: str, args: list[str]) -> str:
    """Run `git <args>` in repo_path and return stdout; raise GitError on non-zero exit."""
    cmd = ["git", *args]
    logger.debug("Running: %s", " ".join(cmd))
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=repo_path,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except (FileNotFoundError, NotADirectoryError) as e:
        raise GitError(f"Cannot run git in {repo_path}: {e}") from e
    stdout_bytes, stderr_bytes = await proc.communicate()
    if proc.returncode != 0:
        message = stderr_bytes.decode("utf-8", errors="replace").strip()
        raise GitError(f"git {args[0]} failed ({proc.returncode}): {message}")
    return stdout_bytes.decode("utf-8", errors="replace")


async def ensure_repo(repo_path: str) -> None:
    try:
        out = await run_git(repo_path, ["rev-parse", "--is-inside-work-tree"])
    except GitError as e:
        raise GitError(f"{repo_path} is not a git repository") from e
    if out.strip() != "true":
        raise GitError(f"{repo_path} is not a git repository")


def _parse_log(stdout: str) -> list[Commit]:
    commits: list[Commit] = []
    for line in stdout.splitlines():
        line = line.strip()
        if not line:
            continue
        parts = line.split("\t", 2)
        sha = parts[0]
        date = parts[1] if len(parts) > 1 else ""
        subject = parts[2].strip() if len(parts) > 2 else ""
        commits.append(Commit(sha=sha, date=date, subject=subject or NO_SUBJECT))
    return commits


async def get_commits(repo_path: str, since: str, until: str, max_commits: int) -> list[Commit]:
    """Commits in [since, until], newest first; max_commits <= 0 means no limit."""
    args = [
        "log",
        f"--since={since}",
        f"--until={until}",
        "--pretty=%H%x09%ad%x09%s",
        "--date=iso-local",
    ]
    if max_commits > 0:
        args.append(f"--max-count={max_commits}")
    return _parse_log(await run_git(repo_path, args))


def _parse_count(column: str) -> int:
    # Binary files report "-".
    if column == "-":
        return 0
    try:
        return int(column)
    except ValueError:
        return 0


_BRACED_RENAME = re.compile(r"^(.*)\{(.*) => (.*)\}(.*)$")


def _rename_target(path: str) -> str:
    """
    Destination path of a numstat rename entry.

    `dir/{old => new}/f.ts` becomes `dir/new/f.ts` and `old.ts => new.ts`
    becomes `new.ts`. Paths without a rename arrow are returned unchanged.
    """
    match = _BRACED_RENAME.match(path)
    if match:
        prefix, _, new, suffix = match.groups()
        return re.sub(r"/{2,}", "/", f"{prefix}{new}{suffix}")
    if " => " in path:
        return path.split(" => ", 1)[1]
    return path


def _parse_numstat(stdout: str) -> list[FileStat]:
    stats: list[FileStat] = []
    for line in stdout.splitlines():
        line = line.strip()
        if not line:
            continue
        parts = line.split("\t")
        if len(parts) < 3:
            continue
        stats.append(
            FileStat(
                path=_rename_target(parts[-1]),
                adds=_parse_count(parts[0]),
                dels=_parse_count(parts[1]),
            )
        )
    return stats


async def get_commit_file_stats(repo_path: str, sha: str) -> list[FileStat]:
    stdout = await run_git(
        repo_path, ["diff-tree", "--no-commit-id", "--root", "--numstat", "-r", "-M", sha]
    )
    return _parse_numstat(stdout)


async def get_commit_diff(repo_path: str, sha: str) -> str:
    # Headers must read `diff --git a/... b/...` whatever diff.noprefix says.
    return await run_git(
        repo_path,
        ["show", "--unified=0", "--no-color", "-M", "--src-prefix=a/", "--dst-prefix=b/", sha],
    )


async def get_unstaged_count(repo_path: str) -> int:
    stdout = await run_git(repo_path, ["status", "--porcelain"])
    return sum(1 for line in stdout.splitlines() if line.strip())
