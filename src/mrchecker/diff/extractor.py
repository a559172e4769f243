"""Git commit and diff extraction."""

import asyncio
import re
from pathlib import Path

from mrchecker.models import CommitMeta, FileDiff, FileStatus

# Field separator for `git log` output; commit subjects may contain any printable text.
_LOG_SEPARATOR = "\x1f"

# Rename forms in --numstat output: "src/{old => new}/a.py" and "old.py => new.py"
_BRACE_RENAME = re.compile(r"\{[^{}]* => ([^{}]*)\}")


class GitError(Exception):
  """Git command failed."""


def _sanitize_error(stderr: str) -> str:
  """Remove potentially sensitive path information from error messages."""
  lines = stderr.strip().split("\n")
  sanitized = []
  for line in lines:
    if "fatal:" in line or "error:" in line:
      sanitized.append(line.split("/")[-1] if "/" in line else line)
    else:
      sanitized.append(line)
  return "\n".join(sanitized)


async def run_git(*args: str, cwd: Path | None = None) -> str:
  """Run a git command and return stdout."""
  try:
    process = await asyncio.create_subprocess_exec(
      "git",
      *args,
      cwd=cwd,
      stdin=asyncio.subprocess.DEVNULL,
      stdout=asyncio.subprocess.PIPE,
      stderr=asyncio.subprocess.PIPE,
    )
  except FileNotFoundError as e:
    raise GitError("git executable not found") from e

  stdout, stderr = await process.communicate()
  if process.returncode != 0:
    sanitized = _sanitize_error(stderr.decode("utf-8", errors="replace"))
    raise GitError(f"git {' '.join(args)} failed: {sanitized}")
  return stdout.decode("utf-8", errors="replace")


async def fetch_remote(cwd: Path, remote: str) -> None:
  """Fetch the latest refs from a remote."""
  await run_git("fetch", remote, cwd=cwd)


async def list_commits(cwd: Path, remote: str, base: str, branch: str) -> list[CommitMeta]:
  """List commits on branch that are not on the remote base, oldest first."""
  output = await run_git(
    "log",
    "--reverse",
    f"--pretty=format:%H{_LOG_SEPARATOR}%at{_LOG_SEPARATOR}%s",
    f"{remote}/{base}..{branch}",
    cwd=cwd,
  )
  return parse_log_output(output)


async def list_changed_files(cwd: Path, remote: str, base: str, branch: str) -> list[FileDiff]:
  """List files changed on branch since it diverged from the remote base."""
  revision = f"{remote}/{base}...{branch}"
  name_status = await run_git("diff", "--name-status", revision, cwd=cwd)
  numstat = await run_git("diff", "--numstat", revision, cwd=cwd)
  return parse_changed_files(name_status, numstat)


async def get_file_diff(cwd: Path, remote: str, base: str, branch: str, path: str) -> str:
  """Get the unified diff of a single file."""
  return await run_git("diff", f"{remote}/{base}...{branch}", "--", path, cwd=cwd)


def parse_log_output(output: str) -> list[CommitMeta]:
  """Parse `git log` output produced with the separator format."""
  commits: list[CommitMeta] = []
  for line in output.splitlines():
    if not line.strip():
      continue
    commit_hash, timestamp, message = line.split(_LOG_SEPARATOR, 2)
    commits.append(CommitMeta(
      hash=commit_hash,
      timestamp=int(timestamp) * 1000,
      message=message,
    ))
  return commits


def parse_changed_files(name_status: str, numstat: str) -> list[FileDiff]:
  """Merge `--name-status` and `--numstat` output into FileDiff records."""
  counts = _parse_numstat(numstat)
  files: list[FileDiff] = []

  for line in name_status.splitlines():
    if not line.strip():
      continue
    parts = line.split("\t")
    # Renames and copies list "R100<TAB>old<TAB>new"; the new path is reviewed.
    status = _parse_status(parts[0])
    path = parts[-1]
    additions, deletions = counts.get(path, (0, 0))
    files.append(FileDiff(
      file_path=path,
      status=status,
      additions=additions,
      deletions=deletions,
    ))

  return files


def _parse_status(code: str) -> FileStatus:
  """Map a git status code to FileStatus; unknown codes count as modified."""
  try:
    return FileStatus(code[:1])
  except ValueError:
    return FileStatus.MODIFIED


def _parse_numstat(numstat: str) -> dict[str, tuple[int, int]]:
  counts: dict[str, tuple[int, int]] = {}
  for line in numstat.splitlines():
    parts = line.split("\t", 2)
    if len(parts) != 3:
      continue
    added, deleted, raw_path = parts
    counts[_numstat_path(raw_path)] = (_count(added), _count(deleted))
  return counts


def _numstat_path(raw_path: str) -> str:
  if "{" in raw_path and " => " in raw_path:
    return _BRACE_RENAME.sub(r"\1", raw_path).replace("//", "/")
  if " => " in raw_path:
    return raw_path.split(" => ", 1)[1]
  return raw_path


def _count(value: str) -> int:
  # Binary files report "-"
  return int(value) if value.isdigit() else 0
