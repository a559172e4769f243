"""Core review orchestration."""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.markup import escape

from mrchecker.config import Settings, load_config
from mrchecker.diff import fetch_remote, get_file_diff, list_changed_files, list_commits
from mrchecker.models import (
  CommitMeta,
  FileDiff,
  Issue,
  ReviewResult,
  RuleScope,
  SystemPrompts,
)
from mrchecker.output import summarize, write_snapshot
from mrchecker.providers import ModelBackend
from mrchecker.rules import (
  Evaluator,
  Rule,
  content_applies,
  load_ignore_patterns,
  load_rules,
  matches_glob,
  rule_applies,
)

_console = Console(stderr=True)


def format_history(commits: Sequence[CommitMeta]) -> str:
  """Render commits as three-line blocks in the order given."""
  return "\n".join(
    f"commit {c.hash}\ndate {_iso_timestamp(c.timestamp)}\n{c.message}"
    for c in commits
  )


def _iso_timestamp(millis: int) -> str:
  moment = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
  return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _first_error(group: BaseExceptionGroup) -> BaseException:
  error: BaseException = group
  while isinstance(error, BaseExceptionGroup):
    error = error.exceptions[0]
  return error


class ReviewEngine:
  """Runs every rule over the commit history, the changed files and their lines.

  Scopes are reviewed one after another. Within a scope evaluations run
  concurrently, except that the lines of one file are judged in order.
  The first failure aborts the run and no snapshot is written.
  """

  def __init__(
    self,
    repo_dir: Path,
    remote: str,
    base: str,
    branch: str,
    backend: ModelBackend,
    settings: Settings | None = None,
    prompts: SystemPrompts | None = None,
    console: Console | None = None,
  ):
    self.repo_dir = repo_dir
    self.remote = remote
    self.base = base
    self.branch = branch
    self.backend = backend
    self.settings = settings or Settings()
    self.prompts = prompts or SystemPrompts()
    self.console = console or _console
    self.evaluator = Evaluator(backend, max_concurrency=self.settings.max_concurrency)

  async def run(self) -> ReviewResult:
    """Review the branch and persist the issues found."""
    self._log(f"Reviewing {self.branch} against {self.remote}/{self.base} in {self.repo_dir}")

    rules = load_rules(self.repo_dir, self.settings.rules_dir)
    ignored = load_ignore_patterns(self.repo_dir, self.settings.ignore_file)
    self._detail(f"Loaded {len(rules)} rules and {len(ignored)} ignore patterns")

    self._log("Fetching remote repository...")
    await fetch_remote(self.repo_dir, self.remote)
    commits = await list_commits(self.repo_dir, self.remote, self.base, self.branch)
    files = await list_changed_files(self.repo_dir, self.remote, self.base, self.branch)
    self._detail(f"Found {len(commits)} commits and {len(files)} changed files")

    issues: list[Issue] = []
    try:
      await self._review_history(rules, commits, issues)
      await self._review_files(rules, files, ignored, issues)
    except ExceptionGroup as group:
      raise _first_error(group) from None

    out = self.repo_dir / self.settings.result_file
    write_snapshot(out, issues)
    self._detail(f"Results saved to: {out}")

    return ReviewResult(
      issues=issues,
      summary=summarize(issues),
      provider=self.evaluator.provider,
      model=self.backend.model,
    )

  async def _review_history(
    self,
    rules: Sequence[Rule],
    commits: Sequence[CommitMeta],
    issues: list[Issue],
  ) -> None:
    history_rules = [r for r in rules if r.scope == RuleScope.HISTORY]
    if not history_rules:
      return

    self._log("Reviewing commit history...")
    content = format_history(commits)
    async with asyncio.TaskGroup() as tg:
      for rule in history_rules:
        tg.create_task(self._evaluate(issues, rule, content, self.prompts.history))

  async def _review_files(
    self,
    rules: Sequence[Rule],
    files: Sequence[FileDiff],
    ignored: Sequence[str],
    issues: list[Issue],
  ) -> None:
    file_rules = [r for r in rules if r.scope == RuleScope.FILE]
    inline_rules = [r for r in rules if r.scope == RuleScope.INLINE]
    if not file_rules and not inline_rules:
      return

    self._log("Reviewing changed files...")
    async with asyncio.TaskGroup() as tg:
      for file in files:
        if matches_glob(file.file_path, ignored):
          self._debug(f"Skipping ignored file: {file.file_path}")
          continue
        if file.is_deleted:
          self._debug(f"Skipping deleted file: {file.file_path}")
          continue
        tg.create_task(self._review_file(file, file_rules, inline_rules, issues))

  async def _review_file(
    self,
    file: FileDiff,
    file_rules: Sequence[Rule],
    inline_rules: Sequence[Rule],
    issues: list[Issue],
  ) -> None:
    path = file.file_path
    diff = await get_file_diff(self.repo_dir, self.remote, self.base, self.branch, path)

    async with asyncio.TaskGroup() as tg:
      for rule in file_rules:
        if not rule_applies(rule, path, diff):
          self._debug(f"Rule {rule.id} not applicable to {path}")
          continue
        tg.create_task(self._evaluate(issues, rule, diff, self.prompts.file, path))

      candidates = [r for r in inline_rules if rule_applies(r, path)]
      if candidates:
        tg.create_task(self._review_lines(path, diff, candidates, issues))

  async def _review_lines(
    self,
    path: str,
    diff: str,
    rules: Sequence[Rule],
    issues: list[Issue],
  ) -> None:
    """Judge each diff line in order; the path filters were already checked."""
    for number, text in enumerate(diff.splitlines(), start=1):
      for rule in rules:
        if content_applies(text, rule.match_include, rule.match_exclude):
          await self._evaluate(issues, rule, text, self.prompts.inline, path, number)

  async def _evaluate(
    self,
    issues: list[Issue],
    rule: Rule,
    content: str,
    system_prompt: str,
    file: str | None = None,
    line: int | None = None,
  ) -> None:
    location = file if line is None else f"{file}:{line}"
    self._debug(f"Evaluating rule {rule.id} on {location or 'commit history'}")

    issue = await self.evaluator.evaluate(rule, content, system_prompt, file, line)
    if issue is not None:
      self._debug(f"Found {issue.severity.value} severity violation for rule {rule.id}")
      issues.append(issue)

  def _log(self, message: str) -> None:
    self.console.print(f"[cyan]{escape(message)}[/cyan]")

  def _detail(self, message: str) -> None:
    self.console.print(f"[dim]{escape(message)}[/dim]")

  def _debug(self, message: str) -> None:
    if self.settings.verbose:
      self.console.print(f"[dim]{escape(message)}[/dim]")


def run_review(
  remote: str,
  base: str,
  branch: str,
  repo_dir: Path | None = None,
  provider: str | None = None,
  model: str | None = None,
  config_path: Path | None = None,
  prompts: SystemPrompts | None = None,
  max_concurrency: int | None = None,
  verbose: bool = False,
) -> ReviewResult:
  """Run a merge-request review with the given options."""
  repo = (repo_dir or Path.cwd()).resolve()
  settings = load_config(config_path, repo).model_copy(deep=True)

  if provider:
    settings.provider = provider
  if model:
    settings.model = model
  if max_concurrency:
    settings.max_concurrency = max_concurrency
  if verbose:
    settings.verbose = True

  backend = ModelBackend.from_settings(settings)
  engine = ReviewEngine(repo, remote, base, branch, backend, settings, prompts)
  return asyncio.run(engine.run())
