"""Output formatting for review results."""

import json
from abc import ABC, abstractmethod
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from mrchecker.models import REPORT_ORDER, Issue, ReviewResult, Severity


def group_by_severity(issues: Sequence[Issue]) -> dict[Severity, list[Issue]]:
  """Partition issues into severity buckets in report order, keeping input order."""
  groups: dict[Severity, list[Issue]] = {severity: [] for severity in REPORT_ORDER}
  for issue in issues:
    groups[issue.severity].append(issue)
  return groups


def summarize(issues: Sequence[Issue]) -> str:
  """Generate a one-line summary of the issues found."""
  if not issues:
    return "No issues found."

  groups = group_by_severity(issues)
  parts = [f"{len(bucket)} {severity.value}" for severity, bucket in groups.items() if bucket]

  summary = f"Found {len(issues)} issue{'s' if len(issues) != 1 else ''}"
  return f"{summary}: {', '.join(parts)}."


class OutputFormatter(ABC):
  """Base output formatter."""

  @abstractmethod
  def format(self, result: ReviewResult) -> str:
    """Format review result for output."""
    ...


class TerminalFormatter(OutputFormatter):
  """Rich terminal output formatter."""

  SEVERITY_STYLES = {
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "dim",
  }

  def __init__(self, console: Console | None = None):
    self.console = console or Console()

  def format(self, result: ReviewResult) -> str:
    self._print_summary(result)
    self._print_issues(result)
    self._print_statistics(result)
    return ""

  def _print_summary(self, result: ReviewResult) -> None:
    self.console.print()
    self.console.print(Panel(
      result.summary,
      title=f"[bold]Review Summary[/bold] ({result.provider}/{result.model})",
      border_style="blue",
    ))

  def _print_issues(self, result: ReviewResult) -> None:
    if not result.issues:
      self.console.print("\n[bold green]No issues found.[/bold green]")
      return

    for severity, bucket in group_by_severity(result.issues).items():
      if not bucket:
        continue
      style = self.SEVERITY_STYLES[severity]
      self.console.print(f"\n[bold {style}]{severity.value.upper()} severity issues:[/bold {style}]")
      for issue in bucket:
        line = f"• [{issue.rule_id}] {issue.location} - {issue.message}"
        self.console.print(f"[{style}]{escape(line)}[/{style}]")

  def _print_statistics(self, result: ReviewResult) -> None:
    groups = group_by_severity(result.issues)
    self.console.print("\n[bold blue]Review Statistics:[/bold blue]")
    self.console.print(f"[blue]Total issues: {len(result.issues)}[/blue]")
    self.console.print(f"[red]High severity: {len(groups[Severity.HIGH])}[/red]")
    self.console.print(f"[yellow]Medium severity: {len(groups[Severity.MEDIUM])}[/yellow]")
    self.console.print(f"[dim]Low severity: {len(groups[Severity.LOW])}[/dim]")


class JsonFormatter(OutputFormatter):
  """JSON output formatter."""

  def format(self, result: ReviewResult) -> str:
    ordered = [i for bucket in group_by_severity(result.issues).values() for i in bucket]
    data = {
      "summary": result.summary,
      "provider": result.provider,
      "model": result.model,
      "issues": [issue.to_dict() for issue in ordered],
    }
    return json.dumps(data, indent=2)


class MarkdownFormatter(OutputFormatter):
  """Markdown output formatter."""

  def format(self, result: ReviewResult) -> str:
    lines = [
      "# Merge Request Review",
      "",
      f"**Provider:** {result.provider}/{result.model}",
      "",
      "## Summary",
      "",
      result.summary,
      "",
    ]

    if not result.issues:
      lines.extend(["## Issues", "", "No issues found.", ""])
      return "\n".join(lines)

    for severity, bucket in group_by_severity(result.issues).items():
      if not bucket:
        continue
      lines.extend([f"## {severity.value.capitalize()} severity", ""])
      for issue in bucket:
        lines.append(f"- **[{issue.rule_id}]** `{issue.location}`: {issue.message}")
      lines.append("")

    return "\n".join(lines)


class GitHubFormatter(OutputFormatter):
  """GitHub Actions workflow command formatter for PR annotations."""

  def format(self, result: ReviewResult) -> str:
    lines = []
    for bucket in group_by_severity(result.issues).values():
      for issue in bucket:
        level = self._severity_to_level(issue.severity)
        location = ""
        if issue.file:
          location = f" file={issue.file}"
          if issue.line:
            location += f",line={issue.line}"
        message = f"[{issue.rule_id}] {issue.message}"
        message = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        lines.append(f"::{level}{location}::{message}")
    return "\n".join(lines)

  def _severity_to_level(self, severity: Severity) -> str:
    if severity == Severity.HIGH:
      return "error"
    if severity == Severity.MEDIUM:
      return "warning"
    return "notice"


def get_formatter(format_type: str) -> OutputFormatter:
  """Get formatter by type name."""
  formatters = {
    "terminal": TerminalFormatter,
    "json": JsonFormatter,
    "markdown": MarkdownFormatter,
    "github": GitHubFormatter,
  }
  formatter_class = formatters.get(format_type)
  if not formatter_class:
    raise ValueError(f"Unknown format: {format_type}")
  return formatter_class()


def report(
  result: ReviewResult,
  format_type: str = "terminal",
  console: Console | None = None,
) -> int:
  """Render a review result and return the process exit status."""
  console = console or Console()
  formatter = get_formatter(format_type)
  if isinstance(formatter, TerminalFormatter):
    formatter.console = console

  output = formatter.format(result)
  if output:
    console.print(output, markup=False, highlight=False, soft_wrap=True)
  return result.exit_status
