"""CLI interface using Typer."""

import os
import traceback
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from mrchecker import __version__
from mrchecker.config import ConfigError, load_prompts
from mrchecker.output import get_formatter, report
from mrchecker.review import run_review

app = typer.Typer(
  name="mr-checker",
  help="Automatic merge-request checker bot",
  no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

EXIT_FATAL = 2


def _is_debug() -> bool:
  return os.environ.get("MRCHECKER_DEBUG", "").lower() in ("1", "true", "yes")


def version_callback(value: bool) -> None:
  if value:
    console.print(f"mr-checker {__version__}")
    raise typer.Exit()


@app.command()
def main(
  remote: str = typer.Argument(..., help="Git remote (e.g. origin)"),
  base: str = typer.Argument(..., help="Base branch to compare against"),
  branch: str = typer.Argument(..., help="Branch to review"),
  repo_dir: Path = typer.Option(Path("."), "--dir", "-d", help="Repository directory"),
  history_prompt: Optional[Path] = typer.Option(
    None, "--history-system-prompt", help="System prompt file for history rules"
  ),
  file_prompt: Optional[Path] = typer.Option(
    None, "--file-system-prompt", help="System prompt file for file rules"
  ),
  inline_prompt: Optional[Path] = typer.Option(
    None, "--inline-system-prompt", help="System prompt file for inline rules"
  ),
  provider: str = typer.Option(
    None, "--provider", "-p", help="LLM provider (openai, anthropic, ollama, gemini)"
  ),
  model: str = typer.Option(None, "--model", "-m", help="Model to use"),
  format_type: str = typer.Option(
    "terminal", "--format", help="Output format: terminal, json, markdown, github"
  ),
  config: Path = typer.Option(None, "--config", "-c", help="Config file path"),
  max_concurrency: int = typer.Option(
    None, "--max-concurrency", min=1, help="Limit concurrent model requests"
  ),
  verbose: bool = typer.Option(False, "--verbose", help="Log every rule evaluation"),
  debug: bool = typer.Option(False, "--debug", help="Show full traceback on errors"),
  version: bool = typer.Option(None, "--version", "-v", callback=version_callback, is_eager=True),
) -> None:
  """Review a branch against its base using repository rules.

  Exits 1 when a high severity issue is found and 2 on errors.
  """
  show_traceback = debug or _is_debug()

  try:
    get_formatter(format_type)
    prompts = load_prompts(history_prompt, file_prompt, inline_prompt)
    result = run_review(
      remote,
      base,
      branch,
      repo_dir=repo_dir,
      provider=provider,
      model=model,
      config_path=config,
      prompts=prompts,
      max_concurrency=max_concurrency,
      verbose=verbose,
    )
    status = report(result, format_type, console)

  except ConfigError as e:
    err_console.print(f"[red]Error:[/red] {escape(str(e))}")
    raise typer.Exit(EXIT_FATAL) from None
  except Exception as e:
    err_console.print(f"[red]Error:[/red] {escape(str(e))}")
    if show_traceback:
      err_console.print("\n[dim]Traceback:[/dim]")
      err_console.print(traceback.format_exc(), markup=False)
    raise typer.Exit(EXIT_FATAL) from None

  raise typer.Exit(status)


if __name__ == "__main__":
  app()
