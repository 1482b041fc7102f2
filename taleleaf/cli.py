"""TaleLeaf CLI - assemble spoiler-safe context windows and run the API.

Usage:
    taleleaf context -d book.json -b B --pages 1-50 "What happens on page 30?"
    taleleaf context -d book.json -b B --chapters 0,1 "Who is Ana?"
    taleleaf context ... --json         # Print the full response as JSON
    taleleaf validate -c config.yaml    # Check a config file
    taleleaf serve --port 8000          # Run the HTTP API

Configuration:
    --config points at a YAML/JSON config file; the packaged config.yaml is
    used when it is omitted (TALELEAF_CONFIG is honoured by serve).
    DATABASE_URL, GEMINI_API_KEY and TALELEAF_LOG_LEVEL override unset values.
"""

from __future__ import annotations

import asyncio
import json
import os

import click
import yaml

from taleleaf.config import DEFAULT_CONFIG_PATH, AppConfig, apply_env_overrides, load_config
from taleleaf.domain.window import ChapterWindow, PageWindow
from taleleaf.logging_setup import setup_logging
from taleleaf.retrieval.types import ContextWindowResponse

EXIT_NOT_READY = 2


def parse_pages(value: str) -> PageWindow:
    """Parse "12" or "1-50" into a page window."""
    try:
        if "-" in value:
            start, end = value.split("-", 1)
            return PageWindow(start=int(start), end=int(end))
        page = int(value)
    except ValueError as e:
        raise click.BadParameter(f"invalid page range: {value!r}") from e
    return PageWindow(start=page, end=page)


def parse_chapters(value: str) -> ChapterWindow:
    """Parse "0,1,2" into a chapter window."""
    try:
        indices = [int(v) for v in value.split(",") if v.strip()]
    except ValueError as e:
        raise click.BadParameter(f"invalid chapter list: {value!r}") from e
    return ChapterWindow(chapter_indices=indices)


def _load(config_path: str | None) -> AppConfig:
    try:
        return apply_env_overrides(load_config(config_path or DEFAULT_CONFIG_PATH))
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        click.echo(f"✗ Configuration error: {e}", err=True)
        raise click.Abort()


def response_to_dict(outcome: ContextWindowResponse) -> dict:
    return {
        "ready": outcome.ready,
        "result": outcome.result.to_dict() if outcome.result else None,
        "context_text": outcome.context_text,
        "resolved_window": (
            outcome.resolved_window.to_dict() if outcome.resolved_window else None
        ),
        "message": outcome.message,
        "reason": outcome.reason,
    }


@click.group()
@click.option("--log-level", default=None, help="Override configured log level")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None):
    """TaleLeaf - spoiler-safe context windows for reading questions."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level


@cli.command()
@click.option("--config", "-c", default=None, help="Configuration file path")
@click.option("--data", "-d", required=True, help="JSON export of book context data")
@click.option("--book-id", "-b", required=True, help="Book identifier")
@click.option("--pages", default=None, help='Page range, e.g. "1-50"')
@click.option("--chapters", default=None, help='Chapter indices, e.g. "0,1"')
@click.option("--max-tokens", type=int, default=None, help="Token budget for excerpts")
@click.option("--no-paragraphs", is_flag=True, help="Skip ranked raw paragraphs")
@click.option("--json", "as_json", is_flag=True, help="Print the full response as JSON")
@click.argument("question")
@click.pass_context
def context(
    ctx: click.Context,
    config: str | None,
    data: str,
    book_id: str,
    pages: str | None,
    chapters: str | None,
    max_tokens: int | None,
    no_paragraphs: bool,
    as_json: bool,
    question: str,
):
    """Assemble the context window for QUESTION."""
    from taleleaf.retrieval.assembler import ContextWindowAssembler
    from taleleaf.retrieval.service import ContextWindowRequest, ContextWindowService
    from taleleaf.storage.memory import InMemoryBookStore

    if (pages is None) == (chapters is None):
        raise click.UsageError("Pass exactly one of --pages or --chapters")
    window = parse_pages(pages) if pages is not None else parse_chapters(chapters)

    cfg = _load(config)
    setup_logging((ctx.obj or {}).get("log_level") or cfg.logging.level, cfg.logging.log_file)

    try:
        store = InMemoryBookStore.from_json_file(data)
    except (OSError, ValueError, KeyError) as e:
        click.echo(f"✗ Could not load book data: {e}", err=True)
        raise click.Abort()

    service = ContextWindowService(ContextWindowAssembler(store, cfg.context_window))
    outcome = asyncio.run(
        service.retrieve(
            ContextWindowRequest(
                book_id=book_id,
                window=window,
                question=question.strip(),
                max_context_tokens=max_tokens,
                include_raw_paragraphs=not no_paragraphs,
            )
        )
    )

    if as_json:
        click.echo(json.dumps(response_to_dict(outcome), indent=2, ensure_ascii=False))
    elif not outcome.ready:
        click.echo(f"Not ready: {outcome.reason}")
    elif outcome.result is None:
        click.echo(outcome.message)
    else:
        click.echo(outcome.result.system_prompt)
        click.echo(f"\n[estimated tokens: {outcome.result.estimated_tokens}]")

    if not outcome.ready:
        ctx.exit(EXIT_NOT_READY)


@cli.command()
@click.option("--config", "-c", default=None, help="Configuration file path")
def validate(config: str | None):
    """Validate configuration file."""
    cfg = _load(config)

    click.echo("✓ Configuration is valid")
    click.echo(f"  Storage backend: {cfg.storage.backend}")
    click.echo(f"  Context budget: {cfg.context_window.max_context_tokens} tokens")
    click.echo(f"  LLM: {cfg.llm.provider}/{cfg.llm.model}")


@cli.command()
@click.option("--config", "-c", default=None, help="Configuration file path")
@click.option("--host", default=None, help="Bind address")
@click.option("--port", type=int, default=None, help="Bind port")
def serve(config: str | None, host: str | None, port: int | None):
    """Run the HTTP API."""
    import uvicorn

    from taleleaf.api.app import create_app
    from taleleaf.api.dependencies import get_config

    cfg = _load(config)
    if config:
        os.environ["TALELEAF_CONFIG"] = config
        get_config.cache_clear()
    uvicorn.run(create_app(), host=host or cfg.api.host, port=port or cfg.api.port)


def main():
    """CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
