"""CLI entry point for fuzzy-motion. Uses Click for argument parsing."""

from __future__ import annotations

import asyncio
import functools
import json
import logging
import sys
from pathlib import Path

import click

from fuzzy_motion.config import ConfigError, MotionConfig, load_config
from fuzzy_motion.labels import find_targets
from fuzzy_motion.session import MotionSession
from fuzzy_motion.terminal import ProcessTerminal
from fuzzy_motion.types import Target
from fuzzy_motion.viewer import TerminalRenderer, Viewport, ViewportJumper

logger = logging.getLogger(__name__)


def _run(coro):
    """Run an async function synchronously."""
    return asyncio.run(coro)


def _read_lines(path: str) -> list[str]:
    return Path(path).read_text(encoding="utf-8", errors="replace").splitlines()


def _is_interactive() -> bool:
    return sys.stdin.isatty()


def _config_options(fn):
    """Options shared by every command that resolves a MotionConfig."""

    @click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False),
                  help="Settings file to use instead of the global one")
    @click.option("--labels", default=None, help="Label characters, e.g. 'asdfghjkl'")
    @click.option("--matcher", "matchers", multiple=True,
                  help="Matcher to enable (fuzzy, transliteration); repeatable, in priority order")
    @click.option("--auto-jump/--no-auto-jump", default=None,
                  help="Jump as soon as a single target remains")
    @click.option("--no-highlight", is_flag=True, default=False,
                  help="Do not highlight the matched part of each target")
    @functools.wraps(fn)
    def wrapper(*args, config_path, labels, matchers, auto_jump, no_highlight, **kwargs):
        overrides = {
            "labels": labels,
            "matchers": list(matchers) or None,
            "autoJump": auto_jump,
            "disableMatchHighlight": True if no_highlight else None,
        }
        try:
            config = load_config(settings_path=config_path, overrides=overrides)
        except ConfigError as e:
            raise click.ClickException(str(e)) from e
        return fn(*args, config=config, **kwargs)

    return wrapper


@click.group(invoke_without_command=True)
@click.option("--log-level", default="warning",
              type=click.Choice(["debug", "info", "warning", "error"]))
@click.option("--log-file", default=None, type=click.Path(dir_okay=False),
              help="Write log records to this file instead of stderr")
@click.pass_context
def main(ctx, log_level, log_file):
    """Jump to any word on screen by typing part of it, then its label."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        filename=log_file,
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ---------------------------------------------------------------------------
# Interactive jump
# ---------------------------------------------------------------------------


async def _jump_session(lines: list[str], top: int, config: MotionConfig) -> Target | None:
    terminal = ProcessTerminal()
    try:
        terminal.start()
        viewport = Viewport(lines, top=top, height=terminal.rows - 1)
        renderer = TerminalRenderer(
            terminal, viewport, disable_match_highlight=config.disable_match_highlight
        )
        words = viewport.get_words(config)
        logger.debug("Extracted %d words from lines %d-%d", len(words), top, viewport.bottom)
        session = MotionSession(words, config, renderer, ViewportJumper(viewport), terminal)
        target = await session.run()
    finally:
        terminal.stop()

    # Reported only now that the screen is restored; a failure is not a cancel.
    if session.error is not None:
        raise click.ClickException(f"Motion session failed: {session.error}")
    return target


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--top", default=1, show_default=True, type=click.IntRange(min=1),
              help="First line shown on screen")
@_config_options
def jump(file, top, config):
    """Show FILE, pick a target, and print FILE:LINE:COL of the jump."""
    if not _is_interactive():
        raise click.ClickException("jump needs an interactive terminal")

    target = _run(_jump_session(_read_lines(file), top, config))
    if target is None:
        sys.exit(1)

    pos = target.jump_position
    click.echo(f"{file}:{pos.line}:{pos.col}")


# ---------------------------------------------------------------------------
# Non-interactive lookup
# ---------------------------------------------------------------------------


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("query")
@click.option("--top", default=1, show_default=True, type=click.IntRange(min=1),
              help="First line to scan")
@click.option("--height", default=50, show_default=True, type=click.IntRange(min=1),
              help="Number of lines to scan")
@_config_options
def targets(file, query, top, height, config):
    """Print the labeled targets QUERY would produce, one JSON object per line."""
    viewport = Viewport(_read_lines(file), top=top, height=height)
    for target in find_targets(viewport.get_words(config), query, config):
        click.echo(json.dumps(target.to_dict(), ensure_ascii=False))
