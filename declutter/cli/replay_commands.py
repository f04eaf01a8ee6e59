"""Offline scoring and transcript replay commands."""

from __future__ import annotations

import json
import math
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import typer
from rich.markup import escape
from rich.table import Table

from declutter.config.schema import DeclutterConfig
from declutter.core.models import ChatMessage, Decision, EvaluationContext
from declutter.engine.eviction import eviction_interval
from declutter.engine.filter import RepetitionFilter
from declutter.engine.similarity import similarity

from .core import app, console


@dataclass(frozen=True, slots=True, kw_only=True)
class ReplayEvent:
    """One line of a JSONL chat transcript."""

    t: float
    text: str
    author: str | None = None
    mod: bool = False
    broadcaster: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class ReplayRow:
    event: ReplayEvent
    decision: Decision


def _flag(raw: dict[str, Any], name: str, lineno: int) -> bool:
    value = raw.get(name, False)
    if not isinstance(value, bool):
        raise ValueError(f"line {lineno}: '{name}' must be true or false")
    return value


def parse_transcript(lines: list[str]) -> list[ReplayEvent]:
    """Parse JSONL lines; blank lines are skipped, bad lines raise ``ValueError``."""
    events: list[ReplayEvent] = []
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            raw: Any = json.loads(line)
        except json.JSONDecodeError as e:
            raise ValueError(f"line {lineno}: invalid JSON ({e.msg})") from e
        if not isinstance(raw, dict) or "t" not in raw:
            raise ValueError(f"line {lineno}: expected an object with a 't' field")
        try:
            t = float(raw["t"])
        except (TypeError, ValueError) as e:
            raise ValueError(f"line {lineno}: 't' must be a number") from e
        author = raw.get("author")
        events.append(
            ReplayEvent(
                t=t,
                text=raw.get("text") if isinstance(raw.get("text"), str) else "",
                author=str(author) if author is not None else None,
                mod=_flag(raw, "mod", lineno),
                broadcaster=_flag(raw, "broadcaster", lineno),
            )
        )
    return events


def replay(events: list[ReplayEvent], config: DeclutterConfig) -> list[ReplayRow]:
    """Feed ``events`` through a fresh filter on a synthetic clock.

    Eviction passes run at the same interval the live scheduler would use,
    so the outcome matches what a host would have seen.
    """
    engine = RepetitionFilter(config)
    interval = eviction_interval(config.cache_ttl_seconds)
    rows: list[ReplayRow] = []
    next_eviction: float | None = None

    for event in events:
        if next_eviction is None:
            next_eviction = event.t + interval
        if next_eviction <= event.t:
            # Expiry is monotonic, so only the last missed tick changes state.
            last_tick = next_eviction + interval * math.floor((event.t - next_eviction) / interval)
            engine.cache.evict(last_tick)
            next_eviction = last_tick + interval

        message = ChatMessage(
            text=event.text,
            author_id=event.author,
            is_moderator=event.mod,
            is_broadcaster=event.broadcaster,
        )
        decision = engine.evaluate(message, EvaluationContext(now=event.t))
        rows.append(ReplayRow(event=event, decision=decision))
    return rows


@app.command()
def score(
    first: str = typer.Argument(..., help="First message"),
    second: str = typer.Argument(..., help="Second message"),
) -> None:
    """Print the similarity of two messages (0..1)."""
    console.print(f"{similarity(first, second):.4f}")


@app.command("replay")
def replay_cmd(
    transcript: Path = typer.Argument(..., help="JSONL transcript: {t, author, text, mod, broadcaster}"),
    per_author: bool = typer.Option(False, "--per-author", help="Partition history by author"),
    annotate: bool = typer.Option(False, "--annotate", help="Badge repeats instead of hiding them"),
    ttl: float = typer.Option(None, "--ttl", help="Cache TTL in seconds"),
    similarity_threshold: float = typer.Option(None, "--similarity", help="Similarity threshold (0-100)"),
    repetitions: int = typer.Option(None, "--repetitions", help="Repetition threshold"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file to start from"),
    show_all: bool = typer.Option(False, "--all", "-a", help="List allowed messages too"),
) -> None:
    """Replay a chat transcript through the filter and report decisions."""
    from declutter.config.loader import load_config

    try:
        lines = transcript.read_text(encoding="utf-8").splitlines()
        events = parse_transcript(lines)
    except (OSError, ValueError) as e:
        console.print(f"[red]Cannot read {transcript}: {e}[/red]")
        raise typer.Exit(1)

    overrides: dict[str, Any] = {}
    if per_author:
        overrides["partition_by_author"] = True
    if annotate:
        overrides["annotate_instead_of_hide"] = True
    if ttl is not None:
        overrides["cache_ttl_seconds"] = ttl
    if similarity_threshold is not None:
        overrides["similarity_threshold"] = similarity_threshold
    if repetitions is not None:
        overrides["repetition_threshold"] = repetitions

    base = load_config(config_path).filter
    try:
        config = DeclutterConfig.model_validate({**base.model_dump(), **overrides})
    except ValueError as e:
        console.print(f"[red]Invalid settings: {e}[/red]")
        raise typer.Exit(1)

    rows = replay(events, config)

    table = Table(title=f"Replay of {transcript.name}")
    table.add_column("t", justify="right")
    table.add_column("Author", style="cyan")
    table.add_column("Text")
    table.add_column("Count", justify="right")
    table.add_column("Decision")

    totals: Counter[str] = Counter()
    for row in rows:
        totals[row.decision.kind] += 1
        if row.decision.kind == "allow" and not show_all:
            continue
        count = row.decision.count
        if row.decision.kind == "suppress":
            label = "[red]suppress[/red]"
        elif row.decision.kind == "annotate":
            label = "[yellow]annotate[/yellow]"
        else:
            label = f"[dim]allow ({row.decision.reason})[/dim]"
        table.add_row(
            f"{row.event.t:.1f}",
            escape(row.event.author or "-"),
            escape(row.event.text),
            "" if count is None else str(count),
            label,
        )

    console.print(table)
    console.print(
        f"{len(rows)} messages: {totals['allow']} allowed, "
        f"{totals['suppress']} suppressed, {totals['annotate']} annotated"
    )
