import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from declutter import __version__
from declutter.cli.commands import app
from declutter.cli.replay_commands import ReplayEvent, parse_transcript, replay
from declutter.config.schema import DeclutterConfig
from declutter.engine.cache import RepetitionCache

runner = CliRunner()


def _write_transcript(path: Path, events: list[dict[str, object]]) -> Path:
    path.write_text("\n".join(json.dumps(e) for e in events) + "\n", encoding="utf-8")
    return path


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_score_prints_similarity() -> None:
    result = runner.invoke(app, ["score", "night", "nacht"])
    assert result.exit_code == 0
    assert "0.2500" in result.output


def test_replay_reports_suppressed_messages(tmp_path: Path) -> None:
    transcript = _write_transcript(
        tmp_path / "chat.jsonl",
        [
            {"t": 0, "author": "a", "text": "hello"},
            {"t": 1, "author": "b", "text": "hello"},
            {"t": 2, "author": "c", "text": "hello"},
        ],
    )

    result = runner.invoke(
        app, ["replay", str(transcript), "--config", str(tmp_path / "none.json")]
    )

    assert result.exit_code == 0
    assert "3 messages: 2 allowed, 1 suppressed, 0 annotated" in result.output


def test_replay_rejects_malformed_transcript(tmp_path: Path) -> None:
    transcript = tmp_path / "bad.jsonl"
    transcript.write_text('{"t": 0, "text": "ok"}\nnot json\n', encoding="utf-8")

    result = runner.invoke(app, ["replay", str(transcript)])

    assert result.exit_code == 1


def test_replay_rejects_invalid_overrides(tmp_path: Path) -> None:
    transcript = _write_transcript(tmp_path / "chat.jsonl", [{"t": 0, "text": "hi"}])
    result = runner.invoke(
        app,
        ["replay", str(transcript), "--repetitions", "0", "--config", str(tmp_path / "none.json")],
    )
    assert result.exit_code == 1


def test_config_init_and_show(tmp_path: Path) -> None:
    path = tmp_path / "config.json"

    created = runner.invoke(app, ["config", "init", "--config", str(path)])
    shown = runner.invoke(app, ["config", "show", "--config", str(path)])

    assert created.exit_code == 0
    assert path.exists()
    assert shown.exit_code == 0
    assert "repetition_threshold" in shown.output
    assert "eviction_interval_seconds" in shown.output


def test_parse_transcript_skips_blank_lines_and_coerces_fields() -> None:
    events = parse_transcript(
        ['{"t": "1.5", "author": 7, "text": "hi", "mod": true}', "", '{"t": 2, "text": null}']
    )
    assert events == [
        ReplayEvent(t=1.5, text="hi", author="7", mod=True),
        ReplayEvent(t=2.0, text=""),
    ]


def test_parse_transcript_requires_timestamp() -> None:
    with pytest.raises(ValueError, match="line 1"):
        parse_transcript(['{"text": "no time"}'])


@pytest.mark.parametrize("field", ["mod", "broadcaster"])
def test_parse_transcript_rejects_non_boolean_flags(field: str) -> None:
    line = json.dumps({"t": 0, "text": "hi", field: "false"})
    with pytest.raises(ValueError, match=f"line 2: '{field}'"):
        parse_transcript(['{"t": 0, "text": "ok"}', line])


def test_replay_per_author_and_eviction() -> None:
    events = [
        ReplayEvent(t=0.0, author="alice", text="hey"),
        ReplayEvent(t=0.5, author="bob", text="hey"),
        ReplayEvent(t=1.0, author="alice", text="hey"),
        ReplayEvent(t=20.0, author="alice", text="hey"),
    ]

    rows = replay(events, DeclutterConfig(partition_by_author=True, cache_ttl_seconds=10))

    assert [row.decision.count for row in rows] == [0, 0, 2, 0]


def test_replay_skips_privileged_authors() -> None:
    events = [ReplayEvent(t=float(i), author="mod", text="rules", mod=True) for i in range(4)]
    rows = replay(events, DeclutterConfig())
    assert {row.decision.kind for row in rows} == {"allow"}
    assert {row.decision.reason for row in rows} == {"privileged_author"}


def test_replay_catches_up_on_long_gaps_with_one_eviction(monkeypatch: pytest.MonkeyPatch) -> None:
    ticks: list[float] = []
    original = RepetitionCache.evict

    def recording_evict(self: RepetitionCache, now: float):
        ticks.append(now)
        return original(self, now)

    monkeypatch.setattr(RepetitionCache, "evict", recording_evict)
    events = [
        ReplayEvent(t=0.0, text="hey"),
        ReplayEvent(t=3e6, text="hey"),
        ReplayEvent(t=3e6 + 1, text="hey"),
    ]

    rows = replay(events, DeclutterConfig())

    assert ticks == [3e6]
    assert [row.decision.count for row in rows] == [0, 0, 2]
