"""
Unit tests for the JSONL telemetry logger.
"""

import pytest

from engine.battle.types import Phase, Team
from telemetry.logger import TelemetryLogger, read_events, telemetry


@pytest.fixture
def live_telemetry(tmp_path):
    """Point the global logger at a temp file for one test."""
    path = tmp_path / "telemetry.jsonl"
    telemetry.init(path)
    yield path
    telemetry.path = None
    telemetry.counts.clear()


class TestTelemetryLogger:
    """Tests for TelemetryLogger."""

    def test_disabled_without_path(self):
        logger = TelemetryLogger()
        logger.log("attack", damage=3)
        assert logger.summary() == {}

    def test_rows_are_json_lines(self, tmp_path):
        path = tmp_path / "out" / "t.jsonl"
        logger = TelemetryLogger()
        logger.init(path)
        logger.begin_battle(wave="skirmish")
        logger.log("attack", damage=3, cell=(1, 2))

        rows = list(read_events(path))
        assert [r["event"] for r in rows] == ["telemetry_init", "battle_start", "attack"]
        assert rows[-1]["battle"] == 1
        assert rows[-1]["cell"] == [1, 2]
        assert logger.summary() == {"battle_start": 1, "attack": 1}

    def test_read_events_filters_and_skips_garbage(self, tmp_path):
        path = tmp_path / "t.jsonl"
        path.write_text('{"event": "a"}\nnot json\n\n{"event": "b"}\n', encoding="utf-8")
        assert [r["event"] for r in read_events(path)] == ["a", "b"]
        assert [r["event"] for r in read_events(path, "b")] == ["b"]

    def test_tick_sampling(self):
        logger = TelemetryLogger(sample_every_n_ticks=3)
        sampled = []
        for _ in range(9):
            logger.tick()
            sampled.append(logger.should_log_tick())
        assert sampled.count(True) == 3

    def test_write_failure_does_not_raise(self, tmp_path):
        """A path that cannot be opened for append is ignored, not raised."""
        logger = TelemetryLogger(path=tmp_path)
        logger.log("attack", damage=3)
        assert logger.summary() == {"attack": 1}
        assert logger.tick() == 1

    def test_sampling_off(self):
        logger = TelemetryLogger(sample_every_n_ticks=0)
        logger.tick()
        assert logger.should_log_tick() is False


class TestBattleEvents:
    """The battle core reports to the global logger."""

    def test_attack_and_defeat_logged(self, live_telemetry, spawn, make_controller):
        hero = spawn(Team.PLAYER, (4, 4), damage=5)
        foe = spawn(Team.COMPUTER, (4, 5), health=5)
        controller = make_controller()
        controller.state.phase = Phase.SELECT_ATTACKER
        controller.select_attacker(hero)
        controller.select_target(foe)
        controller.tick(1.0)

        events = [r["event"] for r in read_events(live_telemetry)]
        assert "attack" in events
        assert "unit_defeated" in events
        assert events.index("battle_end") > events.index("unit_defeated")
        end = list(read_events(live_telemetry, "battle_end"))[0]
        assert end["status"] == "victory"
