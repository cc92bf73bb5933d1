"""Tests for the trial session orchestrator.

Covers:
- shuffle_order: permutation and reproducibility
- TrialSession: start, retry, lock-in, final screen, reset
- Attempt isolation: stale callbacks and discarded timers
- Roster variants (maze included, invalid rosters)
- Report feeding and snapshots
"""

from __future__ import annotations

import numpy as np
import pytest

from games.maze import shortest_path
from games.reaction import ReactionStatus
from src.orchestrator import RUN_ROSTER, Screen, TrialSession, shuffle_order
from src.trials import GameId, Outcome
from src.trials.constants import FINAL_MESSAGE_LOCKED, FINAL_MESSAGE_UNLOCKED


# ── Helpers ──────────────────────────────────────────────────────────


def _resolve(session: TrialSession, outcome: Outcome, details: str = "forced") -> None:
    """Force the running attempt to an outcome."""
    game = session.current_game
    if outcome is Outcome.WIN:
        game._win(details)
    else:
        game._lose(details)


def _play_run(session: TrialSession, outcomes: list[Outcome]) -> None:
    """Start a run and lock in ``outcomes`` in play order."""
    session.start_run()
    for outcome in outcomes:
        _resolve(session, outcome)
        assert session.lock_in_pending()


@pytest.fixture
def session(clock) -> TrialSession:
    return TrialSession(clock, seed=7)


# ── shuffle_order ────────────────────────────────────────────────────


class TestShuffleOrder:
    """Tests for shuffle_order()."""

    def test_is_permutation(self, rng):
        """The shuffled order holds every roster game exactly once."""
        order = shuffle_order(RUN_ROSTER, rng)
        assert sorted(order) == sorted(RUN_ROSTER)
        assert len(order) == len(RUN_ROSTER)

    def test_reproducible(self):
        """Equal seeds give equal orders."""
        first = shuffle_order(RUN_ROSTER, np.random.default_rng(3))
        second = shuffle_order(RUN_ROSTER, np.random.default_rng(3))
        assert first == second

    def test_covers_many_orders(self):
        """Different draws produce different orders."""
        rng = np.random.default_rng(0)
        orders = {tuple(shuffle_order(RUN_ROSTER, rng)) for _ in range(200)}
        assert len(orders) > 50


# ── TrialSession ─────────────────────────────────────────────────────


class TestTrialSessionStart:
    """Tests for start_run()."""

    def test_initial_state(self, session):
        """A new session sits on the home screen with no results."""
        assert session.screen is Screen.HOME
        assert session.current_game is None
        assert session.current_game_id is None
        assert all(value is None for value in session.results.values())
        assert session.round_label == "0/5"

    def test_start_run(self, session):
        """start_run shuffles the roster and starts the first game."""
        session.start_run()

        assert session.screen is Screen.GAME
        assert sorted(session.order) == sorted(RUN_ROSTER)
        assert session.current_index == 0
        assert session.current_game_id is session.order[0]
        assert session.current_game.started
        assert session.current_game.game_id is session.order[0]
        assert session.round_label == "1/5"

    def test_seeded_sessions_share_order(self, clock):
        """Sessions with equal seeds play the same order."""
        first = TrialSession(clock, seed=11)
        second = TrialSession(clock, seed=11)
        first.start_run()
        second.start_run()
        assert first.order == second.order

    def test_current_definition(self, session):
        """The current definition carries display copy for the game."""
        session.start_run()
        definition = session.current_definition
        assert definition.id is session.current_game_id
        assert definition.name
        assert definition.tagline


class TestTrialSessionResults:
    """Tests for outcomes, retry and lock-in."""

    def test_outcome_goes_to_result_screen(self, session):
        """An outcome becomes the pending result."""
        session.start_run()
        gid = session.current_game_id
        _resolve(session, Outcome.LOSS, "nope")

        assert session.screen is Screen.RESULT
        assert session.pending.game_id is gid
        assert session.pending.outcome is Outcome.LOSS
        assert session.pending.details == "nope"
        assert session.results[gid] is None

    def test_retry_replays_same_game(self, session):
        """Retry discards the pending result and starts a fresh attempt."""
        session.start_run()
        gid = session.current_game_id
        first = session.current_game
        _resolve(session, Outcome.LOSS)

        assert session.retry_current()
        assert session.screen is Screen.GAME
        assert session.pending is None
        assert session.current_game_id is gid
        assert session.current_game is not first
        assert session.current_game.started
        assert session.results[gid] is None
        assert session.current_index == 0

    def test_retry_while_playing(self, session):
        """Retry also works mid-attempt, discarding the running one."""
        session.start_run()
        first = session.current_game
        assert session.retry_current()
        assert first.cancelled
        assert session.current_game is not first

    def test_lock_in_advances(self, session):
        """Lock-in commits the outcome and starts the next game."""
        session.start_run()
        gid = session.current_game_id
        _resolve(session, Outcome.WIN)

        assert session.lock_in_pending()
        assert session.results[gid] is Outcome.WIN
        assert session.wins == 1
        assert session.losses == 0
        assert session.current_index == 1
        assert session.screen is Screen.GAME
        assert session.current_game_id is session.order[1]

    def test_lock_in_without_pending(self, session):
        """Lock-in does nothing while a game is still running."""
        session.start_run()
        assert not session.lock_in_pending()
        assert session.current_index == 0

    def test_retry_outside_run(self, session):
        """Retry on the home screen does nothing."""
        assert not session.retry_current()
        assert session.screen is Screen.HOME

    def test_committed_count_matches_progress(self, session):
        """wins + losses always equals the number of locked-in games."""
        session.start_run()
        for i, outcome in enumerate([Outcome.WIN, Outcome.LOSS, Outcome.WIN]):
            _resolve(session, outcome)
            session.lock_in_pending()
            assert session.wins + session.losses == i + 1


class TestTrialSessionFinal:
    """Tests for the final screen."""

    def test_three_wins_unlock(self, session):
        """Three wins out of five pass the run."""
        _play_run(session, [Outcome.WIN, Outcome.LOSS, Outcome.WIN, Outcome.LOSS, Outcome.WIN])

        assert session.screen is Screen.FINAL
        assert session.wins == 3
        assert session.losses == 2
        assert session.passed
        assert session.final_message == FINAL_MESSAGE_UNLOCKED
        assert session.current_game is None

    def test_two_wins_locked(self, session):
        """Two wins are not enough."""
        _play_run(session, [Outcome.LOSS, Outcome.WIN, Outcome.LOSS, Outcome.LOSS, Outcome.WIN])

        assert session.screen is Screen.FINAL
        assert not session.passed
        assert session.final_message == FINAL_MESSAGE_LOCKED

    def test_final_message_only_on_final(self, session):
        """No final message mid-run."""
        session.start_run()
        assert session.final_message is None

    def test_inputs_ignored_on_final(self, session):
        """Retry and lock-in are no-ops after the run ends."""
        _play_run(session, [Outcome.WIN] * 5)
        assert not session.retry_current()
        assert not session.lock_in_pending()
        assert session.screen is Screen.FINAL

    def test_restart_after_final(self, session):
        """A new run starts from scratch."""
        _play_run(session, [Outcome.WIN] * 5)
        session.start_run()

        assert session.screen is Screen.GAME
        assert session.wins == 0
        assert session.current_index == 0

    def test_reset_to_home(self, session, clock):
        """Reset abandons the run and cancels the running attempt."""
        session.start_run()
        game = session.current_game
        session.reset_to_home()

        assert session.screen is Screen.HOME
        assert session.order == []
        assert game.cancelled
        assert clock.pending == 0
        assert session.report is None


class TestAttemptIsolation:
    """Discarded attempts can never affect the session."""

    def test_late_callback_from_discarded_attempt_ignored(self, session):
        """A continuation from a superseded attempt is dropped."""
        session.start_run()
        old = session.current_game
        session.retry_current()
        old._on_win("late")

        assert session.screen is Screen.GAME
        assert session.pending is None

    def test_discarded_timers_never_fire(self, clock):
        """Retrying a reaction attempt cancels its pending go-timer."""
        session = TrialSession(clock, seed=1, roster=(GameId.REACTION,))
        session.start_run()
        old = session.current_game
        session.retry_current()
        clock.advance(5000)

        assert old.status is ReactionStatus.WAITING
        assert session.current_game.status is ReactionStatus.READY

    def test_countdown_of_discarded_attempt_stops(self, clock):
        """An aim countdown stops when its attempt is retried."""
        session = TrialSession(clock, seed=1, roster=(GameId.AIM,))
        session.start_run()
        old = session.current_game
        clock.advance(3000)
        session.retry_current()
        clock.advance(5000)

        assert old.time_left == 4
        assert session.current_game.time_left == 2
        assert session.screen is Screen.GAME

    def test_retry_redraws_reaction_delay(self, clock):
        """A retried reaction attempt draws a fresh go delay."""
        session = TrialSession(clock, seed=1, roster=(GameId.REACTION,))
        session.start_run()
        first_delay = session.current_game.delay_ms
        session.current_game.click()
        assert session.retry_current()

        assert session.current_game.delay_ms is not None
        assert session.current_game.delay_ms != first_delay

    def test_retry_resets_maze_progress(self, clock):
        """A retried maze starts over at the entrance with no moves."""
        session = TrialSession(clock, seed=1, roster=(GameId.MAZE,))
        session.start_run()
        old = session.current_game
        path = shortest_path(old.grid, old.player, old.exit)
        for (r0, c0), (r1, c1) in zip(path[:3], path[1:4]):
            old.move(r1 - r0, c1 - c0)
        assert old.moves == 3
        clock.advance(2000)
        assert session.retry_current()

        fresh = session.current_game
        assert fresh is not old
        assert fresh.moves == 0
        assert fresh.player == (1, 1)
        assert fresh.time_left == fresh.time_limit

    def test_outcome_after_timers_in_real_play(self, clock):
        """A real timeout resolves the attempt through the session."""
        session = TrialSession(clock, seed=1, roster=(GameId.AIM,))
        session.start_run()
        clock.advance(7000)

        assert session.screen is Screen.RESULT
        assert session.pending.outcome is Outcome.LOSS
        assert session.pending.details == "Hits: 0."


class TestRoster:
    """Tests for roster variants."""

    def test_maze_can_join(self, clock):
        """Adding the maze yields a six-game run."""
        session = TrialSession(clock, seed=5, roster=RUN_ROSTER + (GameId.MAZE,))
        _play_run(session, [Outcome.WIN] * 6)

        assert GameId.MAZE in session.order
        assert len(session.order) == 6
        assert session.screen is Screen.FINAL

    def test_default_roster_excludes_maze(self):
        """The default run has five games and no maze."""
        assert len(RUN_ROSTER) == 5
        assert GameId.MAZE not in RUN_ROSTER

    def test_empty_roster_raises(self, clock):
        """An empty roster is rejected."""
        with pytest.raises(ValueError, match="at least one"):
            TrialSession(clock, roster=())

    def test_duplicate_roster_raises(self, clock):
        """A roster that repeats a game is rejected."""
        with pytest.raises(ValueError, match="repeat"):
            TrialSession(clock, roster=(GameId.AIM, GameId.AIM))

    def test_duplicate_mixed_roster_raises(self, clock):
        """A repeat given once as a string and once as an id is rejected."""
        with pytest.raises(ValueError, match="repeat"):
            TrialSession(clock, roster=("reaction", GameId.REACTION))

    def test_roster_accepts_strings(self, clock):
        """Roster entries may be plain game id strings."""
        session = TrialSession(clock, roster=("reaction", "aim"))
        assert session.roster == (GameId.REACTION, GameId.AIM)


class TestSessionReport:
    """Tests for the report fed by the session."""

    def test_attempts_recorded(self, session):
        """Every finished attempt is recorded; lock-ins are flagged."""
        session.start_run()
        gid = session.current_game_id.value
        _resolve(session, Outcome.LOSS)
        session.retry_current()
        _resolve(session, Outcome.WIN)
        session.lock_in_pending()

        attempts = session.report.report.attempts
        assert [(a.game_id, a.attempt, a.outcome, a.locked_in) for a in attempts] == [
            (gid, 1, "loss", False),
            (gid, 2, "win", True),
        ]
        assert session.report.report.results[gid] == "win"

    def test_summary_after_run(self, session):
        """The summary counts wins, losses and retries."""
        session.start_run()
        _resolve(session, Outcome.LOSS)
        session.retry_current()
        for outcome in [Outcome.WIN, Outcome.WIN, Outcome.LOSS, Outcome.WIN, Outcome.LOSS]:
            _resolve(session, outcome)
            session.lock_in_pending()

        summary = session.report.compute_summary()
        assert summary["wins"] == 3
        assert summary["losses"] == 2
        assert summary["total_attempts"] == 6
        assert summary["retries"] == 1
        assert summary["passed"] is True
        assert session.report.report.seed == 7

    def test_snapshot(self, session):
        """The snapshot carries screen, round and game state."""
        session.start_run()
        state = session.snapshot()

        assert state["screen"] == "game"
        assert state["round"] == "1/5"
        assert state["current_game"]["id"] == session.current_game_id.value
        assert state["game_state"]["game_id"] == session.current_game_id.value
        assert state["pending"] is None
        assert state["final_message"] is None
