"""Test suite for the session harness and the command-line runner."""

import textwrap

import pytest

from fragword.engine import Level, Move, new_session
from fragword.main import load_script, main


LEVEL = {
    "id": "001",
    "name": "Cats",
    "rows": 3,
    "cols": 3,
    "par": 3,
    "goal": {"r": 1, "c": 2},
    "seeds": [{"text": "CA", "r": 1, "c": 0}],
    "deck": ["T", "S", "Q", "O", "E"],
    "allowedWords": ["ca", "cat", "cats"],
}

SCRIPT = textwrap.dedent("""
    level:
      id: "001"
      name: Cats
      rows: 3
      cols: 3
      par: 3
      goal: {r: 1, c: 2}
      seeds:
        - {text: CA, r: 1, c: 0}
      deck: [T, S, Q, O, E]
      allowedWords: [ca, cat, cats]
    moves:
      - {action: place, tile: t, r: 1, c: 1}
      - {action: submit}
      - {action: place, tile: Q, r: 1, c: 2}
      - {action: submit}
      - {action: return, r: 1, c: 2}
      - {action: place, tile: S, r: 1, c: 2}
      - {action: submit}
""")


class TestSession:
    """Test cases for the session harness."""

    def setup_method(self):
        self.session = new_session(Level(**LEVEL))

    def test_new_session(self):
        """A new session is started and dealt."""
        assert self.session.turn == 1
        assert self.session.used_turns == 0
        assert self.session.hand == ["T", "S", "Q", "O"]
        assert self.session.reserve == []
        assert self.session.won is False
        assert self.session.grid_snapshot()[1] == ["CA", None, None]

    def test_operations_and_win(self):
        """Direct calls drive the rules and the win flag."""
        assert self.session.stage_place("D0", 1, 1).ok
        assert self.session.commit().ok
        assert self.session.stage_place("D1", 1, 2).ok
        result = self.session.commit()
        assert result.win is True
        assert self.session.won is True
        assert self.session.used_turns == 2

    def test_apply_resolves_text(self):
        """Moves may name tiles by fragment text, case-insensitively."""
        result = self.session.apply(Move(action="place", tile="t", r=1, c=1))
        assert result.ok
        assert self.session.state.placements[0].tile.id == "D0"
        assert self.session.history[0].turn == 1

    def test_apply_unknown_tile(self):
        """Unresolvable tile references are reported."""
        result = self.session.apply(Move(action="place", tile="zz", r=1, c=1))
        assert result.code == "UNKNOWN_TILE"

    def test_apply_missing_cell(self):
        """Placements need a cell."""
        result = self.session.apply(Move(action="place", tile="T"))
        assert result.code == "BAD_MOVE"

    def test_apply_recall_and_cancel(self):
        """Recall moves resolve committed and recalled tiles."""
        self.session.apply(Move(action="place", tile="T", r=1, c=1))
        self.session.apply(Move(action="submit"))
        assert self.session.apply(Move(action="recall", tile="T")).ok
        assert self.session.apply(Move(action="cancel_recall", tile="T")).ok
        assert self.session.grid_snapshot()[1] == ["CA", "T", None]

    def test_seed_reference_reaches_rules(self):
        """Seed ids are passed through so the rules can refuse them."""
        result = self.session.apply(Move(action="recall", tile="__SEED__0"))
        assert result.code == "SEED_FIXED"

    def test_rollback(self):
        """Reset always succeeds."""
        assert self.session.rollback().ok
        self.session.stage_place("D0", 1, 1)
        assert self.session.apply(Move(action="reset")).ok
        assert self.session.state.staged == []

    def test_get_state(self):
        """The summary carries session and board fields."""
        state = self.session.get_state()
        assert state["level"] == "001"
        assert state["won"] is False
        assert state["turn"] == 1
        assert state["hand"] == ["T", "S", "Q", "O"]
        assert state["deck_remaining"] == 1


class TestMain:
    """Test cases for the command-line runner."""

    def test_load_script(self, tmp_path):
        """Scripts load into a level and moves."""
        path = tmp_path / "cats.yaml"
        path.write_text(SCRIPT)
        script = load_script(str(path))
        assert script.level.allowed_words == ["ca", "cat", "cats"]
        assert len(script.moves) == 7
        assert script.moves[4].pool == "hand"

    def test_run_script(self, tmp_path, capsys):
        """A script plays to a win and prints a summary."""
        path = tmp_path / "cats.yaml"
        path.write_text(SCRIPT)
        assert main([str(path)]) == 0
        out = capsys.readouterr().out
        assert "=== Session Summary ===" in out
        assert "Turns used: 2 (par 3)" in out
        assert "Won: yes" in out
        assert 'rejected: The word "CATQ" is not allowed' in out

    def test_board_issues_listed(self, tmp_path, capsys):
        """A rejected board check lists the issues that block the commit."""
        path = tmp_path / "stray.yaml"
        path.write_text(textwrap.dedent("""
            level:
              rows: 3
              cols: 3
              goal: {r: 1, c: 2}
              seeds:
                - {text: CA, r: 0, c: 0}
              deck: [T, S]
              allowedWords: [ca, t]
            moves:
              - {action: place, tile: T, r: 2, c: 2}
              - {action: submit}
        """))
        assert main([str(path)]) == 0
        out = capsys.readouterr().out
        assert "rejected: Disconnected group: cells C3 are not connected to a seed." in out
        assert "    - Disconnected group: cells C3 are not connected to a seed." in out
        assert "Won: no" in out

    def test_quiet(self, tmp_path, capsys):
        """Quiet mode prints only the summary."""
        path = tmp_path / "cats.yaml"
        path.write_text(SCRIPT)
        assert main([str(path), "--quiet"]) == 0
        out = capsys.readouterr().out
        assert "rejected" not in out
        assert "Won: yes" in out

    def test_missing_file(self, tmp_path, capsys):
        """A missing script is an error."""
        assert main([str(tmp_path / "nope.yaml")]) == 1
        assert "Script file not found" in capsys.readouterr().err

    def test_bad_level(self, tmp_path, capsys):
        """A script without a usable level is an error."""
        path = tmp_path / "bad.yaml"
        path.write_text("moves: []\n")
        assert main([str(path)]) == 1
        assert "Error loading script" in capsys.readouterr().err
