import io
import itertools
import random

import pytest

from crazyarcade import settings
from crazyarcade.game import Game, main
from crazyarcade.model import Board, Bomb, Leaderboard, Player
from crazyarcade.settings import keys_for


class FakeTerminal:
    """Feeds scripted keys; None means "no key now". Once empty, alternates hit/no hit."""

    def __init__(self, events=()):
        self.events = list(events)
        self._toggle = False
        self.raw_calls = 0
        self.restore_calls = 0

    def raw_mode(self):
        self.raw_calls += 1
        return self

    def restore(self):
        self.restore_calls += 1

    def kbhit(self):
        if self.events:
            if self.events[0] is None:
                self.events.pop(0)
                return False
            return True
        self._toggle = not self._toggle
        return self._toggle

    def getch(self):
        if self.events and self.events[0] is not None:
            return self.events.pop(0)
        return ""


def _stepping_clock(step=10):
    counter = itertools.count(0, step)
    return lambda: float(next(counter))


def make_game(board=None, events=(), input_text="", clock=None, tmp_path=None):
    out = io.StringIO()
    animation = (tmp_path / "missing.txt") if tmp_path else "missing-animation.txt"
    game = Game(
        FakeTerminal(events),
        Leaderboard(),
        board=board if board is not None else Board(width=7, height=7),
        out=out,
        input_stream=io.StringIO(input_text),
        sleep=lambda seconds: None,
        clock=clock if clock is not None else (lambda: 0.0),
        rng=random.Random(1),
        animation_path=animation,
    )
    return game, out


def players(board, p1_pos=(3, 3), p2_pos=(5, 3)):
    p1 = Player(x=p1_pos[0], y=p1_pos[1], keys=keys_for(1), symbol=settings.PLAYER1_SYMBOL)
    p2 = Player(x=p2_pos[0], y=p2_pos[1], keys=keys_for(2), symbol=settings.PLAYER2_SYMBOL)
    board.grid[p1.y][p1.x] = p1.symbol
    board.grid[p2.y][p2.x] = p2.symbol
    return p1, p2


def test_render_frames_board_with_borders():
    board = Board(width=5, height=5)
    game, _ = make_game(board)
    p1, p2 = players(board, (1, 1), (3, 3))
    screen = game.render(p1, p2, 7)
    lines = screen.splitlines()
    assert lines[0].endswith("Player 1 Lives: 3\tPlayer 2 Lives: 3")
    assert lines[2] == "Time: 7"
    edge = settings.BORDER * (2 * board.width + 2)
    assert lines[3] == edge
    assert lines[-1] == edge
    assert lines[4] == edge  # the top border row renders as wide as the frame
    for row in lines[5:-2]:
        assert row.startswith(settings.BORDER * 3)
        assert row.endswith(settings.BORDER * 3)


def test_render_shows_countdown_bomb_once():
    board = Board(width=5, height=5)
    game, _ = make_game(board)
    p1, p2 = players(board, (1, 1), (3, 3))
    board.grid[2][2] = settings.BOMB + "3"
    screen = game.render(p1, p2, 0)
    assert screen.count(settings.BOMB + "3") == 1
    assert screen.count(settings.PLAYER1_SYMBOL) == 2


def test_update_bombs_shows_countdown_before_exploding():
    board = Board(width=7, height=7)
    game, _ = make_game(board)
    p1, p2 = players(board)
    board.place_bomb(p1, 1, 0.0)
    assert game.update_bombs(p1, p2, 1.0) == []
    assert board.is_bomb(3, 3)
    assert board.grid[3][3] == settings.BOMB + "2"
    assert len(board.bombs) == 1
    assert p1.lives == settings.MAX_LIVES


def test_explosion_hits_players_and_scores():
    board = Board(width=7, height=7)
    game, out = make_game(board)
    p1, p2 = players(board)
    bomb = board.place_bomb(p1, 1, 0.0)
    exploded = game.update_bombs(p1, p2, float(settings.BOMB_DELAY))
    assert exploded == [bomb]
    assert board.bombs == []
    assert p1.lives == settings.MAX_LIVES - 1
    assert p2.lives == settings.MAX_LIVES - 1
    assert p1.score == 100
    assert p2.score == 0
    assert p1.bombs_placed == 0
    assert board.grid[3][3] == settings.EMPTY
    assert settings.EXPLOSION in out.getvalue()


def test_explosion_stopped_by_obstacle_and_reveals_items():
    board = Board(width=7, height=7)
    game, _ = make_game(board)
    p1, p2 = players(board, (3, 3), (3, 1))
    board.grid[2][3] = settings.OBSTACLE
    board.grid[3][4] = settings.DESTRUCTIBLE
    board.items[3][4] = settings.ADD_SCORE
    board.place_bomb(p1, 1, 0.0)
    game.update_bombs(p1, p2, float(settings.BOMB_DELAY))
    assert board.grid[2][3] == settings.OBSTACLE
    assert p2.lives == settings.MAX_LIVES
    assert board.grid[1][3] == settings.PLAYER2_SYMBOL
    assert board.grid[3][4] == settings.ADD_SCORE
    assert board.grid[3][5] == settings.EMPTY


def test_bomb_kill_empties_cell_of_last_life():
    board = Board(width=7, height=7)
    game, _ = make_game(board)
    p1, p2 = players(board, (3, 3), (5, 5))
    p1.lives = 1
    board.place_bomb(p1, 1, 0.0)
    game.update_bombs(p1, p2, float(settings.BOMB_DELAY))
    assert p1.lives == 0
    assert board.grid[3][3] == settings.EMPTY
    assert p2.lives == settings.MAX_LIVES


def test_bomb_with_unknown_owner_raises():
    board = Board(width=7, height=7)
    game, _ = make_game(board)
    p1, p2 = players(board)
    board.bombs.append(Bomb(x=2, y=2, placed_time=0.0, owner=3, bomb_range=1))
    with pytest.raises(ValueError):
        game.update_bombs(p1, p2, float(settings.BOMB_DELAY))


def test_handle_key_moves_and_bombs():
    board = Board(width=7, height=7)
    game, _ = make_game(board)
    p1, p2 = players(board)
    game.handle_key(p1, p2, keys_for(1).up)
    assert (p1.x, p1.y) == (3, 2)
    game.handle_key(p1, p2, keys_for(2).left)
    assert (p2.x, p2.y) == (4, 3)
    game.handle_key(p1, p2, keys_for(1).bomb)
    assert p1.bombs_placed == 1
    assert board.bombs[0].owner == 1
    game.handle_key(p1, p2, keys_for(2).bomb)
    assert board.bombs[-1].owner == 2
    assert p2.bombs_placed == 1


def test_handle_key_ignores_computer_keys():
    board = Board(width=7, height=7)
    game, _ = make_game(board)
    p1, p2 = players(board)
    p2.is_computer = True
    game.handle_key(p1, p2, keys_for(2).left)
    game.handle_key(p1, p2, keys_for(2).bomb)
    assert (p2.x, p2.y) == (5, 3)
    assert board.bombs == []


def test_play_exit_from_menu(tmp_path):
    game, out = make_game(Board(), events=["w", "\n"], tmp_path=tmp_path)
    assert game.play() is False
    assert "Thanks for playing, goodbye!" in out.getvalue()
    assert game.terminal.raw_calls >= 1


def test_play_full_two_player_round(tmp_path):
    events = ["s", "s", "\n", "f", None, "f", None, "f", None]
    game, out = make_game(
        Board(), events=events, input_text="Bob\nn\n",
        clock=_stepping_clock(), tmp_path=tmp_path,
    )
    assert game.play() is False
    assert game.p1.lives == 0
    assert game.p2.lives == settings.MAX_LIVES
    assert game.leaderboard.entries[0].name == "Bob"
    assert game.leaderboard.entries[0].score == game.p2.score
    text = out.getvalue()
    assert "Congratulations Player2!" in text
    assert "Congratulations Bob!" in text
    assert "Your are currently in the 1 place!" in text
    assert text.rstrip().endswith("Thanks for playing, goodbye!")


def test_play_replay_prompt_rejects_then_accepts(tmp_path):
    events = ["s", "s", "\n", "f", None, "f", None, "f", None]
    game, out = make_game(
        Board(), events=events, input_text="Ann maybe yes\n",
        clock=_stepping_clock(), tmp_path=tmp_path,
    )
    assert game.play() is True
    text = out.getvalue()
    assert "Invalid Input. Please try again." in text
    assert "The Game will start right away." in text


def test_main_help_exits_cleanly():
    with pytest.raises(SystemExit) as info:
        main(["--help"])
    assert info.value.code == 0