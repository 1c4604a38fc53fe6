"""Map generation, the main menu and the menu screens and animations."""

from __future__ import annotations

import random
import sys
import time
from collections.abc import Callable, Sequence
from enum import IntEnum
from pathlib import Path
from typing import TextIO

from . import settings
from .model import Board, Leaderboard, Player, center_text, left_align_text
from .terminal import Terminal

CLEAR_SCREEN = "\033[2J\033[H"
ANIMATION_LINES = 59
MAPS = ("Game Map 1(Easy Mode)", "Game Map 2(Medium Mode)", "Game Map 3(Hard Mode)")

_MENU_WIDTH = 55
_MAP_WIDTH = 40
_INDENT = 5
_PROTECTED_RADIUS = 2

# Animation line range (first, last inclusive) and pause per line for each winner.
_WIN_FRAMES = {
    1: (15, 28, 0.2),
    2: (30, 43, 0.1),
    "ai": (53, 58, 0.1),
}


class MenuOption(IntEnum):
    """Entries of the main menu, in display order."""

    START_GAME_SINGLE_PLAYER_EASY = 1
    START_GAME_SINGLE_PLAYER_HARD = 2
    START_GAME_TWO_PLAYER = 3
    SELECT_MAP = 4
    VIEW_LEADERBOARD = 5
    EXIT = 6


_OPTION_LABELS = {
    MenuOption.START_GAME_SINGLE_PLAYER_EASY: "1) Start Single-Player Game(Easy)",
    MenuOption.START_GAME_SINGLE_PLAYER_HARD: "2) Start Single-Player Game(Hard)",
    MenuOption.START_GAME_TWO_PLAYER: "3) Start Two-Player Game",
    MenuOption.SELECT_MAP: "4) Select Map",
    MenuOption.VIEW_LEADERBOARD: "5) View Leaderboard",
    MenuOption.EXIT: "6) Exit",
}


def _random_cell(board: Board, y: int, x: int, rng: random.Random) -> None:
    if rng.randrange(10) == 0:
        board.grid[y][x] = settings.OBSTACLE
    elif rng.randrange(10) == 0:
        board.grid[y][x] = settings.DESTRUCTIBLE
        if rng.randrange(100) < 80:
            roll = rng.randrange(100)
            if roll < 50:
                board.items[y][x] = settings.ADD_SCORE
            elif roll < 60:
                board.items[y][x] = settings.ADD_LIVE
            elif roll < 90:
                board.items[y][x] = settings.ADD_BOMB
            else:
                board.items[y][x] = settings.ADD_RANGE
        else:
            board.items[y][x] = ""
    else:
        board.grid[y][x] = settings.EMPTY


def generate_map(board: Board, selection: int, rng: random.Random) -> None:
    """Lay out map 0, 1 or 2 on a freshly cleared board."""
    board.reset()
    height, width = board.height, board.width
    if selection == 0:
        for y in range(4, height - 2, 4):
            for x in range(2, width - 2, 2):
                board.grid[y][x] = settings.OBSTACLE
    elif selection == 1:
        for y in range(2, height - 2, 2):
            for x in range(2, width - 2, 2):
                board.grid[y][x] = settings.OBSTACLE
    elif selection == 2:
        r = _PROTECTED_RADIUS
        for y in range(1, height - 1):
            for x in range(1, width - 1):
                near_p1 = y <= 1 + r and x <= 1 + r
                near_p2 = height - 2 - r <= y <= height - 2 and width - 2 - r <= x <= width - 2
                if near_p1 or near_p2:
                    board.grid[y][x] = settings.EMPTY
                else:
                    _random_cell(board, y, x, rng)


def setup_players(
    board: Board, p1: Player, p2: Player, selection: int, rng: random.Random
) -> None:
    """Generate a map and put both players in their opposite corners."""
    generate_map(board, selection, rng)
    p1.x, p1.y = 1, 1
    p1.lives = settings.MAX_LIVES
    p1.bombs_placed = 0
    p1.symbol = settings.PLAYER1_SYMBOL
    p1.max_bombs = settings.MAX_BOMBS
    p1.bomb_range = settings.BOMB_RANGE
    p1.is_computer = False

    p2.x, p2.y = board.width - 2, board.height - 2
    p2.lives = settings.MAX_LIVES
    p2.bombs_placed = 0
    p2.symbol = settings.PLAYER2_SYMBOL
    p2.max_bombs = settings.MAX_BOMBS
    p2.bomb_range = settings.BOMB_RANGE

    board.grid[p1.y][p1.x] = p1.symbol
    board.grid[p2.y][p2.x] = p2.symbol


def render_main_menu(selection: int) -> str:
    """Return the main menu box with the selected entry marked."""
    width = _MENU_WIDTH
    rule = "═" * width
    blank = "║" + " " * width + "║"

    def centered(text: str) -> str:
        return "║" + center_text(text, width) + "║"

    def aligned(text: str, indent: int) -> str:
        return "║" + left_align_text(text, indent, width) + "║"

    lines = [
        "╔" + rule + "╗",
        centered("~ Crazy Arcade ~"),
        centered("Welcome to the Ultimate Battle"),
        blank,
        centered("This is the Menu"),
        blank,
        centered("Instructions:"),
        aligned("Player 1: Use [W,A,S,D] to move,[F] to place bombs", 2),
        aligned("Player 2: Use [O,K,L,;] to move,[J] to place bombs", 2),
        blank,
        blank,
        "╠" + rule + "╣",
        blank,
        centered("Select the Following Mode : "),
        centered("(Use [W,S] to select)"),
        blank,
    ]
    for option, label in _OPTION_LABELS.items():
        marker = ">> " if option == selection else "   "
        lines.append(aligned(marker + label, _INDENT))
    lines += [blank, blank, "╚" + rule + "╝"]
    return "\n".join(lines) + "\n"


def render_map_selection(maps: Sequence[str], selection: int) -> str:
    """Return the map list box with the selected map marked."""
    width = _MAP_WIDTH
    rule = "═" * width
    blank = "║" + " " * width + "║"
    lines = ["╔" + rule + "╗", blank, "║" + center_text("Available Maps : ", width) + "║", blank]
    for index, name in enumerate(maps):
        marker = "> " if index == selection else "  "
        lines.append("║" + left_align_text(f"{marker}{index + 1}. {name}", _INDENT, width) + "║")
    lines += [blank, blank, "╚" + rule + "╝"]
    return "\n".join(lines) + "\n"


def next_selection(selection: int, key: str) -> MenuOption:
    """Move the menu selection up with w or down with s, wrapping round."""
    current = MenuOption(selection)
    first, last = MenuOption.START_GAME_SINGLE_PLAYER_EASY, MenuOption.EXIT
    if key in ("w", "W"):
        return MenuOption(current - 1) if current > first else last
    if key in ("s", "S"):
        return MenuOption(current + 1) if current < last else first
    return current


class Menu:
    """The interactive menu, its animations and the game setup it leads to."""

    def __init__(
        self,
        board: Board,
        terminal: Terminal | None = None,
        leaderboard: Leaderboard | None = None,
        *,
        out: TextIO | None = None,
        input_stream: TextIO | None = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
        animation_path: str | Path = settings.ANIMATION_PATH,
    ) -> None:
        self.board = board
        self.terminal = terminal if terminal is not None else Terminal()
        self.leaderboard = leaderboard if leaderboard is not None else Leaderboard()
        self.out = out if out is not None else sys.stdout
        self.input_stream = input_stream if input_stream is not None else sys.stdin
        self.sleep = sleep
        self.rng = rng if rng is not None else random.Random()
        self.animation_path = animation_path
        self.animation: list[str] = []
        self.ai_move_delay = 2

    def _write(self, text: str) -> None:
        self.out.write(text)
        self.out.flush()

    def _show_lines(self, lines: Sequence[str], pause: float) -> None:
        for line in lines:
            self._write(line + "\n")
            self.sleep(pause)

    def _ensure_animation(self) -> None:
        if not self.animation:
            self.load_animation(self.animation_path)

    def load_animation(self, path: str | Path) -> None:
        """Read the animation lines; missing lines read as empty."""
        try:
            lines = Path(path).read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            lines = []
        lines = lines[:ANIMATION_LINES]
        self.animation = lines + [""] * (ANIMATION_LINES - len(lines))

    def initial_animation(self) -> None:
        """Play the title animation."""
        self._ensure_animation()
        self._write(CLEAR_SCREEN)
        self._show_lines(self.animation[:14], 0.2)
        self.sleep(0.25)
        self._write(CLEAR_SCREEN)
        self.sleep(0.25)

    def win_animation(self, winner: int | str) -> None:
        """Play the victory animation of player 1, player 2 or "ai", then wait for a key."""
        try:
            first, last, pause = _WIN_FRAMES[winner]
        except KeyError:
            raise ValueError(f"unknown winner {winner!r}") from None
        self._ensure_animation()
        self._write(CLEAR_SCREEN)
        self._show_lines(self.animation[first:last + 1], pause)
        self._write("Press any buttom to quit!\n")
        while not self.terminal.kbhit():
            self.terminal.getch()
            self.sleep(0.1)
            self._write(CLEAR_SCREEN)

    def death_frame(self, p1: Player, p2: Player, elapsed: int) -> None:
        """Show the final board with the game-over banner over it."""
        self._ensure_animation()
        board = self.board
        self._write(f"Player 1 Lives: {p1.lives}\tPlayer 2 Lives: {p2.lives}\n")
        self._write(f"Player 1 Score: {p1.score}\tPlayer 2 score: {p2.score}\n")
        self._write(f"Time: {elapsed}\n")

        edge = settings.BORDER * (2 * board.width + 2)
        frame = [edge]
        for row in board.grid:
            parts = []
            for x, cell in enumerate(row):
                if x in (0, board.width - 1):
                    parts.append(settings.BORDER * 3)
                elif cell == settings.BOMB:
                    parts.append(cell)
                else:
                    parts.append(cell * 2)
            frame.append("".join(parts))
        frame.append(edge)

        banner_rule = "═" * _MENU_WIDTH
        overlay = {7: "╔" + banner_rule + "╗", 15: "╚" + banner_rule + "╝"}
        for index in range(8, 15):
            overlay[index] = "║" + self.animation[index + 37] + "║"
        for index, line in overlay.items():
            if index < len(frame):
                frame[index] = line
        self._show_lines(frame, 0.2)

    def _show_leaderboard(self) -> None:
        self._write(CLEAR_SCREEN + "Loading Leaderboard...\n")
        self.sleep(0.5)
        self.terminal.restore()
        self._write(CLEAR_SCREEN + self.leaderboard.render())
        self._write("Press enter to return to menu...\n")
        self.input_stream.readline()
        self.terminal.raw_mode()

    def _choose_map(self) -> int:
        choice = 0
        done = False
        while True:
            self.sleep(0.1)
            self._write(CLEAR_SCREEN + render_map_selection(MAPS, choice))
            if done:
                return choice
            while self.terminal.kbhit():
                key = self.terminal.getch()
                if key in ("w", "W"):
                    choice = choice - 1 if choice > 0 else len(MAPS) - 1
                elif key in ("s", "S"):
                    choice = choice + 1 if choice < len(MAPS) - 1 else 0
                elif key == "\n":
                    done = True
                    break

    def _start(self, p1: Player, p2: Player, message: str, computer: bool) -> bool:
        self._write(message)
        self.sleep(0.5)
        setup_players(self.board, p1, p2, 2, self.rng)
        p2.is_computer = computer
        return True

    def run(self, p1: Player, p2: Player) -> bool:
        """Drive the main menu; return True when a game is set up, False on exit."""
        selection = MenuOption.START_GAME_SINGLE_PLAYER_EASY
        while True:
            self.sleep(0.1)
            self._write(CLEAR_SCREEN + render_main_menu(selection))
            while self.terminal.kbhit():
                key = self.terminal.getch()
                if key != "\n":
                    selection = next_selection(selection, key)
                    continue
                if selection is MenuOption.START_GAME_SINGLE_PLAYER_EASY:
                    self.ai_move_delay = 4
                    return self._start(
                        p1, p2, "\nSingle-Player Game (Easy Mode) starting!\n", True
                    )
                if selection is MenuOption.START_GAME_SINGLE_PLAYER_HARD:
                    self.ai_move_delay = 2
                    return self._start(
                        p1, p2, "\nSingle-Player Game (Hard Mode) starting!\n", True
                    )
                if selection is MenuOption.START_GAME_TWO_PLAYER:
                    return self._start(p1, p2, "\nTwo-Player Game starting!\n", False)
                if selection is MenuOption.EXIT:
                    self._write("\nThanks for playing, goodbye!\n")
                    return False
                if selection is MenuOption.VIEW_LEADERBOARD:
                    self._show_leaderboard()
                elif selection is MenuOption.SELECT_MAP:
                    choice = self._choose_map()
                    setup_players(self.board, p1, p2, choice, self.rng)
                    p2.is_computer = False
                    return True