"""The game loop: drawing, bomb countdowns and explosions, input and results."""

from __future__ import annotations

import argparse
import random
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from . import settings
from .ai import AIController
from .menu import CLEAR_SCREEN, Menu
from .model import Board, Bomb, Leaderboard, Player
from .settings import keys_for
from .terminal import Terminal

CLEAR_HOME = "\033[2J\033[1;1H"
HIT_SCORE = 100

_YES = ("Y", "y", "yes", "YES")
_NO = ("N", "n", "no", "NO")
_RAYS = ((0, -1), (0, 1), (-1, 0), (1, 0))


class Game:
    """One round: menu, play until a player runs out of lives, then results."""

    def __init__(
        self,
        terminal: Terminal | None = None,
        leaderboard: Leaderboard | None = None,
        *,
        board: Board | None = None,
        out: TextIO | None = None,
        input_stream: TextIO | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
        animation_path: str | Path = settings.ANIMATION_PATH,
    ) -> None:
        self.board = board if board is not None else Board()
        self.terminal = terminal if terminal is not None else Terminal()
        self.leaderboard = leaderboard if leaderboard is not None else Leaderboard()
        self.out = out if out is not None else sys.stdout
        self.input_stream = input_stream if input_stream is not None else sys.stdin
        self.sleep = sleep
        self.clock = clock
        self.menu = Menu(
            self.board,
            self.terminal,
            self.leaderboard,
            out=self.out,
            input_stream=self.input_stream,
            sleep=sleep,
            rng=rng,
            animation_path=animation_path,
        )
        self.ai: AIController | None = None
        self.p1 = Player(keys=keys_for(1), symbol=settings.PLAYER1_SYMBOL)
        self.p2 = Player(keys=keys_for(2), symbol=settings.PLAYER2_SYMBOL)
        self.start_time = clock()
        self._pending: list[str] = []

    def _write(self, text: str) -> None:
        self.out.write(text)
        self.out.flush()

    def _read_word(self) -> str | None:
        while not self._pending:
            line = self.input_stream.readline()
            if not line:
                return None
            self._pending = line.split()
        return self._pending.pop(0)

    def render(self, p1: Player, p2: Player, elapsed: int) -> str:
        """Return the status lines and the board as one screen."""
        board = self.board
        edge = settings.BORDER * (2 * board.width + 2)
        lines = [
            f"Player 1 Lives: {p1.lives}\tPlayer 2 Lives: {p2.lives}",
            f"Player 1 Score: {p1.score}\tPlayer 2 score: {p2.score}",
            f"Time: {elapsed}",
            edge,
        ]
        for row in board.grid:
            parts = []
            for x, cell in enumerate(row):
                if x in (0, board.width - 1):
                    parts.append(settings.BORDER)
                # A counting-down bomb is already two characters wide.
                parts.append(cell if cell[:-1] == settings.BOMB else cell * 2)
            lines.append("".join(parts))
        lines.append(edge)
        return CLEAR_HOME + "\n".join(lines) + "\n"

    def update_bombs(self, p1: Player, p2: Player, now: float) -> list[Bomb]:
        """Show each bomb's countdown and explode the due ones; return those exploded."""
        board = self.board
        for bomb in board.bombs:
            remaining = settings.BOMB_DELAY - int(now - bomb.placed_time)
            board.grid[bomb.y][bomb.x] = settings.BOMB + str(remaining)

        waiting: list[Bomb] = []
        exploded: list[Bomb] = []
        for bomb in board.bombs:
            if now - bomb.placed_time >= settings.BOMB_DELAY:
                self._explode(bomb, p1, p2, now)
                exploded.append(bomb)
            else:
                waiting.append(bomb)
        board.bombs = waiting
        return exploded

    def _explode(self, bomb: Bomb, p1: Player, p2: Player, now: float) -> None:
        owners = {1: p1, 2: p2}
        if bomb.owner not in owners:
            raise ValueError(f"bomb has unknown owner {bomb.owner!r}")
        owner = owners[bomb.owner]
        board = self.board
        grid = board.grid
        x, y = bomb.x, bomb.y
        if grid[y][x] == settings.BOMB:
            grid[y][x] = settings.EMPTY

        positions = [(x, y)]
        for dx, dy in _RAYS:
            for step in range(1, owner.bomb_range + 1):
                nx, ny = x + dx * step, y + dy * step
                if not board.in_bounds(ny, nx) or grid[ny][nx] in (
                    settings.BORDER,
                    settings.OBSTACLE,
                ):
                    break
                positions.append((nx, ny))
                if grid[ny][nx] == settings.BOMB:
                    break

        for px, py in positions:
            if grid[py][px] not in (settings.BORDER, settings.OBSTACLE):
                grid[py][px] = settings.EXPLOSION

        self._write(self.render(p1, p2, int(now - self.start_time)))
        self.sleep(0.2)

        for px, py in positions:
            if grid[py][px] == settings.EXPLOSION:
                grid[py][px] = settings.EMPTY
            if board.items[py][px]:
                grid[py][px] = board.items[py][px]

        for px, py in positions:
            if (p1.x, p1.y) == (px, py):
                p1.lives -= 1
                if bomb.owner == 2:
                    p2.score += HIT_SCORE
                if p1.lives <= 0:
                    grid[p1.y][p1.x] = settings.EMPTY
            if (p2.x, p2.y) == (px, py):
                p2.lives -= 1
                if bomb.owner == 1:
                    p1.score += HIT_SCORE
                if p2.lives <= 0:
                    grid[p2.y][p2.x] = settings.EMPTY

        owner_player = p1 if bomb.owner == 1 else p2
        owner_player.bombs_placed -= 1

    def handle_key(self, p1: Player, p2: Player, key: str) -> None:
        """Apply one key press to player 1 and, when human, player 2."""
        for number, player in ((1, p1), (2, p2)):
            if number == 2 and player.is_computer:
                continue
            keys = player.keys
            if key in (keys.up, keys.down, keys.left, keys.right):
                self.board.move_player(player, key)
            elif key == keys.bomb:
                self.board.place_bomb(player, number, self.clock())

    def _announce_winner(self, label: str, winner: Player, match_time: int) -> None:
        self._write(f"Congratulations {label}!\nPlease Enter your name for leaderboard: ")
        name = self._read_word() or "anonymous"
        rank = self.leaderboard.add(name, winner.score, match_time)
        self._write(f"Congratulations {name}!\n")
        self._write(f"Your score is {winner.score}\nUsed time: {match_time} seconds\n")
        if rank == 0:
            self._write("Your are not in the top ten leaderboard.\nNext time, TRY HARDER!!\n")
        else:
            self._write(f"Your are currently in the {rank} place!\nKeep it up!\n")

    def _ask_replay(self) -> bool:
        self._write("Do you want to play it again?(Y/N):")
        while (answer := self._read_word()) is not None:
            if answer in _YES:
                self._write("The Game will start right away.")
                self.sleep(0.5)
                self._pending.clear()
                return True
            if answer in _NO:
                self._write("Thanks for playing, goodbye!\n")
                return False
            self._write("Invalid Input. Please try again.\n")
            self._write("Do you want to play it again?(Y/N):")
        return False

    def play(self) -> bool:
        """Run one game from the menu to the results; return whether to play again."""
        self.terminal.raw_mode()
        self.menu.initial_animation()
        p1 = self.p1 = Player(keys=keys_for(1), symbol=settings.PLAYER1_SYMBOL)
        p2 = self.p2 = Player(keys=keys_for(2), symbol=settings.PLAYER2_SYMBOL)
        if not self.menu.run(p1, p2):
            return False
        p1.score = p2.score = 0
        self.ai = AIController(self.board, self.menu.ai_move_delay, clock=self.clock)
        self.start_time = self.clock()

        while True:
            if p1.lives <= 0 or p2.lives <= 0:
                self._write(CLEAR_SCREEN)
                elapsed = int(self.clock() - self.start_time)
                self.menu.death_frame(p1, p2, elapsed)
                self.sleep(3.0)
                break
            self._write(self.render(p1, p2, int(self.clock() - self.start_time)))
            if p2.is_computer:
                self._write(f"Current AI state: {self.ai.state}\n")
            self.update_bombs(p1, p2, self.clock())
            self.sleep(0.1)
            if p2.is_computer:
                self.ai.compute_move(p2, p1)
            while self.terminal.kbhit():
                self.handle_key(p1, p2, self.terminal.getch())

        match_time = int(self.clock() - self.start_time)
        if p1.lives == p2.lives:
            self.terminal.restore()
            self._write("It's a tie!\n")
            self.sleep(1.0)
        elif p2.lives > p1.lives:
            self.menu.win_animation("ai" if p2.is_computer else 2)
            self.terminal.restore()
            if p2.is_computer:
                self._write("AI wins!\nPlease try harder next time!\n")
            else:
                self._announce_winner("Player2", p2, match_time)
            self.sleep(1.0)
        else:
            self.menu.win_animation(1)
            self.terminal.restore()
            self._announce_winner("Player1", p1, match_time)
            self.sleep(1.0)
        return self._ask_replay()


def main(argv: list[str] | None = None) -> int:
    """Play games until the player quits, keeping the leaderboard on disk."""
    parser = argparse.ArgumentParser(prog="crazyarcade", description="Terminal bomb arena.")
    parser.add_argument("--leaderboard", default=settings.LEADERBOARD_PATH,
                        help="leaderboard file")
    parser.add_argument("--animation", default=settings.ANIMATION_PATH,
                        help="animation file")
    args = parser.parse_args(argv)

    leaderboard = Leaderboard()
    leaderboard.load(args.leaderboard)
    terminal = Terminal()
    try:
        while Game(terminal, leaderboard, animation_path=args.animation).play():
            pass
    finally:
        terminal.restore()
    leaderboard.save(args.leaderboard)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())