"""Players, bombs, the game board and the leaderboard."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from . import settings
from .settings import Keys, keys_for

LEADERBOARD_SIZE = 10


@dataclass
class Player:
    """A player's position, stats and controls."""

    x: int = 0
    y: int = 0
    lives: int = settings.MAX_LIVES
    bombs_placed: int = 0
    score: int = 0
    max_bombs: int = settings.MAX_BOMBS
    bomb_range: int = settings.BOMB_RANGE
    is_computer: bool = False
    symbol: str = settings.PLAYER1_SYMBOL
    keys: Keys = field(default_factory=lambda: keys_for(1))


@dataclass
class Bomb:
    """A bomb on the board."""

    x: int
    y: int
    placed_time: float
    owner: int
    bomb_range: int


@dataclass
class Board:
    """The map of cells, the hidden items under them and the live bombs."""

    width: int = settings.MAP_WIDTH
    height: int = settings.MAP_HEIGHT
    grid: list[list[str]] = field(init=False)
    items: list[list[str]] = field(init=False)
    bombs: list[Bomb] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.width < 3 or self.height < 3:
            raise ValueError("board must be at least 3x3")
        self.reset()

    def reset(self) -> None:
        """Clear the board to empty cells framed by a border."""
        self.grid = [[settings.EMPTY] * self.width for _ in range(self.height)]
        self.items = [[""] * self.width for _ in range(self.height)]
        self.bombs.clear()
        for row in (self.grid[0], self.grid[-1]):
            row[:] = [settings.BORDER] * self.width
        for row in self.grid:
            row[0] = row[-1] = settings.BORDER

    def in_bounds(self, y: int, x: int) -> bool:
        return 0 <= y < self.height and 0 <= x < self.width

    def is_bomb(self, y: int, x: int) -> bool:
        """Whether the cell shows a bomb, with or without a countdown."""
        return self.grid[y][x].startswith(settings.BOMB)

    def move_player(self, player: Player, key: str) -> bool:
        """Move a player one step for a key, collecting any item; return whether it moved."""
        keys = player.keys
        steps = ((keys.up, 0, -1), (keys.down, 0, 1), (keys.left, -1, 0), (keys.right, 1, 0))
        step = next(((dx, dy) for k, dx, dy in steps if k == key), None)
        if step is None:
            return False
        new_x, new_y = player.x + step[0], player.y + step[1]
        if not (0 < new_x < self.width - 1 and 0 < new_y < self.height - 1):
            return False

        dest = self.grid[new_y][new_x]
        if dest == settings.EMPTY:
            pass
        elif dest == settings.ADD_SCORE:
            player.score += 50
        elif dest == settings.ADD_LIVE:
            player.score += 20
            player.lives += 1
        elif dest == settings.ADD_BOMB:
            player.score += 20
            player.max_bombs += 1
        elif dest == settings.ADD_RANGE:
            player.score += 20
            player.bomb_range += 1
        else:
            return False
        if dest != settings.EMPTY:
            self.items[new_y][new_x] = ""
        self.move_to(player, new_x, new_y)
        return True

    def place_bomb(self, player: Player, owner: int, now: float) -> Bomb | None:
        """Drop a bomb where the player stands, unless the player has none left."""
        if player.bombs_placed >= player.max_bombs:
            return None
        bomb = Bomb(x=player.x, y=player.y, placed_time=now, owner=owner,
                    bomb_range=player.bomb_range)
        self.grid[bomb.y][bomb.x] = settings.BOMB
        self.bombs.append(bomb)
        player.bombs_placed += 1
        return bomb

    def move_to(self, player: Player, new_x: int, new_y: int) -> None:
        """Move a player's symbol to a new cell, emptying the old one."""
        self.grid[player.y][player.x] = settings.EMPTY
        player.x, player.y = new_x, new_y
        self.grid[new_y][new_x] = player.symbol


@dataclass
class LeaderboardEntry:
    name: str
    score: int
    time: int


@dataclass
class Leaderboard:
    """The best results, highest score first, quicker time breaking ties."""

    entries: list[LeaderboardEntry] = field(default_factory=list)

    def load(self, path: str | Path) -> None:
        """Append the entries stored in a file; a missing file adds nothing."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except FileNotFoundError:
            return
        for line in text.splitlines():
            parts = line.split()
            if len(parts) < 3:
                continue
            try:
                score, match_time = int(parts[1]), int(parts[2])
            except ValueError:
                continue
            self.entries.append(LeaderboardEntry(parts[0], score, match_time))

    def save(self, path: str | Path) -> None:
        """Write the entries, one "name score time" line each."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(
            "".join(f"{e.name} {e.score} {e.time}\n" for e in self.entries),
            encoding="utf-8",
        )

    def add(self, name: str, score: int, match_time: int) -> int:
        """Record a result; return the 1-based rank of that name, or 0 if off the board."""
        self.entries.append(LeaderboardEntry(name, score, match_time))
        self.entries.sort(key=lambda e: (-e.score, e.time))
        del self.entries[LEADERBOARD_SIZE:]
        return next((rank for rank, e in enumerate(self.entries, 1) if e.name == name), 0)

    def render(self) -> str:
        """Return the leaderboard as a text table."""
        lines = [
            "====== Leaderboard ======",
            f"Leaderboard size: {len(self.entries)}",
            "Name\t\tScore\tTime(s)",
            "----------------------------",
        ]
        lines += [f"{e.name:<15}{e.score:<10}{e.time:<8}" for e in self.entries]
        lines.append("=========================")
        return "\n".join(lines) + "\n"


def center_text(text: str, width: int) -> str:
    """Pad text with spaces on both sides to the given width."""
    padding = max(0, (width - len(text)) // 2)
    return " " * padding + text + " " * max(0, width - len(text) - padding)


def left_align_text(text: str, prefix_spaces: int, width: int) -> str:
    """Indent text and pad it on the right to the given width."""
    remaining = max(0, width - len(text) - prefix_spaces)
    return " " * prefix_spaces + text + " " * remaining