"""The computer opponent: a small state machine driven by path finding."""

from __future__ import annotations

import random
import time
from collections import deque
from collections.abc import Callable, Iterable
from enum import Enum, auto

from . import settings
from .model import Board, Bomb, Player

Cell = tuple[int, int]

_DIRECTIONS: tuple[Cell, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
_WALKABLE_SAFE = (settings.EMPTY, *settings.ITEM_SYMBOLS)
_REEVALUATE_AFTER = 3.0


class AIState(Enum):
    """What the computer player is currently trying to do."""

    ESCAPE = auto()
    WAIT_EXPLOSION = auto()
    FETCH_ITEMS = auto()
    ATTACK_PLAYER = auto()
    IDLE = auto()

    def __str__(self) -> str:
        return self.name


class AIController:
    """Decides and performs the computer player's moves on a board."""

    def __init__(
        self,
        board: Board,
        move_delay: int = 2,
        *,
        bomb_wait: float = 2.0,
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
    ) -> None:
        self.board = board
        self.move_delay = move_delay
        self.bomb_wait = bomb_wait
        self.state = AIState.IDLE
        self.stuck_count = 0
        self._clock = clock
        self._rng = rng if rng is not None else random.Random(42)
        self._move_counter = 0
        self._last_position: Cell = (-1, -1)
        self._recently_placed_bomb = False
        self._last_bomb_time = 0.0
        self._path: list[Cell] = []
        self._path_index = 0
        self._state_start = clock()

    @property
    def path(self) -> list[Cell]:
        """The path currently being followed, as (y, x) cells."""
        return list(self._path)

    def compute_move(self, computer: Player, human: Player) -> None:
        """Advance the computer player by one decision, every move_delay calls."""
        self._move_counter += 1
        if self._move_counter < self.move_delay:
            return
        self._move_counter = 0

        position = (computer.y, computer.x)
        self.stuck_count = self.stuck_count + 1 if position == self._last_position else 0
        self._last_position = position

        self.update_state(computer, human)

        if self.state is AIState.ESCAPE:
            self._handle_escape(computer)
        elif self.state is AIState.WAIT_EXPLOSION:
            self._handle_wait_explosion(computer)
        elif self.state is AIState.FETCH_ITEMS:
            self._handle_fetch_items(computer)
        elif self.state is AIState.ATTACK_PLAYER:
            self._handle_attack(computer, human)
        else:
            self._random_move(computer)

    def update_state(self, computer: Player, human: Player) -> None:
        """Choose a state by priority: flee own bomb, attack, fetch items, idle."""
        now = self._clock()
        bomb_active = self._recently_placed_bomb and now - self._last_bomb_time < self.bomb_wait
        if bomb_active:
            safe = self.safe_cells()
            if not safe:
                if self.state is not AIState.WAIT_EXPLOSION:
                    self.start_state(AIState.WAIT_EXPLOSION)
            elif self.state is not AIState.ESCAPE:
                self.start_state(AIState.ESCAPE)
            else:
                path = self.find_path(computer, safe, True)
                if path:
                    self._follow(path)
            return

        player_path = self.find_path(computer, [(human.y, human.x)], True)
        if player_path:
            if self.should_bomb_to_attack(computer, human):
                self._bomb_and_flee(computer, fallback=AIState.ESCAPE)
            else:
                if self.state is not AIState.ATTACK_PLAYER:
                    self.start_state(AIState.ATTACK_PLAYER)
                self._follow(player_path)
            return

        item_path = self.find_path(computer, self.item_cells(), True)
        if item_path:
            if self.should_bomb_to_clear(computer):
                self._bomb_and_flee(computer, fallback=AIState.WAIT_EXPLOSION)
            else:
                if self.state is not AIState.FETCH_ITEMS:
                    self.start_state(AIState.FETCH_ITEMS)
                self._follow(item_path)
            return

        if self.state is not AIState.IDLE:
            self.start_state(AIState.IDLE)

    def danger_map(self) -> list[list[bool]]:
        """Mark every cell that a live bomb's blast would reach."""
        board = self.board
        danger = [[False] * board.width for _ in range(board.height)]
        for bomb in board.bombs:
            danger[bomb.y][bomb.x] = True
            for dy, dx in _DIRECTIONS:
                for step in range(1, bomb.bomb_range + 1):
                    ny, nx = bomb.y + dy * step, bomb.x + dx * step
                    if not board.in_bounds(ny, nx):
                        break
                    if board.grid[ny][nx] in (settings.BORDER, settings.OBSTACLE):
                        break
                    danger[ny][nx] = True
        return danger

    def find_path(
        self, start: Player, targets: Iterable[Cell], avoid_danger: bool = True
    ) -> list[Cell]:
        """Shortest walkable path from the player to the nearest target, or []."""
        wanted = set(targets)
        if not wanted:
            return []
        board = self.board
        danger = self.danger_map()
        origin = (start.y, start.x)
        parent: dict[Cell, Cell | None] = {origin: None}
        queue = deque([origin])
        found: Cell | None = None
        while queue:
            cell = queue.popleft()
            if cell in wanted:
                found = cell
                break
            cy, cx = cell
            for dy, dx in _DIRECTIONS:
                nxt = (cy + dy, cx + dx)
                if nxt in parent or not board.in_bounds(*nxt):
                    continue
                if self._blocks(*nxt):
                    continue
                if avoid_danger and danger[nxt[0]][nxt[1]]:
                    continue
                parent[nxt] = cell
                queue.append(nxt)
        if found is None:
            return []
        path: list[Cell] = []
        step: Cell | None = found
        while step is not None:
            path.append(step)
            step = parent[step]
        path.reverse()
        return path

    def safe_cells(self) -> list[Cell]:
        """Empty or item cells out of every blast's reach."""
        danger = self.danger_map()
        return [
            (y, x)
            for y, row in enumerate(self.board.grid)
            for x, cell in enumerate(row)
            if not danger[y][x] and cell in _WALKABLE_SAFE
        ]

    def item_cells(self) -> list[Cell]:
        """Cells that hold an item, hidden or not."""
        return [
            (y, x)
            for y, row in enumerate(self.board.items)
            for x, item in enumerate(row)
            if item
        ]

    def can_escape_after_bomb(self, computer: Player) -> bool:
        """Whether a safe cell is reachable if a bomb were dropped here."""
        board = self.board
        origin = (computer.y, computer.x)
        # The simulated blast only covers the bomb's own cell.
        board.bombs.append(Bomb(x=computer.x, y=computer.y, placed_time=self._clock(),
                                owner=2, bomb_range=0))
        try:
            danger = self.danger_map()
        finally:
            board.bombs.pop()

        visited = {origin}
        queue = deque([origin])
        while queue:
            cy, cx = queue.popleft()
            if not danger[cy][cx]:
                return True
            for dy, dx in _DIRECTIONS:
                nxt = (cy + dy, cx + dx)
                if nxt in visited or not board.in_bounds(*nxt) or self._blocks(*nxt):
                    continue
                visited.add(nxt)
                queue.append(nxt)
        return False

    def should_bomb_to_attack(self, computer: Player, human: Player) -> bool:
        """Bomb when the opponent is within three steps and escape is possible."""
        distance = abs(human.x - computer.x) + abs(human.y - computer.y)
        return (
            distance <= 3
            and computer.bombs_placed < computer.max_bombs
            and self.can_escape_after_bomb(computer)
        )

    def should_bomb_to_clear(self, computer: Player) -> bool:
        """Bomb when a destructible block is adjacent and escape is possible."""
        if computer.bombs_placed >= computer.max_bombs:
            return False
        for dy, dx in _DIRECTIONS:
            ny, nx = computer.y + dy, computer.x + dx
            if (
                self.board.in_bounds(ny, nx)
                and self.board.grid[ny][nx] == settings.DESTRUCTIBLE
                and self.can_escape_after_bomb(computer)
            ):
                return True
        return False

    def random_direction_key(self, computer: Player) -> str:
        """Pick a movement key at random, or the up key when boxed in."""
        keys = computer.keys
        directions = list(_DIRECTIONS)
        candidates = [keys.up, keys.down, keys.left, keys.right]
        self._rng.shuffle(directions)
        self._rng.shuffle(candidates)
        for (dy, dx), key in zip(directions, candidates):
            ny, nx = computer.y + dy, computer.x + dx
            if not self.board.in_bounds(ny, nx):
                continue
            cell = self.board.grid[ny][nx]
            if cell not in (settings.BORDER, settings.OBSTACLE) and not self.board.is_bomb(ny, nx):
                return key
        return keys.up

    def start_state(self, state: AIState) -> None:
        """Enter a state afresh, dropping the current path."""
        self.state = state
        self._state_start = self._clock()
        self._path = []
        self._path_index = 0

    def _blocks(self, y: int, x: int) -> bool:
        cell = self.board.grid[y][x]
        if cell in (settings.BORDER, settings.OBSTACLE, settings.DESTRUCTIBLE):
            return True
        return self.board.is_bomb(y, x)

    def _follow(self, path: list[Cell]) -> None:
        self._path = path
        self._path_index = 0

    def _bomb_and_flee(self, computer: Player, fallback: AIState) -> None:
        now = self._clock()
        self.board.place_bomb(computer, 2, now)
        self._recently_placed_bomb = True
        self._last_bomb_time = now
        safe = self.safe_cells()
        if not safe:
            self.start_state(fallback)
        elif self.find_path(computer, safe, True):
            self.start_state(AIState.ESCAPE)

    def _move_along_path(self, computer: Player) -> None:
        if self._path_index + 1 >= len(self._path):
            return
        next_y, next_x = self._path[self._path_index + 1]
        keys = computer.keys
        step_keys = {(-1, 0): keys.up, (1, 0): keys.down, (0, -1): keys.left, (0, 1): keys.right}
        key = step_keys.get((next_y - computer.y, next_x - computer.x))
        if key is None:
            return
        self.board.move_player(computer, key)
        self._path_index += 1

    def _random_move(self, computer: Player) -> None:
        self.board.move_player(computer, self.random_direction_key(computer))

    def _handle_escape(self, computer: Player) -> None:
        if self._path:
            self._move_along_path(computer)
        else:
            self._random_move(computer)

    def _handle_wait_explosion(self, computer: Player) -> None:
        if self._path:
            self._move_along_path(computer)
        if self._clock() - self._last_bomb_time > self.bomb_wait:
            self.start_state(AIState.FETCH_ITEMS)

    def _handle_fetch_items(self, computer: Player) -> None:
        if self._path:
            self._move_along_path(computer)
            return
        items = self.item_cells()
        if not items:
            self.start_state(AIState.IDLE)
            return
        path = self.find_path(computer, items, True)
        if path:
            self._follow(path)
            self._move_along_path(computer)
        else:
            self._random_move(computer)

    def _handle_attack(self, computer: Player, human: Player) -> None:
        if self._path:
            self._move_along_path(computer)
        elif self._clock() - self._state_start > _REEVALUATE_AFTER:
            self.update_state(computer, human)
            if self.state is AIState.ATTACK_PLAYER:
                self._random_move(computer)