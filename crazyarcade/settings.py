"""Game parameters, cell symbols and key bindings."""

from __future__ import annotations

from dataclasses import dataclass

MAP_WIDTH = 21
MAP_HEIGHT = 21

BORDER = "/"
OBSTACLE = "\033[0m█\033[0m"
DESTRUCTIBLE = "\033[90m█\033[0m"
BOMB = "\033[31m●\033[0m"
EXPLOSION = "\033[31m※\033[0m"
EMPTY = " "
PLAYER1_SYMBOL = "\033[34mA\033[0m"
PLAYER2_SYMBOL = "\033[34mB\033[0m"

ADD_SCORE = "\033[32m★\033[0m"
ADD_LIVE = "\033[31m♥\033[0m"
ADD_BOMB = "\033[35m♠\033[0m"
ADD_RANGE = "\033[91m❁\033[0m"
ITEM_SYMBOLS = (ADD_SCORE, ADD_LIVE, ADD_BOMB, ADD_RANGE)
ITEM_TOTAL_NUMBER = len(ITEM_SYMBOLS)

BOMB_DELAY = 3
BOMB_DELAY_RED = 1
BOMB_RANGE = 3
MAX_BOMBS = 1
MAX_LIVES = 3

LEADERBOARD_PATH = "assets/leaderboard.txt"
ANIMATION_PATH = "assets/animation.txt"


@dataclass(frozen=True)
class Keys:
    """The keys one player uses to move and to drop bombs."""

    up: str
    down: str
    left: str
    right: str
    bomb: str


_BINDINGS = {
    1: Keys(up="w", down="s", left="a", right="d", bomb="f"),
    2: Keys(up="o", down="l", left="k", right=";", bomb="j"),
}


def keys_for(player_number: int) -> Keys:
    """Return the key bindings of player 1 or player 2."""
    try:
        return _BINDINGS[player_number]
    except KeyError:
        raise ValueError(f"no key bindings for player {player_number!r}") from None