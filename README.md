# crazyarcade

A bomb-placing arcade game played in the terminal. Two players move around a
walled board, drop bombs that go off after a few seconds, blow up destructible
blocks to uncover power-ups, and try to catch each other in the blast. Play
against a friend on one keyboard or against a computer opponent.

## Installing

```
pip install .
```

The game needs a POSIX terminal (Linux or macOS). It switches the terminal to
unbuffered, non-echoing input so that keys are read one at a time without
waiting for Enter, and puts the settings back when it quits.

## Playing

```
crazyarcade
```

Options:

- `--leaderboard PATH` – the leaderboard file (default `assets/leaderboard.txt`)
- `--animation PATH` – the animation file (default `assets/animation.txt`)

Both paths are relative to the directory the game is started from.

The main menu offers:

1. Start Single-Player Game (Easy) – the computer decides a move every fourth turn
2. Start Single-Player Game (Hard) – the computer decides a move every second turn
3. Start Two-Player Game
4. Select Map – pick one of three maps, then a two-player game starts on it
5. View Leaderboard
6. Exit

Use `W` and `S` to move through the menu (the selection wraps round) and Enter
to choose. The three game modes above play on the third map, which is laid out
at random with the corners around both starting positions kept clear. The
first two maps are fixed grids of solid walls.

### Controls

| Action      | Player 1 | Player 2 |
|-------------|----------|----------|
| Up          | `w`      | `o`      |
| Down        | `s`      | `l`      |
| Left        | `a`      | `k`      |
| Right       | `d`      | `;`      |
| Place bomb  | `f`      | `j`      |

### Rules

- Each player starts with 3 lives, 1 bomb at a time, and a blast range of 3.
- A bomb shows a countdown and goes off 3 seconds after it is placed. Its blast
  runs in four directions; the border and solid walls stop it, and
  destructible blocks in its way are cleared.
- Being caught in a blast costs a life. Catching the other player earns the
  bomb's owner 100 points.
- Destructible blocks may hide power-ups, which show once the block is blown
  away and are collected by walking onto them:
  - ★ extra score (+50 points)
  - ♥ extra life (+20 points)
  - ♠ one more bomb at a time (+20 points)
  - ❁ blast range one longer (+20 points)
- The game ends when a player runs out of lives. Equal lives is a tie.

After a game you are asked whether to play again (`Y`/`N`).

### The computer opponent

The computer player runs a small state machine: it flees its own bomb to a
cell out of every blast's reach, attacks by bombing when the other player is
within three steps and it can still escape, bombs destructible blocks next to
it to reach hidden items, walks towards items, and otherwise wanders at random.
The current state is shown under the board.

### Leaderboard

When a human player wins, the game asks for a name and records the score and
the match time. The ten best results are kept, higher scores first and shorter
times breaking ties, and the game tells you your place. A computer win is not
recorded. The leaderboard file holds one `name score time` line per entry and
is written when you leave the game.

## Using it as a library

- `crazyarcade.model` – `Board` (grid, hidden items, live bombs, moving
  players and placing bombs), `Player`, `Bomb`, `Leaderboard` with `load`,
  `save`, `add` and `render`.
- `crazyarcade.ai` – `AIController` and its `AIState`s.
- `crazyarcade.menu` – `generate_map`, `setup_players`, `render_main_menu`,
  `render_map_selection`, `next_selection` and the interactive `Menu`.
- `crazyarcade.game` – `Game` (`render`, `update_bombs`, `handle_key`, `play`)
  and `main`.
- `crazyarcade.settings` – board size, cell symbols, timings and `keys_for`.
- `crazyarcade.terminal` – `Terminal`, a context manager for raw key input.

## What it does not include

The package ships no animation file. The title, victory and game-over screens
read their lines from the animation file; when it is missing those lines are
blank and only the surrounding frames and messages are shown. The game does not
run on Windows consoles.

## Running the tests

```
pip install ".[test]"
pytest
```