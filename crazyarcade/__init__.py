"""A terminal bomb-placing arcade game with a computer opponent and a leaderboard."""

__version__ = "0.1.0"

__all__ = ["__version__"]