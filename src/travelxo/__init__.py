"""TravelXO package exposing game history, win detection, and the web application."""

from .game import GameHistory, HistoryEntry, evaluate
from .ui import app

__all__ = ["GameHistory", "HistoryEntry", "app", "evaluate"]
