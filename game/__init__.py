"""Game session — configuration, state aggregate and the tick/action surface."""

from .config import load_config
from .core import InteractIntent, MovementIntent, ReunionGame
from .state import FurnitureState, GameState, NPCState, PlayerState

__all__ = [
    "FurnitureState",
    "GameState",
    "InteractIntent",
    "MovementIntent",
    "NPCState",
    "PlayerState",
    "ReunionGame",
    "load_config",
]
