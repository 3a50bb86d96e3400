from backend.engine.gameplay.game import GamePlay, LevelStats, MoveResult

__all__ = ["GamePlay", "LevelStats", "MoveResult"]
