from backend.engine.gamelevels.levels import (
    Level,
    LevelManager,
    LevelSummary,
    efficiency,
    optimal_moves,
)

__all__ = ["Level", "LevelManager", "LevelSummary", "efficiency", "optimal_moves"]
