from backend.engine.gamerules.rules import MoveRejection, MoveValidator

__all__ = ["MoveRejection", "MoveValidator"]
