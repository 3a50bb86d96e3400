from backend.storage.progress import ProgressStore

__all__ = ["ProgressStore"]
