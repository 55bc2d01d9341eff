from . import readings, tanks

__all__ = [
    "readings",
    "tanks",
]
