import os

_enabled: bool = True


def enable_progress() -> None:
    """Enable periodic progress logging for bytepair training."""
    global _enabled
    _enabled = True


def disable_progress() -> None:
    """Disable periodic progress logging for bytepair training."""
    global _enabled
    _enabled = False


def _is_enabled() -> bool:
    """Check if progress is enabled (respects env var override)."""
    if os.environ.get("BYTEPAIR_DISABLE_PROGRESS", "").strip() == "1":
        return False
    return _enabled


def _progress_step(total: int, parts: int = 10) -> int:
    """Return how many iterations pass between two progress reports."""
    return max(1, total // parts)
