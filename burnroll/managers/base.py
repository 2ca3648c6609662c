"""Base manager class with common patterns."""

from sqlalchemy.orm import Session


class BaseManager:
    """Base class for database-backed managers.

    Provides common patterns:
    - Database session access
    - Value clamping for counters
    """

    def __init__(self, db: Session) -> None:
        """Initialize manager with a database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def _clamp(self, value: int, min_val: int = 0, max_val: int | None = None) -> int:
        """Clamp a value between min and max bounds."""
        if max_val is not None:
            value = min(max_val, value)
        return int(max(min_val, value))
