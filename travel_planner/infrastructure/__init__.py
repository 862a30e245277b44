"""Infrastructure exports."""

from travel_planner.infrastructure.logging import StructuredLogger, get_logger

__all__ = ["StructuredLogger", "get_logger"]
