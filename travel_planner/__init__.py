"""Travel catalogue and itinerary planner."""

__version__ = "1.0.0"
