"""Recovery-aware muscle fatigue and workout recommendation engine."""

__version__ = "0.1.0"
