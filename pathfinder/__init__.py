"""Pathfinder: a personal job-discovery dashboard with a feedback-tuned ranker."""

__version__ = "0.1.0"
