"""Study Studio: local task store for the study planner desktop app."""

__version__ = "0.1.0"
