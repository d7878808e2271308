"""ocifkit: OCIF canvas validation with located errors, and diagram conversion."""

__version__ = "0.3.0"
