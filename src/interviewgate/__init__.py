"""Interview verification gate and skill-based job matching."""

__version__ = "0.1.0"
