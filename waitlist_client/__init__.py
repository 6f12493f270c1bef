"""CoachGG waitlist signup client."""

__version__ = "0.1.0"
