"""Graph template resolution and expansion for the metrics dashboard."""

__version__ = "0.4.0"
