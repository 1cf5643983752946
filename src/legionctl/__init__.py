"""legionctl — legion roster, daily quest, and party data model."""

__version__ = "0.1.0"
