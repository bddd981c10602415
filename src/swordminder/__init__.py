"""SwordMinder: a gamified Bible-study companion."""

__version__ = "0.1.0"
