"""ZapNote - meeting transcripts to structured minutes."""

__version__ = "0.1.0"
