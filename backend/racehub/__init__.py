"""RaceHub: race result ingestion, runner identity resolution and series standings."""

__version__ = "0.1.0"
