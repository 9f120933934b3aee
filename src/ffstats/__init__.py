"""Fantasy football gameweek ingestion, scoring and season summaries."""

__version__ = "0.1.0"
