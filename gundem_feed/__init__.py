"""gundem_feed - Karasu Gündem news ingestion and real-estate enrichment."""

__version__ = "0.1.0"
