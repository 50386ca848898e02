"""Data models for gundem_feed."""
