"""Procure Cache: read-through caching for the procurement API."""
