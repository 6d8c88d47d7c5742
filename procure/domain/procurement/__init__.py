"""
Procurement Domain Module

Cache-facing contract for the procurement handlers: entity prefixes,
per-write invalidation fan-out and authoritative-store repository ports.
"""
