"""
Core - Domain records, mapper, result type and ports.

Nothing in core performs I/O; adapters do.
"""
