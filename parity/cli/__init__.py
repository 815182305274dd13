# CLI package for Parity
"""
Command-line interface for comparing two JSON documents.

Commands:
    parity equivalent — Structural equivalence (order-insensitive)
    parity equal      — Capability-dispatched equality
"""
