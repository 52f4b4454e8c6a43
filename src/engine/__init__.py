"""Embedded bucket storage engine.

This package persists nested buckets and scalar values in SQLite.
It supplies the transactions the navigation layer is built on.
"""
