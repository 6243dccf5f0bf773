"""Reducers, visibility filters and replication."""
