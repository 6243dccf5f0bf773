"""Relay: real-time chat backend with presence tracking and per-row visibility."""
