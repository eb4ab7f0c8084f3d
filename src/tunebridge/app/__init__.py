"""Presentation layer: typed playback snapshots and player controls."""
