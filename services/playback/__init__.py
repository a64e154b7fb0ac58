"""Playback clock, overlay visibility and media synchronization."""
