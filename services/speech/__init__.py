"""Narration speech synthesis boundary.

Wraps the external text-to-speech collaborator and measures the real
duration of every returned audio resource.
"""
