"""Editor session service.

Holds the timeline state for one editing session, runs the playback clock
and exposes the state surface to the presentation layer.
"""
