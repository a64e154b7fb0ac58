"""Caption timing for narrated short videos.

This package handles:
- Allocating per-word timings across a measured narration duration
- Grouping word timings into readable caption segments
- Validating generated word timelines before they are published
"""

__version__ = "1.0.0"
