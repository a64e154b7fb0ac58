"""Media storage boundary for uploaded background videos."""
