"""Qt views, the canvas abstraction, coordinate mapping and topic renderers."""
