"""Controllers: the animation clock and the per-topic session records."""
