"""Card snapping, collision and motion engine with a pygame table."""
