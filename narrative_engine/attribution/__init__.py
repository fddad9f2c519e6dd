"""Speaker attribution and character assignment for extracted dialogue."""
