"""Text primitives: the spaCy toolkit, document flattening, dialogue extraction and statistics."""
