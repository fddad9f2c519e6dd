"""Plot-structure analysis: conflicts, pacing and foreshadowing."""
