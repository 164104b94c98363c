"""Learning, persistence and quiz services."""
