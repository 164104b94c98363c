"""Database and value models."""
