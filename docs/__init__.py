"""API documentation setup."""
