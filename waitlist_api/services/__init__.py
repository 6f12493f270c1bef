"""Service layer: rate limiting, signup validation and persistence."""
