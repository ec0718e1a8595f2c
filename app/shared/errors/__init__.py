"""Maps domain errors to JSON HTTP responses."""
