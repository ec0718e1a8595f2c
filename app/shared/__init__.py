"""Cross-cutting concerns: logging, correlation ids, error mapping and security."""
