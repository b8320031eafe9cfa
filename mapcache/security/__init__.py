"""Key handling, redaction and the outbound HTTP client."""
