"""Configuration module - settings loading and log redaction."""
