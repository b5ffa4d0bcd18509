"""Configuration, logging, persistence, security and error handling."""
