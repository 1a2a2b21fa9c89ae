"""Configuration, logging, and startup checks."""
