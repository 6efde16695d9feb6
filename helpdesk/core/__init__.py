"""Configuration and logging primitives shared across the service."""
