"""Configuration package: ``config.config`` holds the Flask config classes."""
