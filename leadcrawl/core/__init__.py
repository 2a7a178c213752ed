"""Configuration, logging and shared primitives."""
