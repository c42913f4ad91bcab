"""Configuration, logging and storage primitives."""
