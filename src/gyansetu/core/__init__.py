"""Configuration, security and authorization primitives."""
