"""Shared infrastructure: logging, errors, HTTP plumbing."""
