"""Shared helpers: time primitives, validation, logging and exceptions."""
