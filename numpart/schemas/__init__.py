"""Packaged JSON schemas for numpart input documents."""
