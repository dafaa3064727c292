"""Shared utilities for envstack core modules."""
