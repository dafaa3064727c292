"""Top-level envstack commands."""
