"""Core temp staging components."""
