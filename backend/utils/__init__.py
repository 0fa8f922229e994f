"""Small stdlib helpers shared across packages."""
