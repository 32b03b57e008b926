"""Self-sovereign identity registry."""
