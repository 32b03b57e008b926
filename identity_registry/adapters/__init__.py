"""Infrastructure adapters - clock, dispatcher and audit archive."""
