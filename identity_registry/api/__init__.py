"""HTTP API - FastAPI adapter around the registry core."""
