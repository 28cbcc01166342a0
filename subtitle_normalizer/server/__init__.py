"""HTTP API for the normalization stages (FastAPI)."""
