"""Single-user task tracker: FastAPI task service plus an async client view-model."""
