#!/usr/bin/env python
"""Script to run the task tracker API server."""
import uvicorn

from tasktracker.config import HOST, PORT
from tasktracker.logging_setup import setup_logging

if __name__ == "__main__":
    setup_logging()
    uvicorn.run(
        "tasktracker.main:app",
        host=HOST,
        port=PORT,
        reload=True
    )
