#!/usr/bin/env python3
"""
Run script for the auth service.
Loads settings from the environment and serves the FastAPI app with uvicorn.
"""
import uvicorn

from authservice.config import load_settings
from authservice.main import create_app

if __name__ == "__main__":
    # Exits with status 1 when DATABASE_URL is missing.
    settings = load_settings()

    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
