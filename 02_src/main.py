"""Main entry point for the DataPipe service."""

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from datapipe.api import create_fastapi_app, get_app
from datapipe.logging_config import setup_logging
from datapipe.samples import register_sample_pipelines


def main():
    """Run the application."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")

    setup_logging()

    # Get configuration from environment
    api_host = os.getenv("API_HOST", "localhost")
    api_port = int(os.getenv("API_PORT", "8000"))

    # Register pipelines before the app starts building them
    register_sample_pipelines(get_app())

    # Create FastAPI app
    app = create_fastapi_app()

    # Run with uvicorn
    uvicorn.run(
        app,
        host=api_host,
        port=api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
