"""
Development server launcher.

Loads the .env file, then serves ``app.main:app`` with uvicorn in reload
mode at the configured log level.  Requests must carry the caller's id in
the ``X-User-Id`` header (normally injected by the gateway).

Usage:
    python scripts/run_dev.py [--port 8000]
"""

import argparse

from dotenv import load_dotenv

load_dotenv()

import uvicorn

from app.core.config import settings

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=f"{settings.PROJECT_NAME} development server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    print("=" * 60)
    print(f"{settings.PROJECT_NAME} {settings.VERSION}")
    print(f"API:  http://localhost:{args.port}/api/v1")
    print(f"Docs: http://localhost:{args.port}/docs")
    print("=" * 60)

    uvicorn.run("app.main:app", host=args.host, port=args.port, reload=True, log_level=settings.LOG_LEVEL.lower())
