"""Runs the LexForm API under uvicorn."""

import argparse

import uvicorn

from lexform.utils.config import load_config
from lexform.utils.logger import setup_logging


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="LexForm API server")
    parser.add_argument("--host", help="Bind address (overrides config)")
    parser.add_argument("--port", type=int, help="Bind port (overrides config)")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args(argv)

    config = load_config()
    setup_logging(config.log_level)
    uvicorn.run(
        "lexform.api.app:app",
        host=args.host or config.server.host,
        port=args.port or config.server.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
