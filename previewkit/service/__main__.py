"""
Run the compile service: python -m previewkit.service [--host HOST] [--port PORT]
"""

import argparse

import uvicorn
from uvicorn.config import LOG_LEVELS

from previewkit.config import get_config
from previewkit.logging import configure_logging
from previewkit.service.app import create_app


def main() -> None:
    parser = argparse.ArgumentParser(description="previewkit compile service")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    config = get_config()
    configure_logging(config.log_level)

    log_level = config.log_level.lower()
    if log_level not in LOG_LEVELS:
        log_level = "info"

    uvicorn.run(create_app(), host=args.host, port=args.port, log_level=log_level)


if __name__ == "__main__":
    main()
