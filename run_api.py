#!/usr/bin/env python3
"""
Script to run the Bookshelf API server.
"""

import uvicorn

from utilities.config import config
from utilities.logger import setup_logging, get_logger


def main():
    """Run the API server."""
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.debug
    )

    logger = get_logger(__name__)
    logger.info(
        "Starting Bookshelf API server",
        host=config.host,
        port=config.port,
        debug=config.debug
    )

    uvicorn.run(
        "api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower(),
        access_log=True
    )


if __name__ == "__main__":
    main()
