"""
Structured logging system using structlog.
Provides JSON or console output and a logger for book store operations.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
import structlog
from structlog.stdlib import LoggerFactory


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[str] = None,
    debug: bool = False
) -> None:
    """
    Set up structured logging with configurable output formats.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        log_file: Optional log file path
        debug: Add call-site information to every event
    """
    level = getattr(logging, log_level.upper())

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(level)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter('%(message)s'))
        logging.getLogger().addHandler(file_handler)

    structlog.get_logger(__name__).info(
        "Logging system initialized",
        level=log_level,
        format=log_format,
        file=str(log_file) if log_file else None,
        debug=debug
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class StoreLogger:
    """
    Logger for book store operations with bound context.
    """

    def __init__(self, name: str = "bookshelf.store"):
        self.logger = structlog.get_logger(name)
        self.context = {}

    def bind_context(self, **kwargs) -> 'StoreLogger':
        """
        Bind context variables to every subsequent event.

        Args:
            **kwargs: Context variables to bind

        Returns:
            Self for method chaining
        """
        self.context.update(kwargs)
        return self

    def clear_context(self) -> 'StoreLogger':
        """Clear all context variables."""
        self.context.clear()
        return self

    def log_book_created(self, book_id: str, name: str, total_books: int) -> None:
        self.logger.info(
            "Book created",
            book_id=book_id,
            name=name,
            total_books=total_books,
            **self.context
        )

    def log_book_updated(self, book_id: str, name: str) -> None:
        self.logger.info(
            "Book updated",
            book_id=book_id,
            name=name,
            **self.context
        )

    def log_book_deleted(self, book_id: str, total_books: int) -> None:
        self.logger.info(
            "Book deleted",
            book_id=book_id,
            total_books=total_books,
            **self.context
        )

    def log_validation_failure(self, operation: str, message: str, book_id: Optional[str] = None) -> None:
        """Log a rejected payload."""
        self.logger.warning(
            "Book payload rejected",
            operation=operation,
            message=message,
            book_id=book_id,
            **self.context
        )

    def log_not_found(self, operation: str, book_id: str) -> None:
        self.logger.info(
            "Book not found",
            operation=operation,
            book_id=book_id,
            **self.context
        )

    def log_internal_error(self, operation: str, error: str, book_id: Optional[str] = None) -> None:
        """Log a failed consistency check."""
        self.logger.error(
            "Book store consistency check failed",
            operation=operation,
            error=error,
            book_id=book_id,
            **self.context
        )
