import logging
import sys
from typing import TextIO

# pdfminer warns once per malformed object and openai/httpx log every request at INFO.
NOISY_LOGGERS = ("pdfminer", "httpx", "openai")


class Log:
    """Centralized logging for the bookgen CLI and poller.

    Records go to stderr so that command output on stdout stays clean.
    """

    _logger: logging.Logger = logging.getLogger("bookgen")

    @classmethod
    def configure(cls, log_level: str, stream: TextIO | None = None) -> None:
        level = log_level.upper()
        cls._logger.setLevel(level)
        if not cls._logger.handlers:
            handler = logging.StreamHandler(stream or sys.stderr)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            )
            cls._logger.addHandler(handler)
        if level != "DEBUG":
            for name in NOISY_LOGGERS:
                logging.getLogger(name).setLevel(logging.WARNING)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)
