import logging
import sys


class Log:
    """Process-wide logger for the upload API and the enrichment worker.

    Both entry points call configure() once; uvicorn's own loggers are
    attached to the same stdout handler so request logs share the format.
    """

    _logger: logging.Logger = logging.getLogger("nhs_letters")
    _SHARED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

    @classmethod
    def configure(cls, log_level: str, app_env: str = "dev") -> None:
        level = log_level.upper()
        cls._logger.setLevel(level)
        if cls._logger.handlers:
            return
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(f"%(asctime)s {app_env} [%(levelname)s] %(name)s: %(message)s")
        )
        cls._logger.addHandler(handler)
        for name in cls._SHARED_LOGGERS:
            shared = logging.getLogger(name)
            shared.handlers = [handler]
            shared.setLevel(level)
            shared.propagate = False

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def exception(cls, message: str, **kwargs: object) -> None:
        """Log at ERROR with the traceback of the exception being handled."""
        cls._logger.exception(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)
