"""An aspect that logs the start, end and failure of operations."""

from __future__ import annotations

import logging

from loquat.adapters.config import ConfigError
from loquat.aop.base import AopError, Aspect


def _type_name(value: object) -> str:
    kind = type(value)
    return f"{kind.__module__}.{kind.__qualname__}"


class LoggingAspect(Aspect):
    """Logs every call it advises at a configurable level."""

    def __init__(
        self,
        logger: logging.Logger,
        log_level: int = logging.INFO,
        include_args: bool = False,
        include_result: bool = False,
    ) -> None:
        self.logger = logger
        self.log_level = log_level
        self.include_args = include_args
        self.include_result = include_result

    def _copy(self, **changes: object) -> LoggingAspect:
        settings = {
            "log_level": self.log_level,
            "include_args": self.include_args,
            "include_result": self.include_result,
        }
        settings.update(changes)
        return LoggingAspect(self.logger, **settings)  # type: ignore[arg-type]

    def with_log_level(self, level: int) -> LoggingAspect:
        return self._copy(log_level=level)

    def with_args(self, include: bool) -> LoggingAspect:
        return self._copy(include_args=include)

    def with_result(self, include: bool) -> LoggingAspect:
        return self._copy(include_result=include)

    @classmethod
    def default_logger(cls, logger: logging.Logger) -> LoggingAspect:
        return cls(logger, logging.INFO, False, False)

    @classmethod
    def detailed_logger(cls, logger: logging.Logger) -> LoggingAspect:
        return cls(logger, logging.DEBUG, True, True)

    @classmethod
    def request_logger(cls, logger: logging.Logger) -> LoggingAspect:
        return cls(logger, logging.INFO, True, False)

    @classmethod
    def function_logger(cls, logger: logging.Logger) -> LoggingAspect:
        return cls(logger, logging.DEBUG, False, False)

    async def before(self, operation: str) -> None:
        self.logger.log(
            self.log_level, "Calling %s", operation, extra={"operation": operation}
        )

    async def after(self, operation: str, error: AopError | None) -> None:
        self.logger.log(
            self.log_level, "Completed %s", operation, extra={"operation": operation}
        )

    async def on_error(self, operation: str, error: AopError) -> None:
        self.logger.log(
            logging.ERROR,
            "Error in %s",
            operation,
            extra={
                "operation": operation,
                "error_type": _type_name(error),
                "error_message": str(error),
            },
        )

    def __repr__(self) -> str:
        return (
            f"LoggingAspect(log_level={logging.getLevelName(self.log_level)!r}, "
            f"include_args={self.include_args!r}, include_result={self.include_result!r})"
        )


class LoggingAspectBuilder:
    """Step-by-step construction of a LoggingAspect."""

    def __init__(self) -> None:
        self._logger: logging.Logger | None = None
        self._log_level = logging.INFO
        self._include_args = False
        self._include_result = False

    def logger(self, logger: logging.Logger) -> LoggingAspectBuilder:
        self._logger = logger
        return self

    def log_level(self, level: int) -> LoggingAspectBuilder:
        self._log_level = level
        return self

    def include_args(self, include: bool) -> LoggingAspectBuilder:
        self._include_args = include
        return self

    def include_result(self, include: bool) -> LoggingAspectBuilder:
        self._include_result = include
        return self

    def build(self) -> LoggingAspect:
        """Build the aspect; raises ConfigError when no logger was given."""
        if self._logger is None:
            raise ConfigError("Logger is required for logging aspect")
        return LoggingAspect(
            self._logger, self._log_level, self._include_args, self._include_result
        )