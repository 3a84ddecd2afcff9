"""
Unified logging for the funding rate comparison service

Provides consistent, colored logging across all components:
- Exchange sources
- Collection (adapters, orchestrator)
- Comparison service and API

Based on loguru with component-specific context bound to every record.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger as _logger


def _truncate_module_path(module: str, max_width: int) -> str:
    if len(module) <= max_width:
        return module

    parts = module.split(".")
    idx = len(parts) - 2
    while idx >= 0:
        candidate = ".".join(parts[idx:])
        if len(candidate) + 3 <= max_width:
            return f"...{candidate}"
        idx -= 1

    kept = parts[-1]
    return f"...{kept[-(max_width - 3):]}" if len(kept) + 3 > max_width else f"...{kept}"


def _format_record(record) -> bool:
    module_name = record.get("module") or record.get("name", "")
    function_name = record.get("function", "")
    line_number = record.get("line", 0)

    max_width = 45
    # function:line is never truncated
    suffix = f":{function_name}:{line_number}" if function_name else f":{line_number}"
    available_for_module = max_width - len(suffix)

    if available_for_module <= 3:
        module_display = "..."
    else:
        module_display = _truncate_module_path(module_name, available_for_module)

    record["extra"]["short_name"] = f"{module_display}{suffix}".rjust(max_width)
    return True


def _ensure_component(record) -> bool:
    if "component_id" not in record["extra"]:
        record["extra"]["component_id"] = "UNKNOWN"
    return True


class UnifiedLogger:
    """
    Logger bound to one component.

    The console handler (and optional file handler) is shared by every
    component and installed once per process; each instance only binds its
    own ``component_id``.
    """

    def __init__(
        self,
        component_type: str,
        component_name: str,
        context: Optional[Dict[str, Any]] = None,
        log_to_console: bool = True,
        log_to_file: bool = False,
        log_level: str = "INFO"
    ):
        """
        Initialize unified logger.

        Args:
            component_type: Type of component (exchange, service, core)
            component_name: Name of specific component
            context: Additional context (source, symbol, etc.)
            log_to_console: Whether to log to console
            log_to_file: Whether to add the rotating file handler
            log_level: Minimum log level
        """
        self.component_type = component_type.upper()
        self.component_name = component_name.upper()
        self.context = context or {}
        self.log_level = log_level.upper()
        self.log_to_console = log_to_console
        self.log_to_file = log_to_file

        self.component_id = f"{self.component_type}:{self.component_name}"
        if self.context:
            context_str = ":".join(f"{k}={v}" for k, v in self.context.items())
            self.component_id = f"{self.component_id}:{context_str}"

        self._setup_handlers()
        self._logger = _logger.bind(component_id=self.component_id)

    def _setup_handlers(self) -> None:
        """Install the shared loguru handlers on first use."""
        if not hasattr(_logger, "_funding_console_setup"):
            _logger.remove()

            if self.log_to_console:
                console_format = (
                    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                    "<level>{level: <8}</level> | "
                    "<cyan>{extra[short_name]}</cyan> | "
                    "<level>{message}</level>"
                )
                _logger.add(
                    sys.stdout,
                    format=console_format,
                    level=self.log_level,
                    colorize=True,
                    filter=lambda record: bool(record["extra"].get("component_id")) and _format_record(record),
                    backtrace=True,
                    diagnose=False
                )

            _logger._funding_console_setup = True

        if self.log_to_file and not hasattr(_logger, "_funding_file_setup"):
            logs_dir = Path(__file__).parent.parent / "logs"
            logs_dir.mkdir(exist_ok=True)

            _logger.add(
                str(logs_dir / "funding_rate_service.log"),
                format="{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {extra[component_id]:<35} | {message}",
                level="DEBUG",
                filter=_ensure_component,
                rotation="50 MB",
                retention="7 days",
                compression="zip",
                enqueue=True,
                catch=True
            )
            _logger._funding_file_setup = True

    def debug(self, message: str, **kwargs):
        self._logger.opt(depth=1).debug(message, **kwargs)

    def info(self, message: str, **kwargs):
        self._logger.opt(depth=1).info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._logger.opt(depth=1).warning(message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs):
        """Log error message, with the active traceback when ``exc_info`` is set."""
        self._logger.opt(depth=1, exception=exc_info).error(message, **kwargs)

    def critical(self, message: str, **kwargs):
        self._logger.opt(depth=1).critical(message, **kwargs)


def get_logger(
    component_type: str,
    component_name: str,
    context: Optional[Dict[str, Any]] = None,
    log_to_console: bool = True,
    log_to_file: bool = False,
    log_level: Optional[str] = None
) -> UnifiedLogger:
    """
    Factory function to create unified loggers.

    Examples:
        logger = get_logger("exchange", "binance")
        logger = get_logger("service", "funding_rate_service")
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO")

    return UnifiedLogger(
        component_type=component_type,
        component_name=component_name,
        context=context,
        log_to_console=log_to_console,
        log_to_file=log_to_file,
        log_level=log_level
    )


def get_exchange_logger(exchange_name: str, **context) -> UnifiedLogger:
    """Get logger for exchange sources."""
    return get_logger("exchange", exchange_name, context)


def get_service_logger(
    service_name: str,
    log_level: Optional[str] = None,
    log_to_file: bool = False,
    **context
) -> UnifiedLogger:
    """Get logger for services."""
    return get_logger(
        "service",
        service_name,
        context,
        log_to_file=log_to_file,
        log_level=log_level
    )
