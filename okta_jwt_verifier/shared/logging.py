"""
Structured logging configuration for okta-jwt-verifier.

The verifier only ever obtains loggers through ``get_logger``; applications
that want its events rendered call ``configure_logging`` once at startup.
"""

import sys
import structlog
import logging
from typing import Any, Dict, List


def configure_logging(service_name: str, log_level: str = "info", json_logs: bool = True) -> None:
    """Configure structlog and the stdlib root logger for an application embedding the verifier."""

    structlog.configure(
        processors=build_processors(service_name, json_logs),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )


def build_processors(service_name: str, json_logs: bool = True) -> List[Any]:
    """Processor chain shared by every verifier logger."""
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        _bind_service_name(service_name),
        add_component_context,
        renderer,
    ]


def _bind_service_name(service_name: str):
    def add_service_name(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return add_service_name


def add_component_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add the verifier component (``verifier.jwks`` -> ``jwks``) to log events."""
    logger_name = event_dict.get("logger", "")
    if "." in logger_name:
        event_dict["component"] = logger_name.split(".", 1)[1]

    return event_dict


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
