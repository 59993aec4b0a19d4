"""
Logging utilities for Codivio services

Provides centralized stdlib logging configuration with structlog on top.
"""

import os
import logging
import logging.config
from pathlib import Path
from typing import Optional, Dict, Any

import structlog
import yaml
from fastapi import Request

# Default logging configuration
DEFAULT_LOGGING_CONFIG: Dict[str, Any] = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'default': {
            'format': '%(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'INFO',
            'formatter': 'default',
            'stream': 'ext://sys.stdout'
        }
    },
    'root': {
        'level': 'INFO',
        'handlers': ['console'],
    },
}


def _load_config_file(config_path: Optional[str]) -> Optional[Dict[str, Any]]:
    """Load a YAML dictConfig file, returning None when unusable"""
    candidates = []
    if config_path:
        candidates.append(Path(config_path))
    candidates.append(Path(__file__).parent.parent / "configs" / "logging.yml")

    for path in candidates:
        if not path.exists():
            continue
        try:
            with open(path, 'r') as f:
                return yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logging.getLogger(__name__).warning("Failed to load logging config %s: %s", path, e)
    return None


def setup_logging(
    config_path: Optional[str] = None,
    log_level: Optional[str] = None,
    log_format: Optional[str] = None
) -> None:
    """
    Setup logging configuration

    Args:
        config_path: Path to a YAML logging configuration file
        log_level: Override log level
        log_format: 'json' for JSON lines, anything else for console output
    """
    config = _load_config_file(config_path) or {
        **DEFAULT_LOGGING_CONFIG,
        'handlers': {k: dict(v) for k, v in DEFAULT_LOGGING_CONFIG['handlers'].items()},
        'root': dict(DEFAULT_LOGGING_CONFIG['root']),
    }

    if log_level:
        log_level = log_level.upper()
        config.setdefault('root', {})['level'] = log_level
        for handler_config in config.get('handlers', {}).values():
            handler_config['level'] = log_level

    logging.config.dictConfig(config)

    renderer = (
        structlog.processors.JSONRenderer()
        if (log_format or '').lower() == 'json'
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def init_logging() -> None:
    """Initialize logging with environment variables"""
    setup_logging(
        os.getenv('LOGGING_CONFIG_PATH'),
        os.getenv('LOG_LEVEL', 'INFO'),
        os.getenv('LOG_FORMAT', 'console'),
    )


def get_logger(name: str):
    """
    Get logger instance

    Args:
        name: Logger name (usually __name__)

    Returns:
        structlog bound logger
    """
    return structlog.get_logger(name)


async def log_requests(request: Request, call_next):
    """HTTP middleware that logs every request and its outcome"""
    logger = structlog.get_logger("codivio.requests")
    logger.info(
        "Request received",
        method=request.method,
        path=request.url.path,
        client_ip=request.client.host if request.client else "unknown"
    )

    response = await call_next(request)

    logger.info(
        "Request completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code
    )

    return response
