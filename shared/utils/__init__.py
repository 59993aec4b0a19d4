"""
Shared utilities for Codivio

This package contains common utilities used across all microservices.
"""

from .database import Base, DatabaseManager
from .logger import setup_logging, init_logging, get_logger, log_requests
from .security import SecurityUtils, SecuritySettings, get_security_utils, hash_password, verify_password, generate_token
from .exceptions import ErrorCode, BusinessException, register_exception_handlers
from .repository import BaseRepository
from .service_client import ServiceClient

__all__ = [
    "Base",
    "DatabaseManager",
    "setup_logging",
    "init_logging",
    "get_logger",
    "log_requests",
    "SecurityUtils",
    "SecuritySettings",
    "get_security_utils",
    "hash_password",
    "verify_password",
    "generate_token",
    "ErrorCode",
    "BusinessException",
    "register_exception_handlers",
    "BaseRepository",
    "ServiceClient",
]

__version__ = "1.0.0"
