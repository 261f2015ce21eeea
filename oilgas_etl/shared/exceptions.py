"""
Standardized exception hierarchy for the ETL job.
Provides clear, typed exceptions with proper error context.
"""
from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application"""
    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Infrastructure errors
    DATABASE_ERROR = "DATABASE_ERROR"
    FILE_SYSTEM_ERROR = "FILE_SYSTEM_ERROR"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ApplicationException(Exception):
    """Base exception for all application-specific errors"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause


class ConfigurationException(ApplicationException):
    """Invalid or incomplete runtime configuration"""

    def __init__(self, message: str, setting: Optional[str] = None):
        context = {}
        if setting:
            context["setting"] = setting

        super().__init__(
            message=message,
            error_code=ErrorCode.CONFIGURATION_ERROR,
            context=context
        )


class InfrastructureException(ApplicationException):
    """Exceptions from the infrastructure layer"""
    pass


class DatabaseException(InfrastructureException):
    """Database-related errors"""

    def __init__(self, message: str, query: Optional[str] = None, cause: Optional[Exception] = None):
        context = {}
        if query:
            context["query"] = query

        super().__init__(
            message=message,
            error_code=ErrorCode.DATABASE_ERROR,
            context=context,
            cause=cause
        )


class FileSystemException(InfrastructureException):
    """File system errors"""

    def __init__(self, message: str, file_path: Optional[str] = None, cause: Optional[Exception] = None):
        context = {}
        if file_path:
            context["file_path"] = file_path

        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_SYSTEM_ERROR,
            context=context,
            cause=cause
        )
