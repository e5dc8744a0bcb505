"""
Standardized exception hierarchy for habit-engine
Provides rich context, consistent logging, and user-friendly error messages

Only failures that would leave stored state inconsistent are raised to callers
(persistence, configuration, invalid input). Insufficient history and
training failures select a heuristic instead, and scheduling rejections are
retried by the restriction controller and then logged.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class HabitEngineError(Exception):
    """
    Base exception for all habit-engine errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise HabitEngineError(
            message="Failed to replace daily challenge",
            operation="replace_challenge",
            context={"challenge_id": "abc-123"}
        )
    """

    def __init__(
        self,
        message: str,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
            "request_id": self.request_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for host application error reporting"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (Caller Input)
# ==========================================

class ValidationError(HabitEngineError):
    """
    Raised when caller input fails validation

    Examples:
    - Hour outside 0-23
    - Negative repetition count

    Example:
        raise ValidationError(
            message="Hour must be between 0 and 23",
            field="start_hour",
            value=25
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value, **(kwargs.pop("context", None) or {})},
            **kwargs
        )


# ==========================================
# Persistence Errors
# ==========================================

class PersistenceError(HabitEngineError):
    """
    Base class for repository failures

    Always propagated: continuing after a failed write could leave two
    challenges or two scheduling windows behind.
    """
    pass


class ConnectionError(PersistenceError):
    """Database connection failed"""

    def __init__(self, message: str = "Database connection failed", **kwargs):
        super().__init__(
            message=message,
            user_message="We're having trouble reaching your saved progress. Please try again in a moment.",
            **kwargs
        )


class QueryError(PersistenceError):
    """Database query execution failed"""

    def __init__(
        self,
        message: str,
        query: Optional[str] = None,
        **kwargs
    ):
        self.query = query
        super().__init__(
            message=message,
            user_message="We encountered an issue saving your progress. Please try again.",
            context={"query": query, **(kwargs.pop("context", None) or {})},
            **kwargs
        )


# ==========================================
# Scheduling Errors
# ==========================================

class SchedulingError(HabitEngineError):
    """Base class for device scheduling failures"""
    pass


class SchedulingRejectedError(SchedulingError):
    """Device scheduler kept rejecting the restriction window"""

    def __init__(
        self,
        message: str,
        window: Optional[str] = None,
        attempts: Optional[int] = None,
        **kwargs
    ):
        self.window = window
        self.attempts = attempts
        super().__init__(
            message=message,
            user_message="We couldn't set up your focus window. We'll try again next time you open the app.",
            context={"window": window, "attempts": attempts, **(kwargs.pop("context", None) or {})},
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(HabitEngineError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key, **(kwargs.pop("context", None) or {})},
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_external_exception(
    error: Exception,
    operation: str,
    context: Optional[Dict[str, Any]] = None
) -> HabitEngineError:
    """
    Wrap external exceptions (psycopg, etc.) into our exception hierarchy

    Args:
        error: Original exception
        operation: What operation was being performed
        context: Additional context

    Returns:
        Appropriate HabitEngineError subclass

    Example:
        try:
            await cur.execute(query)
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="replace_challenge")
    """
    import psycopg

    if isinstance(error, psycopg.OperationalError):
        return ConnectionError(
            message=f"Database connection failed: {str(error)}",
            operation=operation,
            context=context,
            cause=error
        )
    elif isinstance(error, psycopg.Error):
        return QueryError(
            message=f"Database query failed: {str(error)}",
            operation=operation,
            context=context,
            cause=error
        )

    # Generic fallback
    return HabitEngineError(
        message=f"{operation} failed: {str(error)}",
        operation=operation,
        context=context,
        cause=error
    )
