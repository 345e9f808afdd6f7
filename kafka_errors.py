"""Classification of connection failures into reportable categories."""
import enum
import errno
import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Type
from kafka.errors import (
    AuthorizationError,
    IllegalSaslStateError,
    IllegalStateError,
    KafkaConfigurationError,
    KafkaConnectionError,
    KafkaError,
    KafkaTimeoutError,
    NoBrokersAvailable,
    RequestTimedOutError,
    SaslAuthenticationFailedError,
    UnsupportedSaslMechanismError,
)

logger = logging.getLogger(__name__)


class FailureCategory(enum.Enum):
    CONFIGURATION = 'configuration'
    UNEXPECTED_CONFIGURATION = 'unexpected_configuration'
    PRODUCE = 'produce'
    BROKER = 'broker'
    INVALID_OPERATION = 'invalid_operation'
    NETWORK = 'network'
    TIMEOUT = 'timeout'
    AUTHORIZATION = 'authorization'
    UNEXPECTED = 'unexpected'


class ProduceFailedError(Exception):
    """Sending the probe message failed. The client error is kept as the cause."""

    def __init__(self, topic: str, error: BaseException):
        super().__init__(f"Failed to produce probe message to topic '{topic}': {error}")
        self.topic = topic
        self.error = error


HINT_AUTHENTICATION = "Authentication failed. Please verify your username and password."
HINT_ALL_BROKERS_DOWN = "Cannot connect to any brokers. Please verify the bootstrap servers URL."
HINT_TRANSPORT = "Network transport error. Check your network connection and firewall settings."
HINT_SASL = "SASL authentication failed. Check your credentials."
HINT_TIMED_OUT = "Connection timed out. The broker may be unreachable or overloaded."
HINT_NETWORK = "Please verify the broker URL and ensure the network is accessible."
HINT_TIMEOUT = ("The broker may be unreachable or not responding. "
                "Check the broker URL and network connectivity.")
HINT_AUTHORIZATION = "Check your credentials and permissions."
HINT_INVALID_OPERATION = "This may indicate an issue with the producer configuration or state."

# Checked in order, so subclasses must come before their bases
BROKER_HINTS: Tuple[Tuple[Type[KafkaError], str], ...] = (
    (SaslAuthenticationFailedError, HINT_SASL),
    (UnsupportedSaslMechanismError, HINT_AUTHENTICATION),
    (IllegalSaslStateError, HINT_AUTHENTICATION),
    (NoBrokersAvailable, HINT_ALL_BROKERS_DOWN),
    (KafkaConnectionError, HINT_TRANSPORT),
    (KafkaTimeoutError, HINT_TIMED_OUT),
    (RequestTimedOutError, HINT_TIMED_OUT),
)

# AuthorizationError is the base of every broker *AuthorizationFailedError
AUTHORIZATION_ERRORS = (AuthorizationError, PermissionError)

INVALID_OPERATION_ERRORS = (IllegalStateError, KafkaConfigurationError)


@dataclass(frozen=True)
class Failure:
    """A classified failure, ready for reporting."""
    category: FailureCategory
    error: BaseException
    code: Optional[str] = None
    reason: Optional[str] = None
    is_fatal: Optional[bool] = None
    socket_error: Optional[str] = None
    hint: Optional[str] = None

    @property
    def error_type(self) -> str:
        return type(self.error).__name__


def error_code(error: BaseException) -> str:
    """
    Get a display code for a client error.

    Broker response errors carry a numeric errno and a symbolic message;
    errors raised inside the client only have their class name.
    """
    code = getattr(error, 'errno', None)
    message = getattr(error, 'message', None)
    if isinstance(error, KafkaError) and code is not None:
        return f"{message} ({code})" if message else str(code)
    return type(error).__name__


def error_reason(error: BaseException) -> str:
    """Get the human readable reason for an error."""
    description = getattr(error, 'description', None)
    if isinstance(error, KafkaError) and description:
        return description
    return str(error) or type(error).__name__


def is_fatal(error: BaseException) -> Optional[bool]:
    """Kafka errors flag themselves as retriable; anything else is unknown."""
    if isinstance(error, KafkaError):
        return not error.retriable
    return None


def broker_hint(error: KafkaError) -> str:
    """Select the troubleshooting hint for a general client error."""
    for error_class, hint in BROKER_HINTS:
        if isinstance(error, error_class):
            return hint
    return f"Error Type: {type(error).__name__}"


def _socket_error(error: OSError) -> str:
    if error.errno is None:
        return 'Unknown'
    return errno.errorcode.get(error.errno, str(error.errno))


def classify_configuration_error(error: BaseException) -> Failure:
    """Classify an exception raised while building the connection configuration."""
    if isinstance(error, ValueError):
        return Failure(FailureCategory.CONFIGURATION, error, reason=str(error))
    return Failure(FailureCategory.UNEXPECTED_CONFIGURATION, error, reason=str(error))


def classify(error: BaseException) -> Failure:
    """
    Classify an exception raised while connecting, fetching metadata or producing.

    Args:
        error: The exception that ended the connection attempt

    Returns:
        Failure describing the category, the client's code and reason and a hint
    """
    if isinstance(error, ProduceFailedError):
        cause = error.error
        return Failure(
            FailureCategory.PRODUCE, error,
            code=error_code(cause), reason=error_reason(cause), is_fatal=is_fatal(cause),
        )

    if isinstance(error, AUTHORIZATION_ERRORS):
        return Failure(
            FailureCategory.AUTHORIZATION, error,
            code=error_code(error), reason=error_reason(error), hint=HINT_AUTHORIZATION,
        )

    if isinstance(error, INVALID_OPERATION_ERRORS):
        return Failure(
            FailureCategory.INVALID_OPERATION, error,
            reason=error_reason(error), hint=HINT_INVALID_OPERATION,
        )

    if isinstance(error, KafkaError):
        return Failure(
            FailureCategory.BROKER, error,
            code=error_code(error), reason=error_reason(error),
            is_fatal=is_fatal(error), hint=broker_hint(error),
        )

    # TimeoutError is an OSError subclass and must be checked first
    if isinstance(error, TimeoutError):
        return Failure(FailureCategory.TIMEOUT, error, reason=str(error), hint=HINT_TIMEOUT)

    if isinstance(error, OSError):
        return Failure(
            FailureCategory.NETWORK, error,
            reason=str(error), socket_error=_socket_error(error), hint=HINT_NETWORK,
        )

    logger.debug(f"Unclassified error type: {type(error).__name__}")
    return Failure(FailureCategory.UNEXPECTED, error, reason=str(error))
