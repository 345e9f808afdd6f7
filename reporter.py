"""Console output for the connectivity check."""
import traceback
from config import ConnectionConfig
from kafka_errors import Failure, FailureCategory
from kafka_producer import ClusterMetadata, ProbeResult

BANNER = "=== Kafka SASL/SSL Connection Test ==="


def print_section(title: str):
    print(f"\n--- {title} ---")


def print_configuration(config: ConnectionConfig):
    """Print the configuration that will be used. The password is masked."""
    print("✓ Producer configuration created successfully")
    for label, value in config.describe():
        print(f"  {label}: {value}")


def print_metadata(metadata: ClusterMetadata):
    print("✓ Successfully connected to Kafka cluster!")
    print(f"  Cluster ID: {metadata.cluster_id or 'N/A'}")
    if metadata.controller_id is not None:
        print(f"  Controller: {metadata.controller_id}")
    print(f"  Brokers: {len(metadata.brokers)}")
    for broker in metadata.brokers:
        print(f"    - Broker {broker.node_id}: {broker.host}:{broker.port}")
    print(f"  Topics: {metadata.topic_count}")


def print_probe(result: ProbeResult):
    print(f"✓ Probe message acknowledged by topic {result.topic}")
    print(f"  Partition: {result.partition}")
    print(f"  Offset: {result.offset}")


def _stack_trace(error: BaseException) -> str:
    return ''.join(traceback.format_exception(type(error), error, error.__traceback__)).rstrip()


def _headline(failure: Failure) -> str:
    category = failure.category
    if category is FailureCategory.CONFIGURATION:
        return "✗ Configuration Error: Invalid configuration parameter"
    if category is FailureCategory.UNEXPECTED_CONFIGURATION:
        return f"✗ Unexpected Error during configuration: {failure.error_type}"
    if category is FailureCategory.PRODUCE:
        return "✗ Producer Error: Failed to produce message"
    if category is FailureCategory.BROKER:
        return f"✗ Kafka Error: {failure.code}"
    if category is FailureCategory.INVALID_OPERATION:
        return f"✗ Invalid Operation: {failure.reason}"
    if category is FailureCategory.NETWORK:
        return "✗ Network Error: Failed to establish socket connection"
    if category is FailureCategory.TIMEOUT:
        return "✗ Timeout Error: Operation timed out"
    if category is FailureCategory.AUTHORIZATION:
        return "✗ Authorization Error: Access denied"
    return f"✗ Unexpected Error: {failure.error_type}"


def print_failure(failure: Failure):
    """
    Print a classified failure with its details and troubleshooting hint.

    Args:
        failure: Result of kafka_errors.classify()
    """
    print(_headline(failure))
    category = failure.category

    if category is FailureCategory.PRODUCE:
        print(f"  Error Code: {failure.code}")
        print(f"  Error Reason: {failure.reason}")
        print(f"  Is Fatal: {failure.is_fatal}")
    elif category is FailureCategory.BROKER:
        print(f"  Reason: {failure.reason}")
        print(f"  Is Fatal: {failure.is_fatal}")
    elif category is FailureCategory.NETWORK:
        print(f"  Error Code: {failure.socket_error}")
    elif category is FailureCategory.AUTHORIZATION:
        print(f"  Error Code: {failure.code}")

    if category is not FailureCategory.INVALID_OPERATION:
        print(f"  Message: {failure.error}")
    print(f"  Stack Trace:\n{_stack_trace(failure.error)}")

    if failure.hint:
        print(f"\n  → {failure.hint}")


def print_cleanup():
    print_section("Cleaning up")


def print_cleanup_done():
    print("✓ Producer closed successfully")
