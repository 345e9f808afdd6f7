#!/usr/bin/env python3
"""Check connectivity to a Kafka cluster with SASL/SSL (PLAIN) credentials."""
import getpass
import logging
import sys
from typing import Callable, Optional, Sequence
from config import KafkaConfig, build_connection_config
from credentials import (
    USAGE,
    Credentials,
    MissingCredentialError,
    parse_arguments,
    prompt_credentials,
    resolve_credentials,
)
from kafka_errors import classify, classify_configuration_error
from kafka_producer import KafkaConnectionProbe
import reporter

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else KafkaConfig.LOG_LEVEL.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def release_probe(probe: Optional[KafkaConnectionProbe]):
    """Flush and close whatever the run opened. Does nothing if no handle exists."""
    if probe is None or not probe.has_handle:
        logger.debug("No Kafka handle to release")
        return
    reporter.print_cleanup()
    probe.close(KafkaConfig.FLUSH_TIMEOUT)
    reporter.print_cleanup_done()


def run_check(credentials: Credentials, topic: Optional[str] = None) -> bool:
    """
    Build the configuration, connect, fetch metadata and report.

    Every failure is classified and printed; the producer is released on
    every path.

    Args:
        credentials: Broker, username and password
        topic: Optional topic for a probe message

    Returns:
        True if the cluster metadata (and probe, if requested) succeeded
    """
    probe = None
    try:
        reporter.print_section("Creating Producer Configuration")
        try:
            config = build_connection_config(
                credentials.broker, credentials.username, credentials.password
            )
        except Exception as e:
            logger.debug(f"Configuration failed: {type(e).__name__}")
            reporter.print_failure(classify_configuration_error(e))
            return False
        reporter.print_configuration(config)

        reporter.print_section("Building Kafka Producer")
        probe = KafkaConnectionProbe(config)
        try:
            probe.connect()
            print("✓ Kafka producer built successfully")

            reporter.print_section("Testing Connection")
            metadata = probe.fetch_metadata(KafkaConfig.METADATA_TIMEOUT)
            reporter.print_metadata(metadata)

            if topic:
                reporter.print_section("Sending Probe Message")
                reporter.print_probe(probe.send_probe(topic, KafkaConfig.PROBE_TIMEOUT))
            return True
        except Exception as e:
            logger.debug(f"Connection check failed: {type(e).__name__}")
            reporter.print_failure(classify(e))
            return False
    finally:
        release_probe(probe)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the flag-driven check. Returns the process exit status."""
    args = parse_arguments(sys.argv[1:] if argv is None else argv)
    configure_logging(args.verbose)
    print(reporter.BANNER)

    if args.show_help:
        print(USAGE)
        return 0

    try:
        credentials = resolve_credentials(args)
    except MissingCredentialError as e:
        print(f"Error: {e}")
        print("Use --help for usage information.")
        return 1

    return 0 if run_check(credentials, topic=args.topic) else 1


def main_interactive(input_func: Callable[[str], str] = input,
                     password_func: Callable[[str], str] = getpass.getpass) -> int:
    """Entry point that prompts for credentials. The password is not echoed."""
    configure_logging()
    print(reporter.BANNER)
    print()

    try:
        credentials = prompt_credentials(input_func, password_func)
    except MissingCredentialError as e:
        print(f"Error: {e}")
        success = False
    else:
        success = run_check(credentials)

    try:
        input_func("\nPress Enter to exit...")
    except EOFError:
        pass
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
