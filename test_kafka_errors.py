"""Tests for kafka_errors module."""
import errno
import unittest

from kafka.errors import (
    ClusterAuthorizationFailedError,
    DelegationTokenAuthorizationFailedError,
    GroupAuthorizationFailedError,
    IllegalSaslStateError,
    IllegalStateError,
    KafkaConfigurationError,
    KafkaConnectionError,
    KafkaError,
    KafkaTimeoutError,
    NoBrokersAvailable,
    SaslAuthenticationFailedError,
    TopicAuthorizationFailedError,
    TransactionalIdAuthorizationFailedError,
    UnknownTopicOrPartitionError,
    UnsupportedSaslMechanismError,
)

from kafka_errors import (
    FailureCategory,
    HINT_ALL_BROKERS_DOWN,
    HINT_AUTHENTICATION,
    HINT_AUTHORIZATION,
    HINT_NETWORK,
    HINT_SASL,
    HINT_TIMED_OUT,
    HINT_TIMEOUT,
    HINT_TRANSPORT,
    ProduceFailedError,
    classify,
    classify_configuration_error,
)


class TestClassifyBrokerErrors(unittest.TestCase):
    """Tests for general client errors and their hints."""

    def test_recognised_codes(self):
        """Test the targeted hint for each recognised client error."""
        cases = [
            (UnsupportedSaslMechanismError(), HINT_AUTHENTICATION),
            (IllegalSaslStateError(), HINT_AUTHENTICATION),
            (NoBrokersAvailable(), HINT_ALL_BROKERS_DOWN),
            (KafkaConnectionError('reset by peer'), HINT_TRANSPORT),
            (SaslAuthenticationFailedError('invalid credentials'), HINT_SASL),
            (KafkaTimeoutError('metadata'), HINT_TIMED_OUT),
        ]
        for error, hint in cases:
            with self.subTest(error=type(error).__name__):
                failure = classify(error)
                self.assertEqual(failure.category, FailureCategory.BROKER)
                self.assertEqual(failure.hint, hint)

    def test_fallback_hint(self):
        """Test that other client errors name their type."""
        failure = classify(UnknownTopicOrPartitionError())
        self.assertEqual(failure.category, FailureCategory.BROKER)
        self.assertEqual(failure.hint, 'Error Type: UnknownTopicOrPartitionError')

    def test_broker_response_code(self):
        """Test that broker response errors report their numeric code."""
        failure = classify(SaslAuthenticationFailedError())
        self.assertIn('58', failure.code)

    def test_local_error_code(self):
        """Test that client-side errors report their class name."""
        self.assertEqual(classify(NoBrokersAvailable()).code, 'NoBrokersAvailable')

    def test_fatal_flag(self):
        """Test that fatal is the inverse of the client's retriable flag."""
        self.assertTrue(classify(KafkaError('boom')).is_fatal)
        self.assertFalse(classify(KafkaConnectionError('reset')).is_fatal)


class TestClassifyOtherErrors(unittest.TestCase):
    """Tests for the remaining failure categories."""

    def test_produce_error(self):
        """Test that a failed probe send keeps the client's details."""
        cause = KafkaTimeoutError('no ack')
        failure = classify(ProduceFailedError('checks', cause))
        self.assertEqual(failure.category, FailureCategory.PRODUCE)
        self.assertEqual(failure.code, 'KafkaTimeoutError')
        self.assertEqual(failure.is_fatal, not cause.retriable)
        self.assertIn('checks', str(failure.error))

    def test_invalid_operation(self):
        """Test state and configuration misuse reported by the client."""
        for error in [IllegalStateError('closed'), KafkaConfigurationError('bad key')]:
            with self.subTest(error=type(error).__name__):
                self.assertEqual(classify(error).category, FailureCategory.INVALID_OPERATION)

    def test_network_error(self):
        """Test socket errors with their symbolic code."""
        failure = classify(ConnectionRefusedError(errno.ECONNREFUSED, 'Connection refused'))
        self.assertEqual(failure.category, FailureCategory.NETWORK)
        self.assertEqual(failure.socket_error, 'ECONNREFUSED')
        self.assertEqual(failure.hint, HINT_NETWORK)

    def test_network_error_without_errno(self):
        """Test socket errors that carry no errno."""
        failure = classify(OSError('unreachable'))
        self.assertEqual(failure.category, FailureCategory.NETWORK)
        self.assertEqual(failure.socket_error, 'Unknown')

    def test_timeout_error(self):
        """Test that TimeoutError is not reported as a network error."""
        failure = classify(TimeoutError('timed out'))
        self.assertEqual(failure.category, FailureCategory.TIMEOUT)
        self.assertEqual(failure.hint, HINT_TIMEOUT)

    def test_authorization_errors(self):
        """Test access denied from the broker and from the OS."""
        for error in [TopicAuthorizationFailedError(), PermissionError('denied')]:
            with self.subTest(error=type(error).__name__):
                failure = classify(error)
                self.assertEqual(failure.category, FailureCategory.AUTHORIZATION)
                self.assertEqual(failure.hint, HINT_AUTHORIZATION)

    def test_every_broker_authorization_error(self):
        """Test that all broker authorization failures share one category."""
        errors = [
            ClusterAuthorizationFailedError(),
            GroupAuthorizationFailedError(),
            TransactionalIdAuthorizationFailedError(),
            DelegationTokenAuthorizationFailedError(),
        ]
        for error in errors:
            with self.subTest(error=type(error).__name__):
                failure = classify(error)
                self.assertEqual(failure.category, FailureCategory.AUTHORIZATION)
                self.assertIsNone(failure.is_fatal)
                self.assertIn(str(error.errno), failure.code)

    def test_unexpected_error(self):
        """Test that anything else is unclassified."""
        failure = classify(ZeroDivisionError('oops'))
        self.assertEqual(failure.category, FailureCategory.UNEXPECTED)
        self.assertEqual(failure.error_type, 'ZeroDivisionError')
        self.assertIsNone(failure.hint)


class TestClassifyConfigurationError(unittest.TestCase):
    """Tests for configuration stage failures."""

    def test_value_error(self):
        """Test malformed configuration values."""
        failure = classify_configuration_error(ValueError('bad broker'))
        self.assertEqual(failure.category, FailureCategory.CONFIGURATION)
        self.assertEqual(failure.reason, 'bad broker')

    def test_other_error(self):
        """Test any other exception during configuration."""
        failure = classify_configuration_error(TypeError('unexpected'))
        self.assertEqual(failure.category, FailureCategory.UNEXPECTED_CONFIGURATION)


if __name__ == '__main__':
    unittest.main()
