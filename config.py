"""Configuration module for loading environment variables and building the client config."""
import os
import re
from dataclasses import dataclass
from typing import Dict, Any, List, Tuple
from dotenv import load_dotenv

# Load .env file (don't override existing env vars)
load_dotenv(override=False)

# Load secrets.env if it exists (for runtime secrets)
# Try the module directory first, then the current directory
secrets_paths = [
    os.path.join(os.path.dirname(__file__), 'secrets.env'),
    'secrets.env'
]
for secrets_path in secrets_paths:
    if os.path.exists(secrets_path):
        load_dotenv(secrets_path, override=False)
        break

SECURITY_PROTOCOL = 'SASL_SSL'
SASL_MECHANISM = 'PLAIN'
ACKS = 'all'
ENABLE_IDEMPOTENCE = True
COMPRESSION_TYPE = 'snappy'

_HOST_PORT_RE = re.compile(r'^(?:\[(?P<ipv6>[0-9A-Fa-f:.]+)\]|(?P<host>[^:\[\]\s]+))(?::(?P<port>\d+))?$')


class KafkaConfig:
    """Settings for the connectivity check that come from the environment."""
    METADATA_TIMEOUT = float(os.getenv('KAFKA_METADATA_TIMEOUT', '10'))
    FLUSH_TIMEOUT = float(os.getenv('KAFKA_FLUSH_TIMEOUT', '5'))
    PROBE_TIMEOUT = float(os.getenv('KAFKA_PROBE_TIMEOUT', '10'))
    SSL_CAFILE = os.getenv('KAFKA_SSL_CAFILE', '')
    CLIENT_ID = os.getenv('KAFKA_CLIENT_ID', 'kafka-check')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')


@dataclass(frozen=True)
class ConnectionConfig:
    """Kafka connection configuration for a single check run."""
    bootstrap_servers: Tuple[str, ...]
    username: str
    password: str
    security_protocol: str = SECURITY_PROTOCOL
    sasl_mechanism: str = SASL_MECHANISM
    acks: str = ACKS
    enable_idempotence: bool = ENABLE_IDEMPOTENCE
    compression_type: str = COMPRESSION_TYPE
    ssl_cafile: str = ''
    client_id: str = 'kafka-check'

    def _connection_configs(self) -> Dict[str, Any]:
        config = {
            'bootstrap_servers': list(self.bootstrap_servers),
            'client_id': self.client_id,
            'security_protocol': self.security_protocol,
            'sasl_mechanism': self.sasl_mechanism,
            'sasl_plain_username': self.username,
            'sasl_plain_password': self.password,
        }
        if self.ssl_cafile:
            config['ssl_cafile'] = self.ssl_cafile
        return config

    def producer_configs(self) -> Dict[str, Any]:
        """Get keyword arguments for KafkaProducer."""
        return {
            **self._connection_configs(),
            'acks': self.acks,
            'enable_idempotence': self.enable_idempotence,
            'compression_type': self.compression_type,
        }

    def admin_configs(self, request_timeout_ms: int) -> Dict[str, Any]:
        """
        Get keyword arguments for KafkaAdminClient.

        KafkaAdminClient rejects producer-only settings, so only the
        connection settings are shared with the producer.
        """
        return {
            **self._connection_configs(),
            'request_timeout_ms': request_timeout_ms,
        }

    def describe(self) -> List[Tuple[str, str]]:
        """Get (label, value) pairs for display. The password is masked."""
        lines = [
            ('Bootstrap Servers', ','.join(self.bootstrap_servers)),
            ('Security Protocol', self.security_protocol),
            ('SASL Mechanism', self.sasl_mechanism),
            ('Username', self.username),
            ('Password', '***' if self.password else 'None'),
            ('Acks', self.acks),
            ('Enable Idempotence', str(self.enable_idempotence)),
            ('Compression Type', self.compression_type),
        ]
        if self.ssl_cafile:
            lines.append(('SSL CA File', self.ssl_cafile))
        return lines


def parse_bootstrap_servers(value: str) -> Tuple[str, ...]:
    """
    Split and validate a comma-separated bootstrap servers string.

    Args:
        value: Broker list such as "broker1:9092,broker2:9092"

    Returns:
        Tuple of entries; a bare host uses the client's default port 9092

    Raises:
        ValueError: If the list is empty or an entry is not host or host:port
    """
    servers = tuple(part.strip() for part in value.split(',') if part.strip())
    if not servers:
        raise ValueError("Bootstrap servers must contain at least one host")

    for server in servers:
        match = _HOST_PORT_RE.match(server)
        if not match:
            raise ValueError(f"Invalid bootstrap server '{server}': expected host or host:port")
        if match.group('port') is None:
            continue
        port = int(match.group('port'))
        if not 0 < port < 65536:
            raise ValueError(f"Invalid port {port} in bootstrap server '{server}'")
    return servers


def build_connection_config(broker: str, username: str, password: str) -> ConnectionConfig:
    """
    Build the connection configuration from validated credentials.

    Args:
        broker: Bootstrap servers string
        username: SASL username
        password: SASL password

    Returns:
        Immutable ConnectionConfig with the fixed SASL_SSL/PLAIN policy

    Raises:
        ValueError: If a configuration value is malformed
    """
    return ConnectionConfig(
        bootstrap_servers=parse_bootstrap_servers(broker),
        username=username,
        password=password,
        ssl_cafile=KafkaConfig.SSL_CAFILE,
        client_id=KafkaConfig.CLIENT_ID,
    )
