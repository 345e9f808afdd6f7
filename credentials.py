"""Credential acquisition from command-line flags or interactive prompts."""
import argparse
import getpass
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)

USAGE = """Usage: kafka-check --broker <url> --username <user> --password <pass>

Required Arguments:
  --broker, -b <url>       Kafka bootstrap servers (e.g., broker.example.com:9092)
  --username, -u <user>    SASL username
  --password, -p <pass>    SASL password

Options:
  --topic, -t <name>       Send one probe message to this topic after connecting
  --verbose, -v            Enable debug logging
  --help, -h               Show this help message

Example:
  kafka-check --broker pkc-abc.us-east-1.aws.confluent.cloud:9092 --username myuser --password mypass"""

# (field, label, flag) in the order they are validated
FIELDS = (
    ('broker', 'Bootstrap Servers', '--broker'),
    ('username', 'Username', '--username'),
    ('password', 'Password', '--password'),
)

# (field, long flag, short flag) for options that take a value
VALUE_FLAGS = (
    ('broker', '--broker', '-b'),
    ('username', '--username', '-u'),
    ('password', '--password', '-p'),
    ('topic', '--topic', '-t'),
)

_VALUE_FLAG_NAMES = {name for _field, long_name, short_name in VALUE_FLAGS
                     for name in (long_name, short_name)}


class MissingCredentialError(ValueError):
    """A required credential was not supplied."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


@dataclass(frozen=True)
class Credentials:
    broker: str
    username: str
    password: str


@dataclass(frozen=True)
class CliArguments:
    broker: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    topic: Optional[str] = None
    verbose: bool = False
    show_help: bool = False


def _build_parser() -> argparse.ArgumentParser:
    # Only switches go through argparse; values are taken by position so they may start with '-'
    parser = argparse.ArgumentParser(prog='kafka-check', add_help=False, allow_abbrev=False)
    parser.add_argument('--verbose', '-v', action='store_true')
    parser.add_argument('--help', '-h', action='store_true', dest='show_help')
    return parser


def get_argument(argv: List[str], long_name: str, short_name: str) -> Optional[str]:
    """
    Get the value of the first occurrence of a flag.

    The token after the flag is the value, whatever it looks like.
    "--flag=value" is accepted too. Flag names are case-insensitive.

    Args:
        argv: Arguments without the program name
        long_name: Long flag name, e.g. "--broker"
        short_name: Short flag name, e.g. "-b"

    Returns:
        The value, or None if the flag is absent or has no value
    """
    for i, token in enumerate(argv):
        name, sep, value = token.partition('=')
        if name.lower() not in (long_name, short_name):
            continue
        if sep:
            return value
        if i + 1 < len(argv):
            return argv[i + 1]
    return None


def _switch_tokens(argv: List[str]) -> List[str]:
    """Drop value flags and their values, lower-casing what is left."""
    tokens = []
    skip_next = False
    for token in argv:
        if skip_next:
            skip_next = False
            continue
        if token.lower() in _VALUE_FLAG_NAMES:
            skip_next = True
            continue
        tokens.append(token.lower() if token.startswith('-') else token)
    return tokens


def parse_arguments(argv: Sequence[str]) -> CliArguments:
    """
    Parse command-line arguments.

    Flag names are case-insensitive, the first occurrence of a flag wins
    and unknown tokens are ignored. An empty argument list is treated as
    a help request.

    Args:
        argv: Arguments without the program name

    Returns:
        Parsed CliArguments
    """
    argv = list(argv)
    if not argv:
        return CliArguments(show_help=True)

    values = {field: get_argument(argv, long_name, short_name)
              for field, long_name, short_name in VALUE_FLAGS}
    namespace, unknown = _build_parser().parse_known_args(_switch_tokens(argv))
    if unknown:
        logger.debug(f"Ignoring unrecognised arguments: {len(unknown)} token(s)")
    return CliArguments(
        verbose=namespace.verbose,
        show_help=namespace.show_help,
        **values,
    )


def resolve_credentials(args: CliArguments) -> Credentials:
    """
    Validate the credentials given on the command line.

    Only the flags count; nothing is taken from the environment.

    Args:
        args: Parsed command-line arguments

    Returns:
        Credentials with all three values present

    Raises:
        MissingCredentialError: For the first field that is missing or blank
    """
    values = {}
    for field, label, flag in FIELDS:
        value = getattr(args, field)
        if value is None or not value.strip():
            raise MissingCredentialError(field, f"{label} ({flag}) is required.")
        values[field] = value.strip()
    return Credentials(**values)


def prompt_credentials(input_func: Callable[[str], str] = input,
                       password_func: Callable[[str], str] = getpass.getpass) -> Credentials:
    """
    Read credentials from standard input.

    The password is read without echo.

    Args:
        input_func: Function used for visible prompts
        password_func: Function used for the password prompt

    Returns:
        Credentials with all three values present

    Raises:
        MissingCredentialError: As soon as a blank value is entered
    """
    values = {}
    for field, label, _flag in FIELDS:
        reader = password_func if field == 'password' else input_func
        try:
            value = reader(f"{label}: ")
        except EOFError:
            value = ''
        if not value or not value.strip():
            raise MissingCredentialError(field, f"{label} cannot be empty.")
        values[field] = value.strip()
    return Credentials(**values)

