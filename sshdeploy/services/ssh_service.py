"""SSH service for executing commands on the remote host."""

import io
import logging
import time
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import paramiko

from sshdeploy.exceptions import ConfigError, RemoteCommandError, SessionError
from sshdeploy.models.config import DeploymentConfig
from sshdeploy.models.results import SSHResult

logger = logging.getLogger(__name__)

OutputCallback = Callable[[str], None]

# Tried in order when the private key is given as PEM text
KEY_CLASSES = (paramiko.Ed25519Key, paramiko.ECDSAKey, paramiko.RSAKey)


class SessionState(Enum):
    """Lifecycle of an SSH session."""

    IDLE = "idle"
    CONNECTING = "connecting"
    READY = "ready"
    CLOSED = "closed"
    ERROR = "error"


def load_private_key(private_key: str, passphrase: Optional[str] = None) -> paramiko.PKey:
    """
    Parse a private key given as PEM/OpenSSH text.

    Args:
        private_key: Key material
        passphrase: Optional key passphrase

    Returns:
        Parsed paramiko key

    Raises:
        ConfigError: If no supported key type can parse it
    """
    for key_class in KEY_CLASSES:
        try:
            return key_class.from_private_key(io.StringIO(private_key), password=passphrase)
        except (paramiko.SSHException, ValueError):
            continue
    raise ConfigError(
        "Unsupported or unreadable private key",
        context="Supported key types: ed25519, ecdsa, rsa",
    )


def build_connect_kwargs(config: DeploymentConfig) -> Dict[str, Any]:
    """
    Build paramiko connect() arguments from the deployment config.

    Both the command session and the transfer session authenticate with
    these, each on its own transport.
    """
    kwargs: Dict[str, Any] = {
        "hostname": config.host,
        "port": config.port,
        "username": config.username,
        "timeout": config.ready_timeout,
        "banner_timeout": config.ready_timeout,
        "auth_timeout": config.ready_timeout,
        "allow_agent": False,
        "look_for_keys": False,
    }

    if config.uses_private_key:
        if "PRIVATE KEY" in config.private_key:
            kwargs["pkey"] = load_private_key(config.private_key, config.passphrase)
        else:
            kwargs["key_filename"] = str(Path(config.private_key).expanduser())
            if config.passphrase:
                kwargs["passphrase"] = config.passphrase
    else:
        kwargs["password"] = config.password

    return kwargs


def open_client(
    config: DeploymentConfig,
    client_factory: Callable[[], paramiko.SSHClient] = paramiko.SSHClient,
) -> paramiko.SSHClient:
    """
    Open an authenticated SSH client.

    Raises:
        ConfigError: If the private key text cannot be parsed
        SessionError: On connection or authentication failure
    """
    connect_kwargs = build_connect_kwargs(config)
    client = client_factory()
    client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

    try:
        client.connect(**connect_kwargs)
    except (paramiko.SSHException, OSError) as e:
        client.close()
        raise SessionError(config.host, e) from e

    return client


class SSHSession:
    """Persistent SSH session used to run shell commands."""

    def __init__(
        self,
        config: DeploymentConfig,
        client_factory: Callable[[], paramiko.SSHClient] = paramiko.SSHClient,
    ):
        """
        Initialize SSH session.

        Args:
            config: Resolved deployment configuration
            client_factory: Builds the underlying paramiko client
        """
        self.config = config
        self.client_factory = client_factory
        self.client: Optional[paramiko.SSHClient] = None
        self.state = SessionState.IDLE

    @property
    def host(self) -> str:
        return self.config.host

    @property
    def is_ready(self) -> bool:
        return self.state == SessionState.READY

    def connect(self) -> None:
        """
        Connect and authenticate, bounded by ready_timeout.

        Raises:
            SessionError: On connection or authentication failure
        """
        self.state = SessionState.CONNECTING
        logger.info("Connecting to %s@%s:%s", self.config.username, self.host, self.config.port)

        try:
            self.client = open_client(self.config, self.client_factory)
        except (ConfigError, SessionError):
            self.state = SessionState.ERROR
            raise

        self.state = SessionState.READY
        logger.info("Connected to %s", self.host)

    def execute(
        self,
        command: str,
        on_output: Optional[OutputCallback] = None,
        check: bool = True,
    ) -> SSHResult:
        """
        Execute a command, streaming combined stdout/stderr line by line.

        Args:
            command: Shell command to run remotely
            on_output: Called with each output line as it arrives
            check: Raise RemoteCommandError on nonzero or missing exit status

        Returns:
            SSHResult with exit status and collected output

        Raises:
            SessionError: If the session is not ready or breaks mid-command
            RemoteCommandError: If check is set and the command fails
        """
        if not self.is_ready:
            raise SessionError(
                self.host, RuntimeError(f"session is {self.state.value}, not ready")
            )

        start_time = time.time()
        lines: List[str] = []

        try:
            transport = self.client.get_transport()
            if transport is None or not transport.is_active():
                raise paramiko.SSHException("transport is not active")

            channel = transport.open_session()
            try:
                # Must be set before exec so early stderr is not left unread
                channel.set_combine_stderr(True)
                channel.exec_command(command)
                channel.shutdown_write()

                for line in channel.makefile("r"):
                    line = line.rstrip("\r\n")
                    lines.append(line)
                    if on_output:
                        on_output(line)

                # -1 when the server closed the channel without an exit status
                exit_status = channel.recv_exit_status()
            finally:
                channel.close()
        except (paramiko.SSHException, OSError, EOFError) as e:
            self.state = SessionState.ERROR
            raise SessionError(self.host, e) from e

        result = SSHResult(
            returncode=exit_status,
            stdout="\n".join(lines),
            host=self.host,
            command=command,
            duration_seconds=time.time() - start_time,
        )

        if check and result.is_failure:
            raise RemoteCommandError(command, exit_status, result.stdout)

        return result

    def close(self) -> None:
        """Close the session. Safe to call more than once."""
        if self.client is not None:
            self.client.close()
            self.client = None
        self.state = SessionState.CLOSED
        logger.info("Closed connection to %s", self.host)

    def __repr__(self) -> str:
        return f"SSHSession(host={self.host}, state={self.state.value})"
