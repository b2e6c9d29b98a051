"""Shared click options for commands that resolve a deployment config"""

from pathlib import Path
from typing import Any, Dict

import click

from sshdeploy.constants import DEFAULT_LOG_DIR


def deployment_options(func):
    """Attach the connection, artifact and output options to a command."""
    options = [
        click.option("-c", "--config", "config_file", type=click.Path(path_type=Path), help="YAML/JSON option file"),
        click.option("--host", help="Remote host"),
        click.option("-p", "--port", type=int, help="SSH port (default 22)"),
        click.option("-u", "--username", help="SSH user"),
        click.option("--password", help="SSH password"),
        click.option("--private-key", help="Private key file path or key text"),
        click.option("--passphrase", help="Private key passphrase"),
        click.option("--from", "source", help="Local artifact path (default: build)"),
        click.option("--to", "target", help="Remote target directory"),
        click.option("--zip/--no-zip", "zip_", default=None, help="Archive before upload (default: zip)"),
        click.option("--exclude", multiple=True, help="Pattern excluded from the archive (repeatable)"),
        click.option("--before", multiple=True, help="Remote command run before upload (repeatable)"),
        click.option("--after", multiple=True, help="Remote command run after upload (repeatable)"),
        click.option("--cover/--no-cover", default=None, help="Keep old remote files (default: cover)"),
        click.option("--debug/--no-debug", default=None, help="Show command output"),
        click.option("--max-buffer", type=int, help="Max local command output in bytes"),
        click.option("--ready-timeout", type=float, help="Connection timeout in seconds"),
        click.option("--verbose", "-v", is_flag=True, help="Verbose output"),
        click.option("--json", "json_output", is_flag=True, help="Output in JSON format"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def log_file_options(func):
    """Attach the log file options (commands that write a run log)."""
    func = click.option("--no-log-file", is_flag=True, help="Do not write a log file")(func)
    func = click.option(
        "--log-dir",
        type=click.Path(path_type=Path),
        default=DEFAULT_LOG_DIR,
        show_default=True,
        help="Log file directory",
    )(func)
    return func


def collect_overrides(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Turn click parameter values into config overrides.

    Options that were not given come back as None and are ignored by the
    config merge, so option-file values survive.
    """

    def listed(values):
        return list(values) if values else None

    return {
        "host": params.get("host"),
        "port": params.get("port"),
        "username": params.get("username"),
        "password": params.get("password"),
        "private_key": params.get("private_key"),
        "passphrase": params.get("passphrase"),
        "source": params.get("source"),
        "target": params.get("target"),
        "zip": params.get("zip_"),
        "exclude": listed(params.get("exclude")),
        "before": listed(params.get("before")),
        "after": listed(params.get("after")),
        "cover": params.get("cover"),
        "debug": params.get("debug"),
        "max_buffer": params.get("max_buffer"),
        "ready_timeout": params.get("ready_timeout"),
    }
