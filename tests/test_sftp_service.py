"""Tests for the SFTP transfer session (paramiko client mocked)."""

import errno
from unittest.mock import MagicMock, call

import paramiko
import pytest

from sshdeploy.exceptions import SessionError
from sshdeploy.services.sftp_service import TransferSession


class FakeSFTP:
    """Minimal in-memory SFTP server: tracks directories and puts."""

    def __init__(self, existing=("/",)):
        self.dirs = set(existing)
        self.puts = []
        self.closed = False

    def stat(self, path):
        if path not in self.dirs:
            raise IOError(errno.ENOENT, "No such file")
        return MagicMock()

    def mkdir(self, path):
        self.dirs.add(path)

    def put(self, local, remote):
        self.puts.append((local, remote))

    def close(self):
        self.closed = True


@pytest.fixture
def sftp():
    return FakeSFTP()


@pytest.fixture
def client(sftp):
    client = MagicMock(spec=paramiko.SSHClient)
    client.open_sftp.return_value = sftp
    return client


class TestTransferSession:
    def test_opens_its_own_authenticated_client(self, make_config, client):
        with TransferSession(make_config(), client_factory=lambda: client):
            pass

        client.connect.assert_called_once()
        assert client.connect.call_args.kwargs["password"] == "p"
        client.open_sftp.assert_called_once()

    def test_closed_on_success(self, make_config, client, sftp):
        with TransferSession(make_config(), client_factory=lambda: client) as transfer:
            transfer.upload("a.txt", "/srv/a.txt")

        assert sftp.closed
        client.close.assert_called_once()

    def test_closed_on_failure(self, make_config, client, sftp):
        with pytest.raises(OSError):
            with TransferSession(make_config(), client_factory=lambda: client) as transfer:
                raise OSError("broken pipe")

        assert sftp.closed
        client.close.assert_called_once()

    def test_connect_failure(self, make_config, client):
        client.connect.side_effect = paramiko.AuthenticationException("denied")

        with pytest.raises(SessionError):
            with TransferSession(make_config(), client_factory=lambda: client):
                pass

        client.open_sftp.assert_not_called()
        client.close.assert_called_once()

    def test_sftp_subsystem_failure_closes_client(self, make_config, client):
        client.open_sftp.side_effect = paramiko.SSHException("subsystem refused")

        with pytest.raises(paramiko.SSHException):
            with TransferSession(make_config(), client_factory=lambda: client):
                pass

        client.close.assert_called_once()

    def test_upload_single_file(self, make_config, client, sftp):
        with TransferSession(make_config(), client_factory=lambda: client) as transfer:
            remote = transfer.upload("dist/app.tgz", "/srv/app.tgz")

        assert remote == "/srv/app.tgz"
        assert sftp.puts == [("dist/app.tgz", "/srv/app.tgz")]

    def test_upload_tree_preserves_structure(self, make_config, client, sftp, artifact_dir):
        with TransferSession(make_config(), client_factory=lambda: client) as transfer:
            uploaded = transfer.upload_tree(artifact_dir, "/var/www/app")

        assert sorted(uploaded) == ["/var/www/app/assets/app.js", "/var/www/app/index.html"]
        assert {"/var", "/var/www", "/var/www/app", "/var/www/app/assets"} <= sftp.dirs
        assert (str(artifact_dir / "assets" / "app.js"), "/var/www/app/assets/app.js") in sftp.puts

    def test_existing_remote_dirs_not_recreated(self, make_config, client, artifact_dir):
        sftp = MagicMock()
        client.open_sftp.return_value = sftp

        with TransferSession(make_config(), client_factory=lambda: client) as transfer:
            transfer.upload_tree(artifact_dir, "/var/www/app")

        sftp.mkdir.assert_not_called()
        assert call("/var/www/app") in sftp.stat.call_args_list

    def test_permission_error_on_stat_propagates(self, make_config, client, sftp):
        sftp.stat = MagicMock(side_effect=IOError(errno.EACCES, "Permission denied"))

        with TransferSession(make_config(), client_factory=lambda: client) as transfer:
            with pytest.raises(IOError):
                transfer.ensure_remote_dir("/root/secret")
