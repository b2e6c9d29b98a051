"""sshdeploy - deploy a local build artifact to a remote host over SSH/SFTP."""

__version__ = "1.0.0"
