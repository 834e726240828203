"""
Remote collaborator for the live instance.

- RemoteCollaborator: abstract interface the restore core drives
- SshTransport: command channel to a named host over ssh
- MySqlRemote: RemoteCollaborator built on the MySQL client tools
"""

from .base import RemoteCollaborator
from .mysql import MySqlRemote
from .ssh import CommandResult, SshTransport

__all__ = [
    'RemoteCollaborator',
    'SshTransport',
    'CommandResult',
    'MySqlRemote',
]
