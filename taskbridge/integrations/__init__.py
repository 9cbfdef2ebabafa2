from .monday import MondayClient
from .slack import SlackDirectory, DirectoryUser

__all__ = [
    "MondayClient",
    "SlackDirectory",
    "DirectoryUser",
]
