"""
LogCommandUsageCommand.
"""
from dataclasses import dataclass


@dataclass
class LogCommandUsageCommand:
    """Command to record a chat-bot command invocation."""

    command: str
    user_id: str
