"""
Audit domain events.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


class BotCommandUsed(DomainEvent):
    """Event raised when the chat bot reports a command invocation."""

    category = "bot_commands"

    def __init__(self, command: str, user_id: str, occurred_at: Optional[datetime] = None):
        super().__init__(aggregate_id=user_id, occurred_at=occurred_at)
        self.command = command
        self.user_id = user_id

    def payload(self) -> Dict[str, Any]:
        return {"command": self.command, "userId": self.user_id}
