"""
LogCommandUsageHandler.
"""
from audit.application.commands.log_command_usage import LogCommandUsageCommand
from audit.domain.entries import CommandUsage
from audit.domain.events import BotCommandUsed
from audit.ports.audit_log_repository import AuditLogRepository
from core.domain.exceptions import InvalidInputError
from core.infrastructure.events import event_bus


class LogCommandUsageHandler:
    """Handler for LogCommandUsageCommand."""

    def __init__(self, audit_log_repository: AuditLogRepository):
        """Initialize handler with repository."""
        self.audit_log_repository = audit_log_repository

    async def handle(self, command: LogCommandUsageCommand) -> CommandUsage:
        """
        Append a command usage entry.

        Raises:
            InvalidInputError: If command or user id is missing
        """
        if not command.command or not command.user_id:
            raise InvalidInputError("Missing command or userId")

        entry = await self.audit_log_repository.append_command_usage(
            CommandUsage(command=command.command, user_id=command.user_id)
        )
        await event_bus.publish(BotCommandUsed(command=entry.command, user_id=entry.user_id))
        return entry
