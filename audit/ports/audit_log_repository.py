"""
Audit log repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import List

from audit.domain.entries import AuditEvent, CommandUsage, ValidationLog


class AuditLogRepository(ABC):
    """
    Abstract append-only store for audit entries.

    Lists are returned oldest first. Implementations drop the oldest
    entries once a log grows past its retention limit.
    """

    @abstractmethod
    async def append_validation(self, entry: ValidationLog) -> ValidationLog:
        pass

    @abstractmethod
    async def list_validations(self) -> List[ValidationLog]:
        pass

    @abstractmethod
    async def append_event(self, entry: AuditEvent) -> AuditEvent:
        pass

    @abstractmethod
    async def list_events(self) -> List[AuditEvent]:
        pass

    @abstractmethod
    async def append_command_usage(self, entry: CommandUsage) -> CommandUsage:
        pass

    @abstractmethod
    async def list_command_usage(self) -> List[CommandUsage]:
        pass
