"""
Unit tests for bot command usage logging.
"""
import pytest

from audit.application.commands.log_command_usage import LogCommandUsageCommand
from audit.application.handlers.log_command_usage_handler import LogCommandUsageHandler
from audit.domain.events import BotCommandUsed
from core.domain.events import EventHandler
from core.domain.exceptions import InvalidInputError
from core.infrastructure.events import event_bus


class RecordingHandler(EventHandler):
    def __init__(self):
        self.events = []

    async def handle(self, event):
        self.events.append(event)


@pytest.mark.asyncio
class TestLogCommandUsageHandler:
    """Tests for LogCommandUsageHandler."""

    async def test_logs_and_publishes(self, audit_log_repository):
        """Test an invocation is stored and announced."""
        recorder = RecordingHandler()
        event_bus.subscribe(BotCommandUsed, recorder)

        entry = await LogCommandUsageHandler(audit_log_repository).handle(
            LogCommandUsageCommand(command="license", user_id="42")
        )

        stored = await audit_log_repository.list_command_usage()
        assert [(e.command, e.user_id) for e in stored] == [("license", "42")]
        assert entry.timestamp is not None
        assert len(recorder.events) == 1
        assert recorder.events[0].payload() == {"command": "license", "userId": "42"}
        assert recorder.events[0].category == "bot_commands"

    @pytest.mark.parametrize("command, user_id", [("", "42"), ("license", "")])
    async def test_missing_fields(self, audit_log_repository, command, user_id):
        """Test both fields are required."""
        with pytest.raises(InvalidInputError):
            await LogCommandUsageHandler(audit_log_repository).handle(
                LogCommandUsageCommand(command=command, user_id=user_id)
            )
        assert await audit_log_repository.list_command_usage() == []

    async def test_retention_keeps_newest(self, audit_log_repository, settings):
        """Test the log is trimmed to the configured size, oldest first."""
        settings.COMMAND_LOG_RETENTION = 3
        handler = LogCommandUsageHandler(audit_log_repository)

        for n in range(5):
            await handler.handle(LogCommandUsageCommand(command=f"cmd-{n}", user_id="42"))

        stored = await audit_log_repository.list_command_usage()
        assert [e.command for e in stored] == ["cmd-2", "cmd-3", "cmd-4"]
