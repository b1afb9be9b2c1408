"""
Blacklist domain entity.

A single global deny-list of identities, addresses and hardware ids.
Membership vetoes validation regardless of license state.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Optional, Tuple

from core.domain.exceptions import BlacklistEntryNotFoundError, DuplicateBlacklistEntryError


class BlacklistEntryType(Enum):
    """Kind of value a blacklist entry holds."""

    IP = "ip"
    HWID = "hwid"
    DISCORD_ID = "discordId"

    def __str__(self) -> str:
        return self.value


def _merge(current: Tuple[str, ...], extra: Iterable[str]) -> Tuple[str, ...]:
    merged = list(current)
    for value in extra:
        if value not in merged:
            merged.append(value)
    return tuple(merged)


@dataclass(frozen=True)
class Blacklist:
    """
    Blacklist domain entity.

    Immutable; mutators return a new instance.
    """

    ips: Tuple[str, ...] = field(default_factory=tuple)
    hwids: Tuple[str, ...] = field(default_factory=tuple)
    discord_ids: Tuple[str, ...] = field(default_factory=tuple)

    def entries(self, entry_type: BlacklistEntryType) -> Tuple[str, ...]:
        if entry_type == BlacklistEntryType.IP:
            return self.ips
        if entry_type == BlacklistEntryType.HWID:
            return self.hwids
        return self.discord_ids

    def is_blacklisted(self, identity: Optional[str]) -> bool:
        """True if ``identity`` is on the identity deny-list."""
        return bool(identity) and identity in self.discord_ids

    def blocks(
        self,
        identities: Iterable[Optional[str]] = (),
        ip: Optional[str] = None,
        hwid: Optional[str] = None,
    ) -> bool:
        """
        Check a validation request against every deny-list.

        Args:
            identities: Identities to check (requester and license owner)
            ip: Requesting address
            hwid: Requesting hardware id

        Returns:
            True if any supplied value is blacklisted
        """
        if any(self.is_blacklisted(identity) for identity in identities):
            return True
        if ip and ip in self.ips:
            return True
        return bool(hwid) and hwid in self.hwids

    def add(self, entry_type: BlacklistEntryType, value: str) -> "Blacklist":
        """
        Add a single entry.

        Raises:
            DuplicateBlacklistEntryError: If the value is already listed
        """
        if value in self.entries(entry_type):
            raise DuplicateBlacklistEntryError()
        return self._with(entry_type, self.entries(entry_type) + (value,))

    def remove(self, entry_type: BlacklistEntryType, value: str) -> "Blacklist":
        """
        Remove a single entry.

        Raises:
            BlacklistEntryNotFoundError: If the value is not listed
        """
        current = self.entries(entry_type)
        if value not in current:
            raise BlacklistEntryNotFoundError()
        return self._with(entry_type, tuple(v for v in current if v != value))

    def with_identifiers(self, ips: Iterable[str], hwids: Iterable[str]) -> "Blacklist":
        """Add addresses and hardware ids, skipping ones already listed."""
        return replace(self, ips=_merge(self.ips, ips), hwids=_merge(self.hwids, hwids))

    def without_identifiers(self, ips: Iterable[str], hwids: Iterable[str]) -> "Blacklist":
        """Remove addresses and hardware ids (absent values are ignored)."""
        drop_ips, drop_hwids = set(ips), set(hwids)
        return replace(
            self,
            ips=tuple(v for v in self.ips if v not in drop_ips),
            hwids=tuple(v for v in self.hwids if v not in drop_hwids),
        )

    def _with(self, entry_type: BlacklistEntryType, values: Tuple[str, ...]) -> "Blacklist":
        if entry_type == BlacklistEntryType.IP:
            return replace(self, ips=values)
        if entry_type == BlacklistEntryType.HWID:
            return replace(self, hwids=values)
        return replace(self, discord_ids=values)
