"""
Blacklist repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import Callable

from blacklist.domain.blacklist import Blacklist


class BlacklistRepository(ABC):
    """
    Abstract repository for the global Blacklist.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def get(self) -> Blacklist:
        """
        Return the current blacklist (empty if none was ever stored).
        """
        pass

    @abstractmethod
    async def update(self, mutator: Callable[[Blacklist], Blacklist]) -> Blacklist:
        """
        Atomically replace the blacklist with ``mutator(current)``.

        If the mutator raises, nothing is written.

        Returns:
            The stored blacklist
        """
        pass
