"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from licenses.domain.license import License

LicenseMutator = Callable[[License], License]


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    Every write goes through add(), update() or delete(), each of which
    is atomic with respect to the whole license collection.
    """

    @abstractmethod
    async def list_all(self) -> List[License]:
        """
        Return every license, newest first.

        Returns:
            List of License entities
        """
        pass

    @abstractmethod
    async def find_by_key(self, key: str) -> Optional[License]:
        """
        Find a license by its key.

        Args:
            key: License key

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_owner(self, discord_id: str) -> List[License]:
        """
        Find all licenses owned by an identity.

        Args:
            discord_id: Owner identity

        Returns:
            List of License entities
        """
        pass

    @abstractmethod
    async def add(self, license: License) -> License:
        """
        Insert a new license at the front of the collection.

        Args:
            license: License entity to add

        Returns:
            Added license entity

        Raises:
            DuplicateLicenseKeyError: If the key already exists
        """
        pass

    @abstractmethod
    async def update(self, key: str, mutator: LicenseMutator) -> License:
        """
        Atomically replace a license with ``mutator(current)``.

        The mutator runs while the collection is locked. If it raises,
        nothing is written and the exception propagates.

        Args:
            key: License key
            mutator: Function from the current entity to the new one

        Returns:
            Updated license entity

        Raises:
            LicenseNotFoundError: If the key is absent
        """
        pass

    @abstractmethod
    async def update_many(
        self, predicate: Callable[[License], bool], mutator: LicenseMutator
    ) -> List[License]:
        """
        Atomically apply ``mutator`` to every license matching ``predicate``.

        Returns:
            Updated license entities
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> License:
        """
        Remove a license.

        Args:
            key: License key

        Returns:
            The removed license entity

        Raises:
            LicenseNotFoundError: If the key is absent
        """
        pass
