"""Rental data store with per-rental locking and optimistic versioning."""

from __future__ import annotations

import copy
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from site_rental.exceptions import (
    ConcurrentModificationError,
    EntityNotFoundError,
    InvalidEntityStateError,
    RentalNotFoundError,
)
from site_rental.models.rental import Rental, RentalStatus, Site

RentalUpdate = Callable[[Rental], "Rental | None"]


@dataclass
class RentalStore:
    """In-memory store for sites and rentals shared by concurrent callers.

    Every read hands out a deep copy, and every write replaces the stored
    rental as a whole under that rental's own lock. Writes to different
    rentals never wait on each other; readers never take rental locks.
    """

    # Catalog (collaborator data, may lose entries)
    sites: dict[str, Site] = field(default_factory=dict)

    _rentals: dict[str, Rental] = field(default_factory=dict)
    _locks: dict[str, threading.Lock] = field(default_factory=dict)

    # Relationship indexes
    _client_rentals: dict[str, list[str]] = field(default_factory=dict)
    _site_rentals: dict[str, list[str]] = field(default_factory=dict)

    # Guards the maps above, never held while a rental is being written
    _registry_lock: threading.Lock = field(default_factory=threading.Lock)

    def add_site(self, site: Site) -> None:
        """Add a site to the catalog."""
        if site.created_at is None:
            site.created_at = datetime.now()
        with self._registry_lock:
            self.sites[site.site_id] = site
            self._site_rentals.setdefault(site.site_id, [])

    def remove_site(self, site_id: str) -> Site:
        """Delete a site from the catalog; its rentals stay in the store."""
        with self._registry_lock:
            site = self.sites.pop(site_id, None)
        if site is None:
            raise EntityNotFoundError(f"Site {site_id} not found")
        return site

    def get_site(self, site_id: str) -> Site | None:
        """Return the site, or None if it was removed."""
        return self.sites.get(site_id)

    def add_rental(self, rental: Rental) -> Rental:
        """Add a new rental to the store."""
        if rental.created_at is None:
            rental.created_at = datetime.now()

        with self._registry_lock:
            if rental.rental_id in self._rentals:
                raise InvalidEntityStateError(f"Rental {rental.rental_id} already exists")
            self._rentals[rental.rental_id] = copy.deepcopy(rental)
            self._locks[rental.rental_id] = threading.Lock()
            self._site_rentals.setdefault(rental.site_id, []).append(rental.rental_id)
            if rental.client_id:
                self._client_rentals.setdefault(rental.client_id, []).append(rental.rental_id)

        return copy.deepcopy(rental)

    def get(self, rental_id: str) -> Rental:
        """Return a snapshot of a rental."""
        try:
            return copy.deepcopy(self._rentals[rental_id])
        except KeyError:
            raise RentalNotFoundError(f"Rental {rental_id} not found") from None

    def __contains__(self, rental_id: object) -> bool:
        return rental_id in self._rentals

    def __len__(self) -> int:
        return len(self._rentals)

    def _lock_for(self, rental_id: str) -> threading.Lock:
        try:
            return self._locks[rental_id]
        except KeyError:
            raise RentalNotFoundError(f"Rental {rental_id} not found") from None

    def _write(self, current: Rental, new: Rental) -> Rental:
        """Replace ``current`` with ``new``; caller holds the rental lock."""
        stored = copy.deepcopy(new)
        stored.version = current.version + 1
        stored.updated_at = datetime.now()
        self._rentals[current.rental_id] = stored
        return copy.deepcopy(stored)

    def commit(self, rental: Rental, expected_version: int | None = None) -> Rental:
        """Store a modified snapshot if nobody else wrote since it was read.

        Parameters
        ----------
        rental : Rental
            Modified snapshot.
        expected_version : int | None
            Version the snapshot was derived from (default: ``rental.version``).

        Returns
        -------
        Rental
            The committed snapshot with its new version.

        Raises
        ------
        ConcurrentModificationError
            If the stored version moved on.
        """
        expected = rental.version if expected_version is None else expected_version
        with self._lock_for(rental.rental_id):
            current = self._rentals[rental.rental_id]
            if current.version != expected:
                raise ConcurrentModificationError(rental.rental_id, expected, current.version)
            return self._write(current, rental)

    def update(
        self,
        rental_id: str,
        apply: RentalUpdate,
        expected_version: int | None = None,
    ) -> Rental | None:
        """Read-modify-write a rental while holding its lock.

        ``apply`` receives a snapshot and returns the new rental, the same
        snapshot to signal "no change", or None to skip. Exceptions raised by
        ``apply`` leave the stored rental untouched.

        Returns
        -------
        Rental | None
            The stored state after the call, or None if ``apply`` skipped.
        """
        with self._lock_for(rental_id):
            current = self._rentals[rental_id]
            if expected_version is not None and current.version != expected_version:
                raise ConcurrentModificationError(rental_id, expected_version, current.version)

            snapshot = copy.deepcopy(current)
            result = apply(snapshot)
            if result is None:
                return None
            if result is snapshot:
                return copy.deepcopy(current)
            return self._write(current, result)

    # Query methods
    def rental_ids(self) -> list[str]:
        """Ids of all rentals, in insertion order."""
        with self._registry_lock:
            return list(self._rentals)

    def snapshot(self) -> list[Rental]:
        """Copies of all rentals for read-only aggregation."""
        with self._registry_lock:
            current = list(self._rentals.values())
        return [copy.deepcopy(r) for r in current]

    def get_client_rentals(self, client_id: str) -> list[Rental]:
        """Get all rentals for a client account."""
        rental_ids = self._client_rentals.get(client_id, [])
        return [self.get(rid) for rid in list(rental_ids)]

    def get_site_rentals(self, site_id: str) -> list[Rental]:
        """Get all rentals of a site, including after the site was removed."""
        rental_ids = self._site_rentals.get(site_id, [])
        return [self.get(rid) for rid in list(rental_ids)]

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        rentals = list(self._rentals.values())
        counts = {
            "sites": len(self.sites),
            "rentals": len(rentals),
            "payments": sum(len(r.payments) for r in rentals),
        }
        for status in RentalStatus:
            counts[status.value] = sum(1 for r in rentals if r.status == status)
        return counts
