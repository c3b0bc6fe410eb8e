"""Domain store: the ordered domain collection plus the selected-domain reference.

This module provides:
- Loading persisted domains, falling back to the default set
- Adding, editing, removing and selecting domains
- Folding committed session seconds into a domain's total

Every mutation is written through to the key-value store before returning.
The persisted state is loaded on first access if `load` was not called.
"""

import threading
from typing import List, Optional
from uuid import UUID

from ..domain.models import Domain, DEFAULT_ICON, default_domains
from ..repositories.interfaces import KeyValueStore
from ..utils.logging_config import get_logger
from .codec import (
    DOMAINS_KEY,
    SELECTED_DOMAIN_KEY,
    DomainCodecError,
    decode_domains,
    decode_selection,
    encode_domains,
    encode_selection,
)

logger = get_logger("store")


def _clean_name(name: str) -> Optional[str]:
    cleaned = (name or "").strip()
    return cleaned or None


class DomainStore:
    """Owns the domains and the current selection; mediates all persistence."""

    def __init__(
        self,
        storage: KeyValueStore,
        domains_key: str = DOMAINS_KEY,
        selected_domain_key: str = SELECTED_DOMAIN_KEY,
        default_icon: str = DEFAULT_ICON,
    ):
        self._storage = storage
        self._domains_key = domains_key
        self._selected_domain_key = selected_domain_key
        self._default_icon = default_icon

        self._domains: List[Domain] = []
        self._selected_id: Optional[UUID] = None
        self._loaded = False
        # Serializes mutations so persistence order matches mutation order
        self._lock = threading.RLock()

    @property
    def domains(self) -> List[Domain]:
        """Copies of the domains in insertion order."""
        with self._lock:
            self._ensure_loaded()
            return [domain.model_copy() for domain in self._domains]

    @property
    def selected_domain_id(self) -> Optional[UUID]:
        with self._lock:
            self._ensure_loaded()
            return self._selected_id

    @property
    def selected_domain(self) -> Optional[Domain]:
        with self._lock:
            self._ensure_loaded()
            if self._selected_id is None:
                return None
            return self.get_domain(self._selected_id)

    def get_domain(self, domain_id: UUID) -> Optional[Domain]:
        """Copy of the domain with ``domain_id``, or None."""
        with self._lock:
            self._ensure_loaded()
            index = self._index_of(domain_id)
            return self._domains[index].model_copy() if index is not None else None

    def load(self) -> List[Domain]:
        """
        Load domains and the selection from storage.

        A missing, empty or undecodable collection is replaced by the default
        domains, which are persisted immediately. The stored selection is kept
        only if it names a loaded domain; otherwise the first domain becomes
        the selection.

        Returns:
            The loaded domains in order
        """
        with self._lock:
            self._read_state()
            return self.domains

    def add_domain(self, name: str) -> Optional[Domain]:
        """
        Append a new domain with zero seconds and the default icon.

        Args:
            name: Display name; surrounding whitespace is stripped

        Returns:
            The new domain, or None if the name is blank
        """
        cleaned = _clean_name(name)
        if cleaned is None:
            logger.debug("Ignoring add_domain with blank name")
            return None

        with self._lock:
            self._ensure_loaded()
            domain = Domain(name=cleaned, icon=self._default_icon)
            self._domains.append(domain)
            self._save_domains()

        logger.info(f"Added domain '{domain.name}' ({domain.id})")
        return domain.model_copy()

    def commit_seconds(self, domain_id: UUID, additional_seconds: int) -> None:
        """
        Add ``additional_seconds`` to a domain's stored total.

        Unknown ids are ignored: the domain may have been removed while a
        session against it was still running.
        """
        additional_seconds = max(0, int(additional_seconds))

        with self._lock:
            self._ensure_loaded()
            index = self._index_of(domain_id)
            if index is None:
                logger.debug(f"Ignoring commit of {additional_seconds}s to unknown domain {domain_id}")
                return

            domain = self._domains[index]
            domain.total_seconds = domain.total_seconds + additional_seconds
            self._save_domains()

        logger.info(
            f"Committed {additional_seconds}s to '{domain.name}' "
            f"(total {domain.total_seconds}s)"
        )

    def select_domain(self, domain_id: UUID) -> bool:
        """
        Make ``domain_id`` the current selection.

        Returns:
            True if the domain exists and is now selected
        """
        with self._lock:
            self._ensure_loaded()
            if self._index_of(domain_id) is None:
                logger.debug(f"Ignoring selection of unknown domain {domain_id}")
                return False

            self._selected_id = domain_id
            self._save_selection()
            return True

    def clear_selection(self) -> None:
        with self._lock:
            self._ensure_loaded()
            self._selected_id = None
            self._save_selection()

    def rename_domain(self, domain_id: UUID, name: str) -> bool:
        """Rename a domain; blank names and unknown ids are ignored."""
        cleaned = _clean_name(name)
        if cleaned is None:
            return False

        with self._lock:
            self._ensure_loaded()
            index = self._index_of(domain_id)
            if index is None:
                return False
            self._domains[index].name = cleaned
            self._save_domains()
            return True

    def set_domain_icon(self, domain_id: UUID, icon: str) -> bool:
        """Change a domain's icon reference; blank icons and unknown ids are ignored."""
        icon = (icon or "").strip()
        if not icon:
            return False

        with self._lock:
            self._ensure_loaded()
            index = self._index_of(domain_id)
            if index is None:
                return False
            self._domains[index].icon = icon
            self._save_domains()
            return True

    def remove_domain(self, domain_id: UUID) -> bool:
        """
        Remove a domain; clears the selection if it pointed at it.

        Returns:
            True if a domain was removed
        """
        with self._lock:
            self._ensure_loaded()
            index = self._index_of(domain_id)
            if index is None:
                return False

            removed = self._domains.pop(index)
            self._save_domains()
            if self._selected_id == domain_id:
                self._selected_id = None
                self._save_selection()

        logger.info(f"Removed domain '{removed.name}' ({removed.id})")
        return True

    def close(self) -> None:
        """Release the storage backend. In-memory state stays readable."""
        with self._lock:
            self._storage.close()

    def _ensure_loaded(self) -> None:
        # Callers hold the lock
        if not self._loaded:
            self._read_state()

    def _read_state(self) -> None:
        self._domains = self._read_domains()

        stored_selection = decode_selection(self._storage.get(self._selected_domain_key))
        if stored_selection is not None and self._index_of(stored_selection) is not None:
            self._selected_id = stored_selection
        else:
            self._selected_id = self._domains[0].id if self._domains else None
            self._save_selection()

        self._loaded = True
        logger.info(f"Loaded {len(self._domains)} domains, selected={self._selected_id}")

    def _index_of(self, domain_id: UUID) -> Optional[int]:
        for index, domain in enumerate(self._domains):
            if domain.id == domain_id:
                return index
        return None

    def _read_domains(self) -> List[Domain]:
        raw = self._storage.get(self._domains_key)

        domains: List[Domain] = []
        if raw:
            try:
                domains = decode_domains(raw)
            except DomainCodecError as e:
                logger.warning(f"Stored domains are unreadable, using defaults: {e}")

        if not domains:
            domains = default_domains()
            self._domains = domains
            self._save_domains()
            logger.info("Seeded default domains")

        return domains

    def _save_domains(self) -> None:
        self._storage.set(self._domains_key, encode_domains(self._domains))

    def _save_selection(self) -> None:
        self._storage.set(self._selected_domain_key, encode_selection(self._selected_id))
