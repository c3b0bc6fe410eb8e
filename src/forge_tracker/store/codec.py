"""Serialization of domain state to and from the key-value store.

The domain collection is stored as a JSON array of
``{"id", "name", "icon", "totalSeconds"}`` records with the id as canonical
UUID text. The selection is stored as UUID text, or an empty string for none.
"""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError  # type: ignore

from ..domain.models import Domain

DOMAINS_KEY = "forge.domains.v1"
SELECTED_DOMAIN_KEY = "forge.selectedDomainID.v1"

_DOMAIN_LIST = TypeAdapter(List[Domain])


class DomainRecord(BaseModel):
    """Stored form of a domain; unlike ``Domain`` every field is required."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: UUID
    name: str
    icon: str
    total_seconds: int = Field(ge=0, alias="totalSeconds")


_RECORD_LIST = TypeAdapter(List[DomainRecord])


class DomainCodecError(Exception):
    """Raised when persisted domain data cannot be decoded."""

    pass


def encode_domains(domains: List[Domain]) -> str:
    """Serialize an ordered domain collection."""
    return _DOMAIN_LIST.dump_json(domains, by_alias=True).decode("utf-8")


def decode_domains(text: str) -> List[Domain]:
    """
    Deserialize a domain collection, preserving order.

    Raises:
        DomainCodecError: If the text is not a valid collection or contains
            duplicate identifiers
    """
    try:
        records = _RECORD_LIST.validate_json(text)
    except ValidationError as e:
        raise DomainCodecError(f"Invalid domain collection: {e}") from e

    domains = [Domain(**record.model_dump()) for record in records]

    seen = set()
    for domain in domains:
        if domain.id in seen:
            raise DomainCodecError(f"Duplicate domain id {domain.id}")
        seen.add(domain.id)

    return domains


def encode_selection(domain_id: Optional[UUID]) -> str:
    return str(domain_id) if domain_id is not None else ""


def decode_selection(text: Optional[str]) -> Optional[UUID]:
    """Parse a stored selection; anything that is not a UUID means none."""
    if not text:
        return None
    try:
        return UUID(text)
    except ValueError:
        return None
