"""Pydantic view models read by the presentation layer."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict  # type: ignore

from ..core.enums import SessionStatus


class BaseView(BaseModel):
    """Base view model; views are immutable snapshots."""

    model_config = ConfigDict(frozen=True, from_attributes=True)


class DomainView(BaseView):
    """Per-domain figures including any live session time."""

    id: UUID
    name: str
    icon: str
    total_seconds: int = Field(ge=0, description="Stored plus live seconds")
    xp: int = Field(ge=0)
    level: int = Field(ge=1)
    progress: float = Field(ge=0.0, le=1.0)
    is_selected: bool = False


class OverviewView(BaseView):
    """Aggregate progression across all domains."""

    total_xp: int = Field(ge=0)
    level: int = Field(ge=1)
    progress: float = Field(ge=0.0, le=1.0)


class SessionView(BaseView):
    """Running/idle status with the live elapsed duration."""

    status: SessionStatus
    domain_id: Optional[UUID] = None
    domain_name: Optional[str] = Field(
        None, description="Selected domain name, None when nothing is selected"
    )
    elapsed_seconds: int = Field(0, ge=0)
    elapsed_display: str = Field("00:00:00", description="Zero-padded HH:MM:SS")
    session_xp: int = Field(0, ge=0)
