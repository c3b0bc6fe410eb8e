"""Domain model and session state for the Forge tracker.

A ``Domain`` is an activity category the user invests time in. The session is
modelled as a tagged variant: either ``Idle`` or ``Running`` against exactly
one domain, so "at most one active session" holds structurally.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Tuple, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, ConfigDict  # type: ignore

DEFAULT_ICON = "star.fill"

# (name, icon) pairs used to seed an empty store on first run
DEFAULT_DOMAIN_SPECS: Tuple[Tuple[str, str], ...] = (
    ("LeetCode", "brain.head.profile"),
    ("App Dev", "hammer.fill"),
    ("Gym", "figure.strengthtraining.traditional"),
    ("Reading", "book.fill"),
    ("Career Prep", "briefcase.fill"),
    ("Mental Health", "heart.fill"),
)


class Domain(BaseModel):
    """A named activity the user tracks time against."""

    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
        extra="ignore",
    )

    id: UUID = Field(default_factory=uuid4, frozen=True)
    name: str
    icon: str = DEFAULT_ICON
    total_seconds: int = Field(default=0, ge=0, alias="totalSeconds")

    def __repr__(self) -> str:
        return (
            f"<Domain(id={self.id}, name='{self.name}', "
            f"total_seconds={self.total_seconds})>"
        )


def default_domains() -> List[Domain]:
    """Build a fresh copy of the default domain set, all at zero seconds."""
    return [Domain(name=name, icon=icon) for name, icon in DEFAULT_DOMAIN_SPECS]


@dataclass(frozen=True)
class Idle:
    """No session is running."""

    pass


@dataclass(frozen=True)
class Running:
    """A session is running against ``domain_id`` since ``started_at``."""

    domain_id: UUID
    started_at: datetime


SessionState = Union[Idle, Running]

IDLE = Idle()
