"""
Team Directory Module

CRUD over the locally stored directory: team members, requestors and EDC
systems. These used to be hand-maintained lists on the settings page; they now
live in the SQLModel database next to the API.
"""
import logging
from typing import Iterable, List, Optional

from sqlmodel import Session, select

from build_tracker.models.team import (
    EdcSystem, Requestor, RequestorCreate, TeamMember, TeamMemberCreate,
)

logger = logging.getLogger(__name__)


class TeamDirectory:
    """Directory operations bound to one database session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # ---- team members ----

    def list_members(self, role: Optional[str] = None) -> List[TeamMember]:
        statement = select(TeamMember)
        if role:
            statement = statement.where(TeamMember.role == role)
        return list(self.session.exec(statement.order_by(TeamMember.name)).all())

    def add_member(self, data: TeamMemberCreate) -> TeamMember:
        member = TeamMember.model_validate(data)
        self.session.add(member)
        self.session.commit()
        self.session.refresh(member)
        logger.info("Added team member %s (%s)", member.name, member.role)
        return member

    def remove_member(self, member_id: str) -> bool:
        member = self.session.get(TeamMember, member_id)
        if member is None:
            return False
        self.session.delete(member)
        self.session.commit()
        logger.info("Removed team member %s", member.name)
        return True

    # ---- requestors ----

    def list_requestors(self) -> List[Requestor]:
        return list(self.session.exec(select(Requestor).order_by(Requestor.name)).all())

    def add_requestor(self, data: RequestorCreate) -> Requestor:
        values = data.model_dump(exclude_none=True)
        requestor = Requestor(**values)
        self.session.add(requestor)
        self.session.commit()
        self.session.refresh(requestor)
        return requestor

    def remove_requestor(self, requestor_id: int) -> bool:
        requestor = self.session.get(Requestor, requestor_id)
        if requestor is None:
            return False
        self.session.delete(requestor)
        self.session.commit()
        return True

    def requestor_options(self) -> List[Requestor]:
        """Requestors for a selection list, one per name (the first one stored wins)."""
        return dedupe_requestors(self.session.exec(select(Requestor).order_by(Requestor.id)).all())

    # ---- EDC systems ----

    def list_edc_systems(self) -> List[str]:
        return [s.name for s in self.session.exec(select(EdcSystem).order_by(EdcSystem.id)).all()]

    def add_edc_system(self, name: str) -> Optional[EdcSystem]:
        """Returns None when a system with that name already exists."""
        name = name.strip()
        existing = self.session.exec(select(EdcSystem).where(EdcSystem.name == name)).first()
        if existing is not None:
            return None
        system = EdcSystem(name=name)
        self.session.add(system)
        self.session.commit()
        self.session.refresh(system)
        return system

    def remove_edc_system(self, name: str) -> bool:
        system = self.session.exec(select(EdcSystem).where(EdcSystem.name == name)).first()
        if system is None:
            return False
        self.session.delete(system)
        self.session.commit()
        return True


def dedupe_requestors(requestors: Iterable[Requestor]) -> List[Requestor]:
    seen = set()
    unique = []
    for requestor in requestors:
        if requestor.name in seen:
            continue
        seen.add(requestor.name)
        unique.append(requestor)
    return unique


def seed_defaults(session: Session, edc_systems: Iterable[str]) -> None:
    """Populate the EDC system list on first start."""
    if session.exec(select(EdcSystem)).first() is not None:
        return
    for name in edc_systems:
        session.add(EdcSystem(name=name))
    session.commit()
    logger.info("Seeded default EDC systems")
