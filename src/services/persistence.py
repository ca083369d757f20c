from __future__ import annotations
from typing import Any, Dict, List
from sqlalchemy.orm import Session
from sqlalchemy import func
from ..db.connection import Database
from ..db.models import User, Warning


class PersistenceService:
    """Storage for member credits and moderation warnings."""

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    def _find_or_create(session: Session, user_id: int | str) -> User:
        user = session.get(User, str(user_id))
        if user is None:
            user = User(id=str(user_id), credits=0)
            session.add(user)
            session.flush()
        return user

    def find_or_create_user(self, user_id: int | str) -> Dict[str, Any]:
        """Return the stored user as a dict, creating the row if absent."""
        session: Session = self.db.GetSession()
        try:
            user = self._find_or_create(session, user_id)
            session.commit()
            return {"id": user.id, "credits": int(user.credits or 0)}
        finally:
            session.close()

    def adjust_credits(self, user_id: int | str, delta: int) -> tuple[int, int]:
        """Add ``delta`` credits to a user; the balance never drops below zero.

        Returns:
            tuple[int, int]: Balance before and after the change.
        """
        session: Session = self.db.GetSession()
        try:
            user = self._find_or_create(session, user_id)
            before = int(user.credits or 0)
            after = max(0, before + int(delta))
            setattr(user, "credits", after)
            session.commit()
            return before, after
        finally:
            session.close()

    def add_warning(
        self,
        warned_user_id: int | str,
        issuer_id: int | str,
        reason: str,
        severity: int = 5,
        type: str = "General",
    ) -> int:
        """Insert a warning and return its id."""
        if not 1 <= int(severity) <= 10:
            raise ValueError("Severity must be between 1 and 10")
        session: Session = self.db.GetSession()
        try:
            self._find_or_create(session, warned_user_id)
            warning = Warning(
                warned_user_id=str(warned_user_id),
                issuer_id=str(issuer_id),
                reason=reason,
                severity=int(severity),
                type=type,
            )
            session.add(warning)
            session.commit()
            return int(warning.id)
        finally:
            session.close()

    def count_warnings(self, warned_user_id: int | str) -> int:
        session: Session = self.db.GetSession()
        try:
            return int(
                session.query(func.count(Warning.id)).filter(Warning.warned_user_id == str(warned_user_id)).scalar() or 0
            )
        finally:
            session.close()

    def list_warnings(self, warned_user_id: int | str, skip: int = 0, take: int = 10) -> List[Dict[str, Any]]:
        """Return one page of a user's warnings, newest first."""
        session: Session = self.db.GetSession()
        try:
            rows = (
                session.query(Warning)
                .filter(Warning.warned_user_id == str(warned_user_id))
                .order_by(Warning.created_at.desc(), Warning.id.desc())
                .offset(skip)
                .limit(take)
                .all()
            )
            return [
                {
                    "id": w.id,
                    "reason": w.reason,
                    "type": w.type,
                    "severity": w.severity,
                    "issuer_id": w.issuer_id,
                    "created_at": w.created_at,
                }
                for w in rows
            ]
        finally:
            session.close()
