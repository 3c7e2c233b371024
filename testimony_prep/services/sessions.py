"""CRUD over persisted prep sessions"""

import logging
from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from pydantic import TypeAdapter, ValidationError

from testimony_prep.db.base import KeyValueStore
from testimony_prep.models.document import Document
from testimony_prep.models.session import (
    AnalysisSummary,
    Contradiction,
    DepositionSession,
    Outline,
    PracticeExchange,
    Session,
    SessionKind,
    TestimonyGap,
    TestimonySession,
)

logger = logging.getLogger(__name__)

SESSION_PREFIX = "wtp_{kind}_session_"
CURRENT_SESSION_KEY = "wtp_current_{kind}_session"

_session_adapter = TypeAdapter(Session)


def session_key(kind: str, session_id: str) -> str:
    return SESSION_PREFIX.format(kind=kind) + session_id


class SessionStore:
    """Persists each session as one serialized blob.

    Every write re-serializes the whole session, document text included.
    Mutators return None when the id is unknown instead of raising.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _find_key(self, session_id: str) -> Optional[str]:
        for kind in SessionKind:
            key = session_key(kind.value, session_id)
            if self.store.get(key) is not None:
                return key
        return None

    def _save(self, session: Session) -> Session:
        session.updated_at = datetime.now()
        self.store.set(session_key(session.kind, session.id), session.model_dump_json())
        return session

    def create(
        self,
        subject_name: str,
        case_name: str,
        kind: SessionKind = SessionKind.TESTIMONY,
        case_number: Optional[str] = None,
    ) -> Session:
        """Create and persist an empty session"""
        session_id = str(uuid4())
        if SessionKind(kind) == SessionKind.DEPOSITION:
            session = DepositionSession(
                id=session_id,
                subject_name=subject_name,
                case_name=case_name,
                case_number=case_number,
            )
        else:
            session = TestimonySession(id=session_id, subject_name=subject_name, case_name=case_name)
        logger.info(f"Created {session.kind} session {session_id} for {case_name}")
        return self._save(session)

    def get(self, session_id: str) -> Optional[Session]:
        key = self._find_key(session_id)
        if not key:
            return None
        try:
            return _session_adapter.validate_json(self.store.get(key))
        except ValidationError as e:
            logger.warning(f"Unreadable session {session_id}: {e}")
            return None

    def update(self, session_id: str, **fields) -> Optional[Session]:
        """Apply a partial update and persist the whole session"""
        session = self.get(session_id)
        if not session:
            return None
        try:
            updated = _session_adapter.validate_python({**session.model_dump(), **fields})
        except ValidationError as e:
            logger.warning(f"Rejected update to session {session_id}: {e}")
            return None
        return self._save(updated)

    def add_document(self, session_id: str, document: Document) -> Optional[Session]:
        session = self.get(session_id)
        if not session:
            return None
        session.documents.append(document)
        return self._save(session)

    def update_document(self, session_id: str, document_id: str, **fields) -> Optional[Session]:
        session = self.get(session_id)
        if not session:
            return None
        session.documents = [
            d.model_copy(update=fields) if d.id == document_id else d
            for d in session.documents
        ]
        return self._save(session)

    def set_questions(self, session_id: str, questions: list) -> Optional[Session]:
        return self.update(session_id, questions=list(questions))

    def set_analysis(
        self,
        session_id: str,
        gaps: List[TestimonyGap],
        contradictions: List[Contradiction],
        analysis: Optional[AnalysisSummary],
    ) -> Optional[Session]:
        """Store deposition analysis results in a single write"""
        session = self.get(session_id)
        if not isinstance(session, DepositionSession):
            return None
        session.gaps = list(gaps)
        session.contradictions = list(contradictions)
        session.analysis = analysis
        return self._save(session)

    def set_outline(self, session_id: str, outline: Outline) -> Optional[Session]:
        session = self.get(session_id)
        if not isinstance(session, DepositionSession):
            return None
        session.outline = outline
        return self._save(session)

    def add_practice_exchange(self, session_id: str, exchange: PracticeExchange) -> Optional[Session]:
        session = self.get(session_id)
        if not isinstance(session, TestimonySession):
            return None
        session.practice_exchanges.append(exchange)
        return self._save(session)

    def delete(self, session_id: str) -> bool:
        key = self._find_key(session_id)
        if not key:
            return False
        self.store.remove(key)
        logger.info(f"Deleted session {session_id}")
        return True

    def list_sessions(self, kind: Optional[SessionKind] = None) -> List[Session]:
        """All stored sessions, newest first"""
        kinds = [SessionKind(kind)] if kind else list(SessionKind)
        sessions = []
        for k in kinds:
            prefix = SESSION_PREFIX.format(kind=k.value)
            for key in self.store.keys(prefix):
                session = self.get(key[len(prefix):])
                if session:
                    sessions.append(session)
        return sorted(sessions, key=lambda s: s.created_at, reverse=True)

    # Current-session pointer, used to resume a flow

    def get_current(self, kind: SessionKind) -> Optional[Session]:
        session_id = self.store.get(CURRENT_SESSION_KEY.format(kind=SessionKind(kind).value))
        return self.get(session_id) if session_id else None

    def set_current(self, kind: SessionKind, session_id: str) -> None:
        self.store.set(CURRENT_SESSION_KEY.format(kind=SessionKind(kind).value), session_id)

    def clear_current(self, kind: SessionKind) -> None:
        self.store.remove(CURRENT_SESSION_KEY.format(kind=SessionKind(kind).value))
