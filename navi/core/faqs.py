"""
Community FAQ moderation queue.
Submissions start as 'pending' and are moved to 'approved' or 'rejected' by an admin;
only approved FAQs are public.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Dict, List, Optional

from .db import get_db
from ..util.logging import logger

FAQ_STATUSES = ['pending', 'approved', 'rejected']
DEFAULT_SUBMITTER = "Student"


@dataclass
class FAQ:
    id: int
    category: str
    question: str
    answer: str
    submitted_by: str
    status: str
    created_at: datetime

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['created_at'] = self.created_at.isoformat()
        return data

    @classmethod
    def from_row(cls, row) -> 'FAQ':
        created_at = row['created_at']
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            id=row['id'],
            category=row['category'],
            question=row['question'],
            answer=row['answer'],
            submitted_by=row['submitted_by'],
            status=row['status'],
            created_at=created_at,
        )


def _validate_status(status: str) -> None:
    if status not in FAQ_STATUSES:
        raise ValueError(f"status must be one of: {FAQ_STATUSES}")


def submit_faq(category: str, question: str, answer: str, submitted_by: Optional[str] = None) -> FAQ:
    """Queue a new FAQ for moderation."""
    for name, value in (("category", category), ("question", question), ("answer", answer)):
        if not value or not value.strip():
            raise ValueError(f"{name} cannot be empty")

    submitter = submitted_by or DEFAULT_SUBMITTER
    # Stored as ISO text with microseconds
    created_at = datetime.now()

    with get_db() as conn:
        cursor = conn.execute(
            "INSERT INTO faqs (category, question, answer, submitted_by, status, created_at) "
            "VALUES (?, ?, ?, ?, 'pending', ?)",
            (category, question, answer, submitter, created_at.isoformat()),
        )
        conn.commit()
        faq_id = cursor.lastrowid

    logger.log_faq_submitted(faq_id, category, submitter)
    return FAQ(faq_id, category, question, answer, submitter, 'pending', created_at)


def get_faq(faq_id: int) -> Optional[FAQ]:
    with get_db() as conn:
        row = conn.execute("SELECT * FROM faqs WHERE id = ?", (faq_id,)).fetchone()
    return FAQ.from_row(row) if row else None


def list_faqs(status: Optional[str] = None) -> List[FAQ]:
    """List FAQs newest first, optionally restricted to one status."""
    query = "SELECT * FROM faqs"
    params = ()
    if status is not None:
        _validate_status(status)
        query += " WHERE status = ?"
        params = (status,)
    query += " ORDER BY created_at DESC, id DESC"

    with get_db() as conn:
        rows = conn.execute(query, params).fetchall()
    return [FAQ.from_row(row) for row in rows]


def update_faq_status(faq_id: int, status: str) -> bool:
    """Move an FAQ to ``status``; returns False when the id is unknown."""
    _validate_status(status)

    with get_db() as conn:
        cursor = conn.execute("UPDATE faqs SET status = ? WHERE id = ?", (status, faq_id))
        conn.commit()
        found = cursor.rowcount > 0

    logger.log_faq_status_changed(faq_id, status, found)
    return found
