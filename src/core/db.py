import os
import structlog

from datetime import datetime, timezone
from functools import lru_cache
from typing import Dict, List, Optional

from sqlalchemy import create_engine, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from core.config import get_settings
from models.submission import Base, ContactMessage, MailRecord, Registration, Score


log = structlog.get_logger()

# tabela -> (modelo, coluna de ordenação)
TABLES = {
    "registrations": (Registration, "receivedAt"),
    "contacts": (ContactMessage, "receivedAt"),
    "scores": (Score, "receivedAt"),
    "mails": (MailRecord, "id"),
}

FINAL_MAIL_STATUSES = {"sent", "failed", "mocked"}


class StorageError(Exception):
    pass


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SubmissionStore:
    """
    Acesso ao banco SQLite local: inserts de uma linha por requisição e
    leituras limitadas para o painel de admin.
    """

    def __init__(self, url: str):
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        self.url = url
        self.engine = create_engine(url, connect_args=connect_args)
        self.Session = sessionmaker(bind=self.engine, expire_on_commit=False)

    def create_all(self):
        database = self.engine.url.database
        if self.engine.url.get_backend_name() == "sqlite" and database and database != ":memory:":
            folder = os.path.dirname(os.path.abspath(database))
            os.makedirs(folder, exist_ok=True)
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        log.info("db.ready", url=self.url)

    def _add(self, row) -> int:
        try:
            with self.Session.begin() as session:
                session.add(row)
                session.flush()
                return row.id
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def insert_registration(self, name: str, email: str, address: Optional[str], contact: str,
                            received_at: Optional[str] = None) -> int:
        return self._add(Registration(
            name=name,
            email=email,
            address=address or "",
            contact=contact,
            received_at=received_at or utc_now_iso(),
        ))

    def insert_contact(self, name: str, email: str, message: str, received_at: Optional[str] = None) -> int:
        return self._add(ContactMessage(
            name=name,
            email=email,
            message=message,
            received_at=received_at or utc_now_iso(),
        ))

    def insert_score(self, score: float, details: Optional[str] = None, received_at: Optional[str] = None) -> int:
        return self._add(Score(score=score, details=details, received_at=received_at or utc_now_iso()))

    def insert_mail(self, recipients: str, subject: str, body: str) -> int:
        return self._add(MailRecord(
            recipients=recipients,
            subject=subject,
            body=body,
            status="pending",
            received_at=utc_now_iso(),
        ))

    def mark_mail(self, mail_id: int, status: str, sent_at: Optional[str] = None, error: Optional[str] = None):
        """
        Única atualização permitida: o registro sai de ``pending`` uma vez,
        depois da tentativa de envio.
        """
        if status not in FINAL_MAIL_STATUSES:
            raise ValueError(f"invalid mail status: {status}")
        stmt = (
            update(MailRecord)
            .where(MailRecord.id == mail_id, MailRecord.status == "pending")
            .values(status=status, sent_at=sent_at, error=error)
        )
        try:
            with self.Session.begin() as session:
                result = session.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        if result.rowcount == 0:
            raise StorageError(f"mail {mail_id} is not pending")

    def recent(self, table: str, limit: int = 50) -> List[Dict]:
        model, order_column = TABLES[table]
        t = model.__table__
        stmt = select(t).order_by(t.c[order_column].desc(), t.c.id.desc()).limit(limit)
        try:
            with self.engine.connect() as conn:
                return [dict(row) for row in conn.execute(stmt).mappings()]
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def counts(self) -> Dict[str, int]:
        totals = {}
        try:
            with self.engine.connect() as conn:
                for name, (model, _) in TABLES.items():
                    totals[name] = conn.execute(select(func.count()).select_from(model.__table__)).scalar_one()
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
        return totals


@lru_cache
def get_store() -> SubmissionStore:
    return SubmissionStore(get_settings().database_url)
