from sqlalchemy import Column, Float, Integer, String, Text
from sqlalchemy.orm import declarative_base


Base = declarative_base()

MAIL_STATUSES = ("pending", "sent", "failed", "mocked")


class Registration(Base):
    __tablename__ = "registrations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    address = Column(Text)
    contact = Column(String(20), nullable=False)
    received_at = Column("receivedAt", Text, nullable=False)


class ContactMessage(Base):
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    received_at = Column("receivedAt", Text, nullable=False)


class Score(Base):
    __tablename__ = "scores"

    id = Column(Integer, primary_key=True, autoincrement=True)
    score = Column(Float, nullable=False)
    details = Column(Text)
    received_at = Column("receivedAt", Text, nullable=False)


class MailRecord(Base):
    __tablename__ = "mails"

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipients = Column(Text)
    subject = Column(Text)
    body = Column(Text)
    status = Column(String(10), default="pending")  # pending -> sent | failed | mocked
    sent_at = Column("sentAt", Text)
    error = Column(Text)
    received_at = Column("receivedAt", Text)
