"""
Models used by the test suite.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Account(Base):
    """Account with a unique email and a status."""
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True)
    status = Column(String, default="active", nullable=False)
    score = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    notes = relationship("Note", back_populates="account", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Account {self.name}>"


class Note(Base):
    """Note belonging to an account."""
    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    body = Column(String, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)

    account = relationship("Account", back_populates="notes")
