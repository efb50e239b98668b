"""
Database models for Financial Echo Collector.

Models: Echo, EmotionalTone, and the echo_tones association table.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    LargeBinary,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from echocollector.core.utils import utcnow


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


echo_tones = Table(
    "echo_tones",
    Base.metadata,
    Column("echo_id", Integer, ForeignKey("echoes.id", ondelete="CASCADE"), primary_key=True),
    Column("tone_id", Integer, ForeignKey("emotional_tones.id", ondelete="CASCADE"), primary_key=True),
)


class EmotionalTone(Base):
    """
    Named, colored emotional tag.

    Attached to any number of echoes.
    """

    __tablename__ = "emotional_tones"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color_hex: Mapped[Optional[str]] = mapped_column(String(8), nullable=True)
    icon_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Relationship
    echoes: Mapped[list["Echo"]] = relationship(
        "Echo", secondary=echo_tones, back_populates="tones"
    )

    def __repr__(self) -> str:
        return f"<EmotionalTone {self.id}: {self.name} #{self.color_hex or '-'}>"


class Echo(Base):
    """
    A single financial echo.

    Pairs a past financial decision with the present-day trigger
    it resonates with. Resolution data is nullable until resolved.
    """

    __tablename__ = "echoes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    past_date: Mapped[date] = mapped_column(Date, nullable=False)
    past_situation: Mapped[str] = mapped_column(Text, nullable=False)
    current_trigger: Mapped[str] = mapped_column(Text, nullable=False)
    connection_strength: Mapped[int] = mapped_column(Integer, default=5)
    insight: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    photo: Mapped[Optional[bytes]] = mapped_column(LargeBinary, nullable=True)

    # Weak link to the echo this one follows up on
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("echoes.id", ondelete="SET NULL"), nullable=True, index=True
    )

    is_resolved: Mapped[bool] = mapped_column(Boolean, default=False)
    resolved_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    # Relationships
    parent: Mapped[Optional["Echo"]] = relationship(
        "Echo", remote_side="Echo.id", back_populates="children"
    )
    children: Mapped[list["Echo"]] = relationship(
        "Echo", back_populates="parent"
    )
    tones: Mapped[list["EmotionalTone"]] = relationship(
        "EmotionalTone", secondary=echo_tones, back_populates="echoes"
    )

    def __repr__(self) -> str:
        status = "resolved" if self.is_resolved else "open"
        return f"<Echo {self.id}: {self.title!r} strength={self.connection_strength} {status}>"
