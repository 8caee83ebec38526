from __future__ import annotations

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from vidshare.models.base import BaseRecord


class Tweet(BaseRecord):
    __tablename__ = "tweets"
    __table_args__ = (Index("idx_tweets_owner_created", "owner_id", "created_at"),)

    content: Mapped[str] = mapped_column(Text, nullable=False)
    owner_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
