from __future__ import annotations

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from vidshare.models.base import BaseRecord


class Comment(BaseRecord):
    __tablename__ = "comments"
    __table_args__ = (
        Index("idx_comments_video_created", "video_id", "created_at"),
        Index("idx_comments_owner", "owner_id"),
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)
    video_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False
    )
    owner_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
