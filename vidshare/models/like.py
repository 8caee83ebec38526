from __future__ import annotations

import enum

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from vidshare.models.base import BaseRecord


class LikeTarget(str, enum.Enum):
    VIDEO = "video"
    COMMENT = "comment"
    TWEET = "tweet"


class Like(BaseRecord):
    """A single like from ``liked_by`` on one video, comment or tweet.

    ``target_id`` has no foreign key because it points into one of three
    tables; rows are removed by the services that delete the target.
    """

    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint(
            "liked_by_id", "target_type", "target_id", name="uk_likes_actor_target"
        ),
        Index("idx_likes_target", "target_type", "target_id"),
    )

    liked_by_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    target_type: Mapped[str] = mapped_column(String(16), nullable=False)
    target_id: Mapped[str] = mapped_column(String(36), nullable=False)
