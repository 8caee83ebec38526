from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.exceptions import NotFoundError, PermissionDeniedError
from vidshare.models.comment import Comment
from vidshare.models.like import Like, LikeTarget
from vidshare.models.user import User
from vidshare.schemas.comment import CommentResponse, CommentWithOwner
from vidshare.schemas.user import UserPublic
from vidshare.services.like_service import likes_count_column
from vidshare.services.pagination import paginate
from vidshare.services.visibility import get_visible_video

logger = logging.getLogger("vidshare.comment_service")


class CommentService:
    @staticmethod
    async def _get_owned(db: AsyncSession, comment_id: str, user: User) -> Comment:
        comment = await db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        if comment.owner_id != user.id:
            raise PermissionDeniedError("You are not allowed to modify this comment")
        return comment

    @staticmethod
    async def list_comments(
        db: AsyncSession,
        video_id: str,
        viewer_id: Optional[str],
        page: int,
        limit: int,
    ) -> tuple[list[CommentWithOwner], int]:
        await get_visible_video(db, video_id, viewer_id)
        stmt = (
            select(Comment, User, likes_count_column(LikeTarget.COMMENT, Comment.id))
            .join(User, User.id == Comment.owner_id)
            .where(Comment.video_id == video_id)
            .order_by(Comment.created_at.desc(), Comment.id)
        )
        rows, total = await paginate(db, stmt, page, limit)
        items = [
            CommentWithOwner(
                **CommentResponse.model_validate(comment).model_dump(),
                owner=UserPublic.model_validate(owner),
                likes_count=likes_count,
            )
            for comment, owner, likes_count in rows
        ]
        return items, total

    @staticmethod
    async def add_comment(
        db: AsyncSession, user: User, video_id: str, content: str
    ) -> Comment:
        await get_visible_video(db, video_id, user.id)
        comment = Comment(content=content, video_id=video_id, owner_id=user.id)
        db.add(comment)
        await db.commit()
        logger.info("Comment added: comment_id=%s video_id=%s", comment.id, video_id)
        return comment

    @staticmethod
    async def update_comment(
        db: AsyncSession, user: User, comment_id: str, content: str
    ) -> Comment:
        comment = await CommentService._get_owned(db, comment_id, user)
        comment.content = content
        await db.commit()
        await db.refresh(comment)
        return comment

    @staticmethod
    async def delete_comment(db: AsyncSession, user: User, comment_id: str) -> None:
        comment = await CommentService._get_owned(db, comment_id, user)
        await db.execute(
            delete(Like).where(
                Like.target_type == LikeTarget.COMMENT.value,
                Like.target_id == comment_id,
            )
        )
        await db.delete(comment)
        await db.commit()
        logger.info("Comment deleted: comment_id=%s", comment_id)
