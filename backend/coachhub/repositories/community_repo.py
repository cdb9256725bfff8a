from __future__ import annotations
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from coachhub.errors import ConflictError
from coachhub.models import Comment, CommentLike, Community, CommunityMember, Post, PostLike
from coachhub.repositories.base import BaseRepository

class CommunityRepository(BaseRepository[Community]):
    model = Community

    def list_for(self, user_id: int) -> list[Community]:
        """Communities the user owns or is a member of."""
        member_of = select(CommunityMember.community_id).where(CommunityMember.user_id == user_id)
        stmt = (
            select(Community)
            .where((Community.owner_id == user_id) | Community.id.in_(member_of))
            .order_by(Community.name.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def create(self, owner_id: int, **fields: Any) -> Community:
        return self.save(Community(owner_id=owner_id, **fields))

    def update(self, community: Community, **fields: Any) -> Community:
        for key, value in fields.items():
            setattr(community, key, value)
        self.db.commit()
        self.db.refresh(community)
        return community

    def member_ids(self, community_id: int) -> list[int]:
        stmt = select(CommunityMember.user_id).where(CommunityMember.community_id == community_id)
        return list(self.db.execute(stmt).scalars().all())

    def is_member(self, community_id: int, user_id: int) -> bool:
        return user_id in self.member_ids(community_id)

    def add_member(self, community_id: int, user_id: int) -> CommunityMember:
        member = CommunityMember(community_id=community_id, user_id=user_id)
        try:
            self.db.add(member)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("user is already a member", code="already_member")
        self.db.refresh(member)
        return member

    def remove_member(self, community_id: int, user_id: int) -> bool:
        stmt = select(CommunityMember).where(
            CommunityMember.community_id == community_id, CommunityMember.user_id == user_id
        )
        member = self.db.execute(stmt).scalar_one_or_none()
        if member is None:
            return False
        self.delete(member)
        return True


class PostRepository(BaseRepository[Post]):
    model = Post

    def feed(self, *, now: datetime, community_id: int | None = None, limit: int = 50) -> list[Post]:
        """Published posts, plus scheduled ones whose publish_at has passed; pinned first."""
        stmt = (
            select(Post)
            .options(
                selectinload(Post.author),
                selectinload(Post.comments).selectinload(Comment.author),
                selectinload(Post.comments).selectinload(Comment.likes),
                selectinload(Post.likes),
            )
            .where(or_(Post.is_published.is_(True), Post.publish_at <= now))
        )
        if community_id is not None:
            stmt = stmt.where(Post.community_id == community_id)
        stmt = stmt.order_by(Post.is_pinned.desc(), Post.created_at.desc(), Post.id.desc()).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def get_full(self, post_id: int) -> Optional[Post]:
        stmt = (
            select(Post)
            .options(
                selectinload(Post.author),
                selectinload(Post.comments).selectinload(Comment.author),
                selectinload(Post.comments).selectinload(Comment.likes),
                selectinload(Post.likes),
            )
            .where(Post.id == post_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def create(self, author_id: int, **fields: Any) -> Post:
        post = self.save(Post(author_id=author_id, **fields))
        return self.get_full(post.id)

    def toggle_pin(self, post: Post) -> Post:
        post.is_pinned = not post.is_pinned
        self.db.commit()
        return self.get_full(post.id)

    def add_comment(self, post: Post, author_id: int, content: str, *, parent_id: int | None = None) -> Comment:
        comment = Comment(post_id=post.id, author_id=author_id, content=content, parent_id=parent_id)
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        return comment

    def get_comment(self, comment_id: int) -> Optional[Comment]:
        return self.db.get(Comment, comment_id)

    def delete_comment(self, comment: Comment) -> None:
        self.db.delete(comment)
        self.db.commit()

    def _toggle(self, like_model, fk_name: str, target_id: int, user_id: int) -> tuple[bool, int]:
        fk = getattr(like_model, fk_name)
        stmt = select(like_model).where(fk == target_id, like_model.user_id == user_id)
        existing = self.db.execute(stmt).scalar_one_or_none()
        if existing is not None:
            self.db.delete(existing)
            liked = False
        else:
            self.db.add(like_model(**{fk_name: target_id, "user_id": user_id}))
            liked = True
        try:
            self.db.commit()
        except IntegrityError:
            # concurrent double-like: the other request won
            self.db.rollback()
            liked = True
        count = self.db.execute(
            select(func.count()).select_from(like_model).where(fk == target_id)
        ).scalar_one()
        return liked, count

    def toggle_post_like(self, post_id: int, user_id: int) -> tuple[bool, int]:
        return self._toggle(PostLike, "post_id", post_id, user_id)

    def toggle_comment_like(self, comment_id: int, user_id: int) -> tuple[bool, int]:
        return self._toggle(CommentLike, "comment_id", comment_id, user_id)
