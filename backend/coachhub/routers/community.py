import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from coachhub.db import get_db
from coachhub.models import Comment, Community, NotificationType, Post, User
from coachhub.schemas.community import (
    AuthorRead, CommentCreate, CommentRead, CommunityCreate, CommunityRead, LikeResult, MemberAdd,
    PostCreate, PostRead,
)
from coachhub.repositories.community_repo import CommunityRepository, PostRepository
from coachhub.repositories.notification_repo import NotificationRepository
from coachhub.repositories.user_repo import UserRepository
from coachhub.deps.auth import get_current_user, require_staff
from coachhub.deps.access import ensure_owner, is_admin
from coachhub.errors import ForbiddenError, NotFoundError, ValidationFailed
from coachhub.settings import get_settings
from coachhub.timeutils import ensure_utc, utcnow

log = logging.getLogger(__name__)

communities_router = APIRouter(prefix="/api/communities", tags=["community"])
posts_router = APIRouter(prefix="/api", tags=["community"])

# Communities

def _community(db: Session, community_id: int, current: User) -> Community:
    repo = CommunityRepository(db)
    community = repo.get(community_id)
    if community is None:
        raise NotFoundError("community not found")
    if community.owner_id != current.id and not is_admin(current) and not repo.is_member(community.id, current.id):
        raise ForbiddenError("not a member of this community")
    return community

@communities_router.get("", response_model=list[CommunityRead])
def list_communities(db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return CommunityRepository(db).list_for(current.id)

@communities_router.post("", response_model=CommunityRead, status_code=status.HTTP_201_CREATED)
def create_community(payload: CommunityCreate, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    return CommunityRepository(db).create(current.id, **payload.model_dump())

@communities_router.get("/{community_id}", response_model=CommunityRead)
def get_community(community_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return _community(db, community_id, current)

@communities_router.put("/{community_id}", response_model=CommunityRead)
def update_community(
    community_id: int,
    payload: CommunityCreate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    community = _community(db, community_id, current)
    ensure_owner(community.owner_id, current, "community")
    return CommunityRepository(db).update(community, **payload.model_dump())

@communities_router.delete("/{community_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_community(community_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    community = _community(db, community_id, current)
    ensure_owner(community.owner_id, current, "community")
    CommunityRepository(db).delete(community)

@communities_router.get("/{community_id}/members", response_model=list[int])
def list_members(community_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    community = _community(db, community_id, current)
    return CommunityRepository(db).member_ids(community.id)

@communities_router.post("/{community_id}/members", status_code=status.HTTP_201_CREATED)
def add_member(
    community_id: int,
    payload: MemberAdd,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    community = _community(db, community_id, current)
    ensure_owner(community.owner_id, current, "community")
    if UserRepository(db).get(payload.user_id) is None:
        raise NotFoundError("user not found")
    member = CommunityRepository(db).add_member(community.id, payload.user_id)
    return {"community_id": member.community_id, "user_id": member.user_id}

@communities_router.delete("/{community_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    community_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    community = _community(db, community_id, current)
    # owners remove anyone; members may leave
    if user_id != current.id:
        ensure_owner(community.owner_id, current, "community")
    if not CommunityRepository(db).remove_member(community.id, user_id):
        raise NotFoundError("not a member")

# Posts

def _comment_read(c: Comment) -> CommentRead:
    return CommentRead(
        id=c.id,
        post_id=c.post_id,
        parent_id=c.parent_id,
        content=c.content,
        created_at=c.created_at,
        author=AuthorRead.model_validate(c.author),
        like_count=len(c.likes),
    )

def _post_read(post: Post, current: User) -> PostRead:
    return PostRead(
        id=post.id,
        community_id=post.community_id,
        title=post.title,
        content=post.content,
        image_url=post.image_url,
        video_url=post.video_url,
        is_pinned=post.is_pinned,
        is_published=post.is_published,
        publish_at=post.publish_at,
        created_at=post.created_at,
        author=AuthorRead.model_validate(post.author),
        like_count=len(post.likes),
        comment_count=len(post.comments),
        liked_by_me=any(like.user_id == current.id for like in post.likes),
        comments=[_comment_read(c) for c in post.comments],
    )

def _post(db: Session, post_id: int) -> Post:
    post = PostRepository(db).get_full(post_id)
    if post is None:
        raise NotFoundError("post not found")
    return post

def _audience(db: Session, post: Post) -> list[int]:
    if post.community_id is not None:
        ids = CommunityRepository(db).member_ids(post.community_id)
    else:
        ids = [c.id for c in UserRepository(db).list_clients(post.author_id)]
    return [uid for uid in ids if uid != post.author_id]

@posts_router.get("/posts", response_model=list[PostRead])
def feed(
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    community_id: int | None = Query(None),
    limit: int | None = Query(None, ge=1, le=200),
):
    if community_id is not None:
        _community(db, community_id, current)
    posts = PostRepository(db).feed(
        now=utcnow(),
        community_id=community_id,
        limit=limit or get_settings().COMMUNITY_FEED_LIMIT,
    )
    return [_post_read(p, current) for p in posts]

@posts_router.post("/posts", response_model=PostRead, status_code=status.HTTP_201_CREATED)
def create_post(payload: PostCreate, db: Session = Depends(get_db), current: User = Depends(require_staff)):
    if payload.community_id is not None:
        _community(db, payload.community_id, current)
    publish_now = payload.publish_at is None or ensure_utc(payload.publish_at) <= utcnow()
    post = PostRepository(db).create(current.id, is_published=publish_now, **payload.model_dump())
    if publish_now:
        sent = NotificationRepository(db).add_many(
            _audience(db, post),
            NotificationType.new_post,
            f"New post from {current.name}",
            post.title or post.content[:120],
            link=f"/posts/{post.id}",
        )
        log.info("post %s published, %s notified", post.id, sent)
    return _post_read(post, current)

@posts_router.get("/posts/{post_id}", response_model=PostRead)
def get_post(post_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    post = _post(db, post_id)
    if post.community_id is not None:
        _community(db, post.community_id, current)
    return _post_read(post, current)

@posts_router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(post_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    post = _post(db, post_id)
    ensure_owner(post.author_id, current, "post")
    PostRepository(db).delete(post)

@posts_router.post("/posts/{post_id}/pin", response_model=PostRead)
def toggle_pin(post_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    post = _post(db, post_id)
    ensure_owner(post.author_id, current, "post")
    return _post_read(PostRepository(db).toggle_pin(post), current)

@posts_router.post("/posts/{post_id}/like", response_model=LikeResult)
def like_post(post_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    post = _post(db, post_id)
    liked, count = PostRepository(db).toggle_post_like(post.id, current.id)
    return LikeResult(liked=liked, like_count=count)

# Comments

@posts_router.post("/posts/{post_id}/comments", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
def add_comment(
    post_id: int,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    post = _post(db, post_id)
    repo = PostRepository(db)
    if payload.parent_id is not None:
        parent = repo.get_comment(payload.parent_id)
        if parent is None or parent.post_id != post.id:
            raise ValidationFailed("parent comment not found on this post", code="invalid_parent")
        if parent.parent_id is not None:
            raise ValidationFailed("replies cannot be nested further", code="nesting_too_deep")

    comment = repo.add_comment(post, current.id, payload.content, parent_id=payload.parent_id)
    if post.author_id != current.id:
        NotificationRepository(db).add(
            post.author_id,
            NotificationType.comment,
            f"{current.name} commented on your post",
            payload.content[:200],
            link=f"/posts/{post.id}",
        )
    return _comment_read(comment)

@posts_router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(comment_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    repo = PostRepository(db)
    comment = repo.get_comment(comment_id)
    if comment is None:
        raise NotFoundError("comment not found")
    ensure_owner(comment.author_id, current, "comment")
    repo.delete_comment(comment)

@posts_router.post("/comments/{comment_id}/like", response_model=LikeResult)
def like_comment(comment_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    repo = PostRepository(db)
    if repo.get_comment(comment_id) is None:
        raise NotFoundError("comment not found")
    liked, count = repo.toggle_comment_like(comment_id, current.id)
    return LikeResult(liked=liked, like_count=count)
