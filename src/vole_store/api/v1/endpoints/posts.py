# src/vole_store/api/v1/endpoints/posts.py
"""Post-related endpoints."""

from fastapi import APIRouter, Query, Request, Response
from fastapi.concurrency import run_in_threadpool

from vole_store.api.dependencies import NO_CACHE_HEADERS, SettingsDep, StoreDep
from vole_store.store.collection import PostCollection
from vole_store.store.post import Post
from vole_store.store.registry import UserStore

router = APIRouter(prefix="/posts", tags=["posts"])

MY_USER_ALIAS = "my_user"
WELCOME_TEXT = (
    "Welcome to Vole. To start, create a new profile by clicking 'My Profile' on the left."
)


def _load_posts(store: UserStore, user_id: str | None) -> PostCollection:
    if user_id:
        if user_id == MY_USER_ALIAS:
            user = store.get_my_user()
        else:
            user = store.get_user_by_id(user_id)
        return user.get_posts()

    posts = store.get_posts()
    if posts.is_empty:
        return Post.welcome(WELCOME_TEXT).collection()
    return posts


@router.get("")
def list_posts(
    store: StoreDep,
    config: SettingsDep,
    before: str | None = Query(None, description="Return posts older than this post id"),
    user: str | None = Query(None, description="User id, or 'my_user' for the local operator"),
) -> Response:
    """List posts newest first, one page at a time.

    Without ``user`` the feed spans every known user and falls back to a
    welcome placeholder when nobody has posted yet.
    """
    page = _load_posts(store, user).before_id(before).limit(config.page_size)
    return Response(content=page.json(), media_type="application/json", headers=NO_CACHE_HEADERS)


def _create_post(store: UserStore, body: bytes) -> str:
    user = store.get_my_user()
    post = user.new_post_from_container_json(body)
    return post.save().json()


@router.post("")
async def create_post(request: Request, store: StoreDep) -> Response:
    """Create a post for my user and commit the files it references."""
    body = await request.body()
    content = await run_in_threadpool(_create_post, store, body)
    return Response(content=content, media_type="application/json", headers=NO_CACHE_HEADERS)


@router.delete("/{post_id}")
def delete_post(post_id: str, store: StoreDep) -> Response:
    """Delete one of my user's posts. Unknown ids succeed."""
    store.get_my_user().delete_post(post_id)
    return Response(content="OK", media_type="text/plain", headers=NO_CACHE_HEADERS)
