# src/vole_store/api/v1/endpoints/users.py
"""User-related endpoints."""

from fastapi import APIRouter, Query, Request, Response
from fastapi.concurrency import run_in_threadpool

from vole_store.api.dependencies import NO_CACHE_HEADERS, StoreDep
from vole_store.core.errors import NotFoundError
from vole_store.store.collection import UserCollection
from vole_store.store.registry import UserStore

router = APIRouter(prefix="/users", tags=["users"])


@router.get("")
def list_users(
    store: StoreDep,
    is_my_user: str | None = Query(None, description="Only return the local operator"),
) -> Response:
    """List known users, or just my user when ``is_my_user`` is present."""
    if is_my_user is not None:
        try:
            users = store.get_my_user().collection()
        except NotFoundError:
            users = UserCollection.empty()
    else:
        users = store.get_users()
    return Response(content=users.json(), media_type="application/json", headers=NO_CACHE_HEADERS)


def _create_user(store: UserStore, body: bytes) -> str:
    user = store.new_user_from_container_json(body).save()
    store.set_my_user(user)
    return user.json()


@router.post("")
async def create_user(request: Request, store: StoreDep) -> Response:
    """Create a profile and make it my user."""
    body = await request.body()
    content = await run_in_threadpool(_create_user, store, body)
    return Response(content=content, media_type="application/json", headers=NO_CACHE_HEADERS)
