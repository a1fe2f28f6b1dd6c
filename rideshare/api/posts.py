"""Post API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from rideshare.api.dependencies import get_current_user_id, get_notifier, get_post_service
from rideshare.schemas.envelope import ResultResponse
from rideshare.schemas.post import (
    AddDriverRequest,
    PostCreatedResponse,
    PostCreateRequest,
    PostEdit,
    PostIdRequest,
    PostListResponse,
    PostLookupResponse,
    PostResponse,
    PostUpdateRequest,
)
from rideshare.services.notifications import PostNotifier
from rideshare.services.posts import PostActionError, PostNotFoundError, PostService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["posts"])


@router.get("/posts/all", response_model=PostListResponse, response_model_exclude_none=True)
async def get_all_posts(
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    posts: Annotated[PostService, Depends(get_post_service)],
):
    """Get every post, soonest departure first."""
    return PostListResponse(
        result=1, posts=[PostResponse.from_post(p) for p in posts.list_all()]
    )


@router.get(
    "/posts/by_id/{post_id}", response_model=PostLookupResponse, response_model_exclude_none=True
)
async def get_post(
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    post_id: int,
    posts: Annotated[PostService, Depends(get_post_service)],
):
    """Get a single post."""
    post = posts.get(post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="post not found")
    return PostLookupResponse(result=1, post=PostResponse.from_post(post))


@router.get(
    "/posts/search/{start}/{end}",
    response_model=PostListResponse,
    response_model_exclude_none=True,
)
async def search_posts(
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    start: str,
    end: str,
    posts: Annotated[PostService, Depends(get_post_service)],
):
    """Search posts by origin and destination. Pass `any` to leave a side open."""
    results = posts.search(start, end)
    return PostListResponse(result=1, posts=[PostResponse.from_post(p) for p in results])


@router.get("/posts/my_page", response_model=PostListResponse, response_model_exclude_none=True)
async def get_my_posts(
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    posts: Annotated[PostService, Depends(get_post_service)],
):
    """Get posts the current user uploaded, drives, or rides in."""
    results = posts.for_user(current_user_id)
    return PostListResponse(result=1, posts=[PostResponse.from_post(p) for p in results])


@router.post(
    "/posts/create", response_model=PostCreatedResponse, response_model_exclude_none=True
)
async def create_post(
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    payload: PostCreateRequest,
    posts: Annotated[PostService, Depends(get_post_service)],
):
    """Create a post. The caller is always recorded as uploader."""
    try:
        post = posts.create(payload.post, current_user_id)
    except PostActionError as e:
        return PostCreatedResponse(result=0, error=str(e))
    return PostCreatedResponse(result=1, post_id=post.id)


@router.post("/post/update", response_model=ResultResponse, response_model_exclude_none=True)
async def replace_post(
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    payload: PostUpdateRequest,
    posts: Annotated[PostService, Depends(get_post_service)],
    notifier: Annotated[PostNotifier, Depends(get_notifier)],
):
    """Replace a post with the document sent by the client."""
    try:
        post = posts.replace(payload.post)
    except PostActionError as e:
        return ResultResponse(result=0, error=str(e))

    notifier.notify_post_changed(post.id, current_user_id)
    return ResultResponse(result=1)


@router.post(
    "/posts/add_passenger", response_model=ResultResponse, response_model_exclude_none=True
)
async def add_passenger(
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    payload: PostIdRequest,
    posts: Annotated[PostService, Depends(get_post_service)],
    notifier: Annotated[PostNotifier, Depends(get_notifier)],
):
    """Join a post as a passenger. Fails if it has no driver or no free seat."""
    try:
        post = posts.add_passenger(payload.post_id, current_user_id)
    except PostActionError as e:
        return ResultResponse(result=0, error=str(e))

    notifier.notify_post_changed(post.id, current_user_id)
    return ResultResponse(result=1)


@router.post("/posts/add_driver", response_model=ResultResponse, response_model_exclude_none=True)
async def add_driver(
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    payload: AddDriverRequest,
    posts: Annotated[PostService, Depends(get_post_service)],
    notifier: Annotated[PostNotifier, Depends(get_notifier)],
):
    """Volunteer as the driver of a post that has none."""
    try:
        post = posts.add_driver(payload.post_id, current_user_id, payload.avail)
    except PostActionError as e:
        return ResultResponse(result=0, error=str(e))

    notifier.notify_post_changed(post.id, current_user_id)
    return ResultResponse(result=1)


@router.put(
    "/posts/update/{post_id}", response_model=ResultResponse, response_model_exclude_none=True
)
async def edit_post(
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    post_id: int,
    changes: PostEdit,
    posts: Annotated[PostService, Depends(get_post_service)],
    notifier: Annotated[PostNotifier, Depends(get_notifier)],
):
    """Edit the time, route, memo or seat count of a post."""
    try:
        post = posts.edit(post_id, changes)
    except PostNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="post not found"
        ) from None
    except PostActionError as e:
        return ResultResponse(result=0, error=str(e))

    notifier.notify_post_changed(post.id, current_user_id)
    return ResultResponse(result=1)
