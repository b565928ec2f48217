"""Demo routes using the jsonplaceholder service api."""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from http_client_manager.api.services import get_container
from http_client_manager.container import Container
from http_client_manager.errors import NotFoundError

from . import CREATE_POST_REQUEST, SERVICE_API

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/example")


def build_post(post: Dict[str, Any], post_link: bool) -> Dict[str, Any]:
    """Summary of a post with a link to its page or back to the list."""
    if post_link:
        link = {"text": "Read more", "href": f"/example/posts/{post['id']}"}
    else:
        link = {"text": "Back to list", "href": "/example/posts"}

    return {
        "title": f"{post['id']}) {post['title']}",
        "body": post.get("body", ""),
        "link": link,
    }


@router.get("/posts")
def find_posts(container: Container = Depends(get_container)) -> List[Dict[str, Any]]:
    client = container.factory.get(SERVICE_API)
    response = client.FindPosts()
    return [build_post(post, post_link=True) for post in response]


@router.get("/posts/{post_id}")
def find_post(post_id: int, container: Container = Depends(get_container)) -> Dict[str, Any]:
    client = container.factory.get(SERVICE_API)
    response = client.FindPost({"postId": post_id})
    return {str(post_id): build_post(response.data, post_link=False)}


@router.get("/create-post")
def create_post(container: Container = Depends(get_container)) -> Dict[str, Any]:
    """Replay the ``create_post`` saved request."""
    request = container.store.load(CREATE_POST_REQUEST)
    if request is None:
        raise NotFoundError(f'Unable to load "{CREATE_POST_REQUEST}" configured request.')
    return request.execute().to_dict()
