"""
Basic usage: GET and POST requests with typed parsing.
"""

from typing import List

from pydantic import BaseModel

from http_request import (
    BODY_TO_JSON,
    HttpBodyJSON,
    HttpClient,
    HttpRequestGet,
    BaseHttpRequest,
    ServerError,
    UriParams,
    body_to_model,
)

BASE_URL = "https://jsonplaceholder.typicode.com"


class Post(BaseModel):
    id: int
    userId: int
    title: str


def get_posts(client: HttpClient):
    """GET with query parameters, parsed into a list of models."""
    print("\n=== GET /posts?userId=1 ===")
    request = HttpRequestGet(f"{BASE_URL}/posts", UriParams().add("userId", 1), parser=body_to_model(List[Post]))
    posts = client.parse_request(request)
    print(f"{len(posts)} posts, first: {posts[0].title}")


def create_post(client: HttpClient):
    """POST with a JSON body."""
    print("\n=== POST /posts ===")
    request = (BaseHttpRequest.Builder()
               .set_url(f"{BASE_URL}/posts")
               .set_body(HttpBodyJSON({"title": "My Post", "body": "content", "userId": 1}))
               .set_response_parser(BODY_TO_JSON)
               .build())
    print(f"Created: {client.parse_request(request)}")


def missing_post(client: HttpClient):
    """HTTP errors are raised as ServerError."""
    print("\n=== GET /posts/0 ===")
    try:
        client.parse_request(HttpRequestGet(f"{BASE_URL}/posts/0", parser=BODY_TO_JSON))
    except ServerError as e:
        print(f"Status: {e.status_code}, temporary: {e.is_temporary_failure()}")


if __name__ == "__main__":
    with HttpClient() as client:
        get_posts(client)
        create_post(client)
        missing_post(client)
