"""
Helper utilities for Locust performance scenarios.

Request wrappers that validate status and body shape through Locust's
``catch_response`` protocol, plus randomised payloads. Ids are drawn
from the fixed ranges the placeholder API serves (10 users, 100 posts)
so reads never produce artificial ``404`` responses.
"""

from __future__ import annotations

import random
from typing import Any

from locust.clients import HttpSession

from shared.constants import ApiEndpoint, HttpStatus
from shared.test_data import random_string

USER_IDS = range(1, 11)
POST_IDS = range(1, 101)


def safe_json(response: Any) -> Any:
    """
    Return the parsed JSON body, or ``None`` if it is not JSON.

    Locust responses may carry HTML error pages on 5xx or gateway
    timeouts; parsing must not abort the virtual user.
    """
    try:
        return response.json()
    except ValueError:
        return None


def random_user_id() -> int:
    return random.choice(USER_IDS)


def random_post_id() -> int:
    return random.choice(POST_IDS)


def random_post_payload(user_id: int | None = None) -> dict[str, Any]:
    """Valid create-post body with a unique title to defeat caching."""
    return {
        "title": f"Perf post {random_string(8)}",
        "body": "Created by Locust performance test",
        "userId": user_id or random_user_id(),
    }


def get_list(client: HttpSession, path: str, *, name: str, params: dict | None = None) -> None:
    """GET a collection and require a non-empty JSON array."""
    with client.get(path, params=params, name=name, catch_response=True) as response:
        if response.status_code != HttpStatus.OK:
            response.failure(f"Expected 200, got {response.status_code}")
            return
        body = safe_json(response)
        if not isinstance(body, list) or not body:
            response.failure("Expected a non-empty JSON array")
            return
        response.success()


def get_single(client: HttpSession, path: str, *, expected_id: int, name: str) -> None:
    """GET one resource and require its ``id`` to match the request."""
    with client.get(path, name=name, catch_response=True) as response:
        if response.status_code != HttpStatus.OK:
            response.failure(f"Expected 200, got {response.status_code}")
            return
        body = safe_json(response)
        if not isinstance(body, dict) or body.get("id") != expected_id:
            response.failure("Fetched id does not match request")
            return
        response.success()


def create_post(client: HttpSession) -> None:
    """POST a post; the placeholder API echoes it back with a new id."""
    payload = random_post_payload()
    with client.post(
        ApiEndpoint.POSTS,
        json=payload,
        name=f"{ApiEndpoint.POSTS} [POST]",
        catch_response=True,
    ) as response:
        if response.status_code != HttpStatus.CREATED:
            response.failure(f"Expected 201, got {response.status_code}")
            return
        body = safe_json(response)
        if not isinstance(body, dict) or body.get("title") != payload["title"]:
            response.failure("Create response does not echo the payload")
            return
        response.success()
