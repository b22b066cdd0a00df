"""User endpoints."""

from typing import Any, Dict, Optional

from cordrest.core.dispatcher import request
from cordrest.core.endpoints.routes import Paths, build_query, join_path
from cordrest.domain.models.request import HttpMethod, RequestOptions


async def get_current_user(request_options: Optional[RequestOptions] = None) -> Any:
    return await request(HttpMethod.GET, join_path(Paths.USERS, Paths.ME), request_options)


async def get_user(user_id: str, request_options: Optional[RequestOptions] = None) -> Any:
    return await request(HttpMethod.GET, join_path(Paths.USERS, user_id), request_options)


async def get_current_user_guilds(
    params: Optional[Dict[str, Any]] = None,
    request_options: Optional[RequestOptions] = None,
) -> Any:
    path = join_path(Paths.USERS, Paths.ME, Paths.GUILDS) + build_query(params)
    return await request(HttpMethod.GET, path, request_options)


async def create_dm(recipient_id: str, request_options: Optional[RequestOptions] = None) -> Any:
    return await request(HttpMethod.POST, join_path(Paths.USERS, Paths.ME, Paths.CHANNELS), request_options, {"recipient_id": recipient_id})
