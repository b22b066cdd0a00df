"""Channel endpoints."""

from typing import Any, Dict, Optional

from cordrest.core.dispatcher import request
from cordrest.core.endpoints.routes import Paths, build_query, join_path
from cordrest.domain.models.request import HttpMethod, RequestOptions


async def get_channel(channel_id: str, request_options: Optional[RequestOptions] = None) -> Any:
    return await request(HttpMethod.GET, join_path(Paths.CHANNELS, channel_id), request_options)


async def modify_channel(channel_id: str, params: Dict[str, Any], request_options: Optional[RequestOptions] = None) -> Any:
    return await request(HttpMethod.PATCH, join_path(Paths.CHANNELS, channel_id), request_options, params)


async def delete_channel(channel_id: str, request_options: Optional[RequestOptions] = None) -> Any:
    return await request(HttpMethod.DELETE, join_path(Paths.CHANNELS, channel_id), request_options)


async def get_channel_messages(
    channel_id: str,
    params: Optional[Dict[str, Any]] = None,
    request_options: Optional[RequestOptions] = None,
) -> Any:
    """Lists messages; params may hold around/before/after/limit."""
    path = join_path(Paths.CHANNELS, channel_id, Paths.MESSAGES) + build_query(params)
    return await request(HttpMethod.GET, path, request_options)


async def trigger_typing_indicator(channel_id: str, request_options: Optional[RequestOptions] = None) -> Any:
    return await request(HttpMethod.POST, join_path(Paths.CHANNELS, channel_id, Paths.TYPING), request_options)
