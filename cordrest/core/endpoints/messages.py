"""Message and reaction endpoints."""

from typing import Any, Dict, Optional

from cordrest.core.dispatcher import request
from cordrest.core.endpoints.routes import Paths, join_path, quote_segment
from cordrest.domain.models.request import HttpMethod, RequestOptions


async def get_message(channel_id: str, message_id: str, request_options: Optional[RequestOptions] = None) -> Any:
    return await request(HttpMethod.GET, join_path(Paths.CHANNELS, channel_id, Paths.MESSAGES, message_id), request_options)


async def create_message(channel_id: str, params: Dict[str, Any], request_options: Optional[RequestOptions] = None) -> Any:
    return await request(HttpMethod.POST, join_path(Paths.CHANNELS, channel_id, Paths.MESSAGES), request_options, params)


async def edit_message(
    channel_id: str,
    message_id: str,
    params: Dict[str, Any],
    request_options: Optional[RequestOptions] = None,
) -> Any:
    return await request(HttpMethod.PATCH, join_path(Paths.CHANNELS, channel_id, Paths.MESSAGES, message_id), request_options, params)


async def delete_message(channel_id: str, message_id: str, request_options: Optional[RequestOptions] = None) -> Any:
    return await request(HttpMethod.DELETE, join_path(Paths.CHANNELS, channel_id, Paths.MESSAGES, message_id), request_options)


async def add_reaction(
    channel_id: str,
    message_id: str,
    emoji: str,
    request_options: Optional[RequestOptions] = None,
) -> Any:
    path = join_path(Paths.CHANNELS, channel_id, Paths.MESSAGES, message_id, Paths.REACTIONS, quote_segment(emoji), Paths.ME)
    return await request(HttpMethod.PUT, path, request_options)
