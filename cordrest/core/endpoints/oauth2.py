"""OAuth2 endpoints.

Token exchange is the one endpoint family that takes a form-encoded body
instead of JSON.
"""

from typing import Any, Dict, Optional

from cordrest.core.dispatcher import request
from cordrest.core.endpoints.routes import Paths, join_path
from cordrest.domain.models.request import HttpMethod, RequestOptions
from cordrest.infrastructure.codec.json_codec import form_encode


async def token_exchange(params: Dict[str, Any], request_options: Optional[RequestOptions] = None) -> Any:
    """Exchanges an authorization code or refresh token for an access token.

    Args:
        params: client_id, client_secret, grant_type, redirect_uri, scope, and
            either `code` or `refresh_token` depending on grant_type.
        request_options: Per-call options.

    Returns:
        The token payload (access_token, token_type, expires_in, refresh_token, scope).
    """
    return await request(HttpMethod.POST, join_path(Paths.OAUTH2, Paths.TOKEN), request_options, form_encode(params))


async def get_current_application_information(request_options: Optional[RequestOptions] = None) -> Any:
    return await request(HttpMethod.GET, join_path(Paths.OAUTH2, Paths.APPLICATIONS, Paths.ME), request_options)


async def get_current_authorization_information(request_options: Optional[RequestOptions] = None) -> Any:
    return await request(HttpMethod.GET, join_path(Paths.OAUTH2, Paths.ME), request_options)
