"""cordrest: asyncio request engine for the Discord REST API.

Turns a logical API call into a decoded response or a single definitive
failure, handling authorization, body encoding, transport faults, and
server-paced rate-limit retries.
"""

from cordrest.domain.models.credential import Authorization, TokenType
from cordrest.domain.models.request import HttpMethod, RateLimitPolicy, RequestOptions
from cordrest.domain.errors import (
    CordRestError, BodyEncodingError,
    TransportError, UnknownResponseError, ResponseError, RequestTimeoutError, ConnectionFault,
    ApiError, ClientError, RateLimitedError, UnexpectedStatusError,
)
from cordrest.core.dispatcher import (
    RequestDispatcher, request, set_default_request_options, get_default_request_options,
)

__version__ = "0.3.0"
