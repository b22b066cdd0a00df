"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), turns the raw
arguments into a RequestOptions bundle, dispatches through the
RequestDispatcher, and reports the outcome through the UserInterface.
"""

import json
import logging
from typing import Any, Optional

from cordrest.core.dispatcher import RequestDispatcher
from cordrest.core.endpoints.routes import Paths, join_path
from cordrest.domain.errors import ApiError, BodyEncodingError, TransportError
from cordrest.domain.interfaces.user_interface import UserInterface
from cordrest.domain.models.credential import Authorization, TokenType
from cordrest.domain.models.request import HttpMethod, RateLimitPolicy, RequestOptions

logger = logging.getLogger(__name__)


class CommandHandler:
    """Handles incoming commands and delegates to the dispatcher."""

    def __init__(
        self,
        dispatcher: RequestDispatcher,
        ui: UserInterface,
        token: Optional[str] = None,
        token_type: TokenType = TokenType.BOT,
        connection_timeout: Optional[int] = None,
        retry_count: Optional[int] = None,
    ):
        """Initializes the CommandHandler.

        Args:
            dispatcher: Dispatcher used for every command.
            ui: Output sink for results and errors.
            token: Configured token, used when a command does not pass one.
            token_type: Configured token type.
            connection_timeout: Configured timeout in ms.
            retry_count: Configured rate-limit retry count.
        """
        self.dispatcher = dispatcher
        self.ui = ui
        self.token = token
        self.token_type = token_type
        self.connection_timeout = connection_timeout
        self.retry_count = retry_count

    def _on_rate_limited(self, response: Any, attempts: int) -> None:
        retry_after = response.get("retry_after") if isinstance(response, dict) else None
        self.ui.display_warning(f"Rate limited (attempt {attempts}); retry_after={retry_after}")

    def build_options(
        self,
        token: Optional[str] = None,
        token_type: Optional[TokenType] = None,
        timeout: Optional[int] = None,
        retries: Optional[int] = None,
    ) -> RequestOptions:
        """Builds per-call options, falling back to the configured values."""
        effective_token = token or self.token
        authorization = None
        if effective_token:
            authorization = Authorization(effective_token, token_type or self.token_type)

        return RequestOptions(
            authorization=authorization,
            connection_timeout=timeout if timeout is not None else self.connection_timeout,
            rate_limit=RateLimitPolicy(
                retry_count=retries if retries is not None else self.retry_count,
                callback=self._on_rate_limited,
            ),
        )

    async def handle_request(
        self,
        method: str,
        path: str,
        json_body: Optional[str] = None,
        form_body: Optional[str] = None,
        options: Optional[RequestOptions] = None,
    ) -> bool:
        """Handles the 'request' command. Returns True on success."""
        logger.info(f"Handling 'request' command: {method.upper()} {path}")

        if json_body and form_body:
            self.ui.display_error("Use either --body or --form, not both.")
            return False

        body: Any = None
        if json_body:
            try:
                body = json.loads(json_body)
            except json.JSONDecodeError as e:
                self.ui.display_error(f"--body is not valid JSON: {e}")
                return False
        elif form_body:
            body = form_body

        try:
            HttpMethod(method.upper())
        except ValueError:
            self.ui.display_error(f"Unsupported method '{method}'. Use one of: {', '.join(m.value for m in HttpMethod)}.")
            return False

        try:
            result = await self.dispatcher.dispatch(method.upper(), path.lstrip("/"), options or self.build_options(), body)
        except ApiError as e:
            logger.warning(f"Request failed with status {e.status_code}")
            self.ui.display_error(f"Request failed with HTTP {e.status_code}")
            if e.response is not None:
                self.ui.display_result(e.response, title=f"Error body ({e.status_code})")
            return False
        except TransportError as e:
            logger.error(f"Transport failure: {e}")
            self.ui.display_error(f"Transport failure: {e}")
            return False
        except BodyEncodingError as e:
            self.ui.display_error(str(e))
            return False

        self.ui.display_result(result, title=f"{method.upper()} {path}")
        return True

    async def handle_me(self, options: Optional[RequestOptions] = None) -> bool:
        """Handles the 'me' command: fetches the user the token belongs to."""
        effective = options or self.build_options()
        if effective.authorization is None:
            self.ui.display_error("No token configured. Set CORDREST_TOKEN or pass --token.")
            return False
        return await self.handle_request(HttpMethod.GET.value, join_path(Paths.USERS, Paths.ME), options=effective)
