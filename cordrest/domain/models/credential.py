"""Authorization value object attached to outgoing requests.

Holds a token type and a secret token, and caches the formatted
`Authorization` header value so that every read reflects the last assignment.
"""

from enum import Enum


class TokenType(str, Enum):
    """Authorization schemes understood by the API."""
    BOT = "Bot"
    BEARER = "Bearer"
    NONE = ""


class Authorization:
    """Credential producing a single `Authorization` header string.

    The header value is recomputed whenever `token_type` or `token` is
    assigned, so it is never stale. Owned by a single caller; concurrent
    mutation must be serialized by that caller.
    """

    def __init__(self, token: str, token_type: TokenType = TokenType.BOT):
        self._token = token
        self._token_type = TokenType(token_type)
        self._cache = ""
        self._update()

    def _update(self) -> None:
        if self._token_type is TokenType.NONE:
            self._cache = self._token
        else:
            self._cache = f"{self._token_type.value} {self._token}"

    @property
    def token_type(self) -> TokenType:
        return self._token_type

    @token_type.setter
    def token_type(self, value: TokenType) -> None:
        self._token_type = TokenType(value)
        self._update()

    @property
    def token(self) -> str:
        return self._token

    @token.setter
    def token(self, value: str) -> None:
        self._token = value
        self._update()

    @property
    def value(self) -> str:
        """The formatted header value."""
        return self._cache

    def __str__(self) -> str:
        return self._cache

    def __repr__(self) -> str:
        # Never expose the secret in reprs/logs
        return f"Authorization(token_type={self._token_type.name})"
