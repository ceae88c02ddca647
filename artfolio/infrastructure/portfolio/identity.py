"""
Adapter: Request identity.

Implements the IdentityPort from the headers of one HTTP request. The
identity provider in front of the API authenticates the caller and
forwards the user id in a header; this adapter only reads it.
"""

from typing import Mapping, Optional

from artfolio.domain.portfolio.ports import IdentityPort


class HeaderIdentityAdapter(IdentityPort):
    """Reads the current user id from a request header.

    Args:
        headers: Request headers (case-insensitive mapping).
        header_name: Header carrying the user id.
        fallback_user_id: Id used when the header is absent, for local
            development only.
    """

    def __init__(
        self,
        headers: Mapping[str, str],
        header_name: str = "X-User-Id",
        fallback_user_id: Optional[str] = None,
    ) -> None:
        self._headers = headers
        self._header_name = header_name
        self._fallback_user_id = fallback_user_id

    def current_user_id(self) -> Optional[str]:
        value = (self._headers.get(self._header_name) or "").strip()
        return value or self._fallback_user_id or None
