"""
aiohttp class-based view that applies declared parameter encodings.

The action of an EncodedView is the lower-cased HTTP method, so encodings are
declared per handler method:

    @skip_parameter_encoding("get")
    class FileView(EncodedView):
        async def get(self) -> web.Response:
            params = await self.encoded_params()
            ...

aiohttp decodes query and form values as UTF-8 and replaces invalid bytes.
This view splits the raw query string and urlencoded bodies itself, decoding
with "surrogateescape" so binary-tagged values get their original bytes back.
"""

import logging
from typing import Any, Iterable
from urllib.parse import parse_qsl, unquote

from aiohttp import web

from ..controller.api import ParameterEncodingController
from ..encodings.utils import ERROR_HANDLER

logger = logging.getLogger(__name__)

FORM_METHODS = frozenset({"POST", "PUT", "PATCH"})
URLENCODED = "application/x-www-form-urlencoded"
MULTIPART = "multipart/form-data"


def _collect(pairs: Iterable[tuple[str, Any]], into: dict[str, Any]) -> None:
    """Copy key/value pairs into a plain dict; repeated keys become lists.

    Keys keep request order. Later sources override earlier ones key by key.
    """
    grouped: dict[str, list[Any]] = {}
    for key, value in pairs:
        grouped.setdefault(key, []).append(value)
    for key, values in grouped.items():
        into[key] = values[0] if len(values) == 1 else values


def _parse_urlencoded(raw: str) -> list[tuple[str, str]]:
    """Split an urlencoded string, keeping undecodable bytes as surrogates."""
    return parse_qsl(
        raw, keep_blank_values=True, encoding="utf-8", errors=ERROR_HANDLER
    )


class EncodedView(web.View, ParameterEncodingController):
    """View whose handler methods receive parameters with declared encodings."""

    @property
    def action_name(self) -> str:
        return self.request.method.lower()

    async def _form_pairs(self) -> list[tuple[str, Any]]:
        content_type = self.request.content_type
        if content_type == URLENCODED:
            body = await self.request.read()
            return _parse_urlencoded(body.decode("utf-8", ERROR_HANDLER))
        if content_type == MULTIPART:
            form = await self.request.post()
            return list(form.items())
        return []

    async def raw_params(self) -> dict[str, Any]:
        """Query, form and route parameters of the request, route values last."""
        params: dict[str, Any] = {}
        _collect(_parse_urlencoded(self.request.rel_url.raw_query_string), params)
        if self.request.method in FORM_METHODS:
            _collect(await self._form_pairs(), params)
        # Route segments with invalid UTF-8 are left percent-encoded by the router.
        for key, value in self.request.match_info.items():
            params[key] = unquote(value, encoding="utf-8", errors=ERROR_HANDLER)
        return params

    async def encoded_params(self) -> dict[str, Any]:
        """Request parameters with this view's encodings applied."""
        params = await self.raw_params()
        logger.debug(
            "Encoding %d parameters for %s %s",
            len(params),
            self.request.method,
            self.request.path,
        )
        return self.encode_params(self.action_name, params)
