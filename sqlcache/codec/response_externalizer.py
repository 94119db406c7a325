"""
Externalizer for httpx.Response objects, dood!

Responses hold live streams and a client reference, so they can not be
pickled. The externalizer stores what is needed to rebuild an equivalent
response: status code, headers, text encoding and the body text. JSON bodies
are stored normalized (compact, sorted keys), so equal documents are stored
equally whatever the server formatting was.
"""

import logging
import threading
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ..utils import jsonDumps
from .types import CodecInput, CodecOutput, Externalizer

logger = logging.getLogger(__name__)

DEFAULT_RENDER_CACHE_SIZE = 10

# Stored body is decoded and re-encoded on restore: neither the content coding
# nor the original length apply to it
_DROPPED_HEADERS = frozenset({"content-encoding", "content-length"})


class IdentityRenderCache:
    """
    Small memo of rendered text keyed by object identity, dood!

    Entries are looked up by ``id(obj)`` and confirmed with an ``is`` check.
    The cache holds a reference to each object it memoizes, so an id can not
    be reused while its entry is alive. Oldest inserted entries are evicted
    once the size goes over ``maxSize``.
    """

    def __init__(self, maxSize: int = DEFAULT_RENDER_CACHE_SIZE):
        if maxSize < 1:
            raise ValueError(f"maxSize should be positive, got {maxSize}")
        self.maxSize = maxSize
        self._entries: OrderedDict[int, Tuple[Any, str]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, obj: Any) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(id(obj), None)
            if entry is not None and entry[0] is obj:
                return entry[1]
            return None

    def put(self, obj: Any, rendered: str) -> None:
        with self._lock:
            self._entries[id(obj)] = (obj, rendered)
            while len(self._entries) > self.maxSize:
                self._entries.popitem(last=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class HttpxResponseExternalizer(Externalizer[httpx.Response]):
    """
    Externalizer for ``httpx.Response``, dood!

    Register it for ``httpx.Response`` to cache HTTP responses in a
    serialized-object cache:

        >>> registry = ExternalizerRegistry()
        >>> registry.register(httpx.Response, HttpxResponseExternalizer())
    """

    def __init__(self, renderCacheSize: int = DEFAULT_RENDER_CACHE_SIZE):
        self.renderCache = IdentityRenderCache(renderCacheSize)

    def _renderEntity(self, response: httpx.Response) -> str:
        """Body text, JSON documents parsed and dumped in normal form"""
        if "json" in response.headers.get("content-type", ""):
            try:
                return jsonDumps(response.json())
            except ValueError as e:
                logger.debug(f"JSON response body does not parse, storing it as is: {e}")
        return response.text

    def _renderBody(self, response: httpx.Response) -> str:
        rendered = self.renderCache.get(response)
        if rendered is None:
            rendered = self._renderEntity(response)
            logger.debug(f"Rendered response body ({len(rendered)} chars), dood!")
            self.renderCache.put(response, rendered)
        return rendered

    @staticmethod
    def _groupHeaders(headers: httpx.Headers) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {}
        names: Dict[str, str] = {}
        for name, value in headers.multi_items():
            lowerName = name.lower()
            if lowerName in _DROPPED_HEADERS:
                continue
            # First spelling of a header name wins
            name = names.setdefault(lowerName, name)
            grouped.setdefault(name, []).append(value)
        return grouped

    def encode(self, output: CodecOutput, value: httpx.Response) -> None:
        output.writeInt(value.status_code)
        output.writeObject(self._groupHeaders(value.headers))
        output.writeString(value.encoding or "utf-8")
        output.writeString(self._renderBody(value))

    def decode(self, input: CodecInput) -> httpx.Response:
        statusCode = input.readInt()
        grouped: Dict[str, Any] = input.readObject()
        encoding = input.readString()
        body = input.readString()

        headers: List[Tuple[str, str]] = []
        for name, values in grouped.items():
            if isinstance(values, list):
                headers.extend((name, str(value)) for value in values)
            else:
                headers.append((name, str(values)))

        response = httpx.Response(statusCode, headers=headers, content=body.encode(encoding, errors="replace"))
        response.encoding = encoding
        return response
