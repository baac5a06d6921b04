"""
Request URL construction for the live endpoint.
"""

import re
from collections.abc import Iterator, Mapping
from typing import Any
from urllib.parse import quote, urlencode, urlsplit, urlunsplit

_PATH_PARAM = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")
_WEBSOCKET_SCHEMES = {"http": "ws", "https": "wss", "ws": "ws", "wss": "wss"}


def _query_pairs(query: Mapping[str, Any]) -> Iterator[tuple[str, str]]:
  for key, value in query.items():
    if value is None:
      continue
    values = value if isinstance(value, (list, tuple)) else [value]
    for item in values:
      if isinstance(item, bool):
        yield key, "true" if item else "false"
      else:
        yield key, str(item)


def build_request_url(
  base_url: str,
  version: str,
  endpoint: str,
  path_params: Mapping[str, Any] | None = None,
  query: Mapping[str, Any] | None = None,
) -> str:
  """
  Build a websocket URL for an endpoint template such as `:version/listen`.

  `:name` segments are replaced from `path_params`, with `:version` defaulting to `version`.
  Query values of None are dropped, booleans are rendered as `true`/`false`, and lists
  repeat their key once per item.

  :raises ValueError: The base URL is not http(s)/ws(s), or a path parameter is missing
  """
  parts = urlsplit(base_url)
  scheme = _WEBSOCKET_SCHEMES.get(parts.scheme)
  if scheme is None or not parts.netloc:
    raise ValueError(f"Invalid base URL: {base_url!r}")

  params = {"version": version, **(path_params or {})}

  def substitute(match: re.Match[str]) -> str:
    name = match.group(1)
    if name not in params:
      raise ValueError(f"Missing path parameter ':{name}' for endpoint {endpoint!r}")
    return quote(str(params[name]), safe="")

  path = _PATH_PARAM.sub(substitute, endpoint.strip("/"))
  full_path = f"{parts.path.rstrip('/')}/{path}"
  query_string = urlencode(list(_query_pairs(query or {})))

  return urlunsplit((scheme, parts.netloc, full_path, query_string, ""))
