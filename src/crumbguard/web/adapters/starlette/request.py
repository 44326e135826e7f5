# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Build a :class:`RequestView` from a Starlette request."""

from __future__ import annotations

from typing import Any

from starlette.requests import Request

from crumbguard.web.request import RequestView

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

UNKNOWN_ADDRESS = "unknown"


def remote_address(request: Request, *, trust_forwarded_for: bool = False) -> str:
    """Client address, optionally taken from the first ``X-Forwarded-For`` hop."""
    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    client = request.client
    return client.host if client is not None else UNKNOWN_ADDRESS


async def build_request_view(request: Request, *, trust_forwarded_for: bool = False) -> RequestView:
    """Snapshot method, address, headers and query + form params of *request*.

    The body is buffered with ``request.body()`` before the form is parsed,
    so the filter chain can replay it to the route handler.
    """
    params: dict[str, Any] = dict(request.query_params)

    content_type = request.headers.get("content-type", "")
    if request.method not in ("GET", "HEAD") and content_type.startswith(_FORM_CONTENT_TYPES):
        await request.body()
        async with request.form() as form:
            params.update({k: v for k, v in form.items() if isinstance(v, str)})

    return RequestView(
        method=request.method,
        remote_address=remote_address(request, trust_forwarded_for=trust_forwarded_for),
        params=params,
        headers=dict(request.headers),
    )
