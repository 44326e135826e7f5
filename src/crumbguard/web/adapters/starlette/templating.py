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
"""Jinja2 template globals for embedding authenticity tokens.

Works with ``starlette.templating.Jinja2Templates``, which puts the
``request`` into every template context::

    templates = Jinja2Templates(directory="templates")
    install_forgery_globals(templates.env)

    <form method="post">{{ csrf_fields() }} ... </form>
"""

from __future__ import annotations

from typing import Any

import jinja2
from markupsafe import Markup

from crumbguard.web.adapters.starlette.filters.forgery_filter import RequestForgeryTokens


def _tokens(context: Any) -> RequestForgeryTokens:
    request = context["request"]
    return request.state.forgery


@jinja2.pass_context
def csrf_fields(context: Any) -> Markup:
    return _tokens(context).hidden_fields()


@jinja2.pass_context
def csrf_meta_tags(context: Any) -> Markup:
    return _tokens(context).meta_tags()


@jinja2.pass_context
def csrf_token(context: Any) -> str:
    return _tokens(context).token()


def install_forgery_globals(env: jinja2.Environment) -> None:
    """Register ``csrf_fields``, ``csrf_meta_tags`` and ``csrf_token`` on *env*."""
    env.globals.update(
        csrf_fields=csrf_fields,
        csrf_meta_tags=csrf_meta_tags,
        csrf_token=csrf_token,
    )
