"""HAL (application/hal+json) response helpers."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import JSONResponse

from events_api.core.config import settings
from events_api.domain.paging import Page, PageRequest

HAL_JSON = "application/hal+json"


class HALResponse(JSONResponse):
    media_type = HAL_JSON


def link(href: str) -> dict[str, str]:
    return {"href": href}


def profile_link(anchor: str) -> dict[str, str]:
    return link(f"{settings.docs_base_url}#{anchor}")


def url_for(request: Request, name: str, **path_params: Any) -> str:
    return str(request.url_for(name, **path_params))


def page_href(base: str, page_request: PageRequest) -> str:
    params: list[tuple[str, Any]] = [("page", page_request.number), ("size", page_request.size)]
    params.extend(("sort", order.as_param()) for order in page_request.sort)
    return f"{base}?{urlencode(params)}"


def resource(body: dict[str, Any], links: dict[str, dict[str, str]]) -> dict[str, Any]:
    return {**body, "_links": links}


def paged_resource(
    page: Page,
    base_href: str,
    rel: str,
    item: Callable[[Any], dict[str, Any]],
    links: dict[str, dict[str, str]] | None = None,
) -> dict[str, Any]:
    """Render a page as a HAL collection with page metadata.

    ``_embedded`` is omitted for an empty page; navigation links only appear
    when there is somewhere to navigate to.
    """
    request = page.request
    nav: dict[str, dict[str, str]] = {}

    if page.has_previous or page.has_next:
        nav["first"] = link(page_href(base_href, request.with_number(0)))
    if page.has_previous:
        nav["prev"] = link(page_href(base_href, request.with_number(page.number - 1)))
    nav["self"] = link(page_href(base_href, request))
    if page.has_next:
        nav["next"] = link(page_href(base_href, request.with_number(page.number + 1)))
    if page.has_previous or page.has_next:
        nav["last"] = link(page_href(base_href, request.with_number(max(page.total_pages - 1, 0))))

    body: dict[str, Any] = {}
    if page.items:
        body["_embedded"] = {rel: [item(i) for i in page.items]}
    body["_links"] = {**nav, **(links or {})}
    body["page"] = {
        "size": page.size,
        "totalElements": page.total_elements,
        "totalPages": page.total_pages,
        "number": page.number,
    }
    return body
