from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from events_api.api.hal import (
    HALResponse,
    link,
    paged_resource,
    profile_link,
    resource,
    url_for,
)
from events_api.api.schemas.events import EventIn, EventOut
from events_api.auth.deps import CurrentAccount, OptionalAccount
from events_api.db import get_db
from events_api.domain.events import EventRecord
from events_api.domain.paging import PageRequest, SortOrder
from events_api.services.events_service import EventService, can_manage
from events_api.stores.interfaces import SORTABLE_PROPERTIES
from events_api.stores.sqlalchemy_store import SqlAlchemyEventStore

router = APIRouter(prefix="/api/events", tags=["events"])

DBSession = Annotated[Session, Depends(get_db)]

MAX_PAGE_SIZE = 2000
# Keeps page * size well inside a 64-bit OFFSET
MAX_PAGE_NUMBER = 2_147_483_647


def get_event_service(db: DBSession) -> EventService:
    return EventService(SqlAlchemyEventStore(db))


Events = Annotated[EventService, Depends(get_event_service)]


def _parse_sort(values: list[str] | None) -> tuple[SortOrder, ...]:
    orders = []
    for raw in values or []:
        prop, _, direction = raw.partition(",")
        prop = prop.strip()
        direction = direction.strip().lower() or "asc"
        if prop not in SORTABLE_PROPERTIES:
            raise HTTPException(
                status_code=400,
                detail={"code": "INVALID_SORT", "message": f"unknown sort property: {prop}"},
            )
        if direction not in {"asc", "desc"}:
            raise HTTPException(
                status_code=400,
                detail={"code": "INVALID_SORT", "message": f"unknown sort direction: {direction}"},
            )
        orders.append(SortOrder(prop=prop, descending=direction == "desc"))
    return tuple(orders)


def _self_href(request: Request, record: EventRecord) -> str:
    return url_for(request, "get_event", event_id=record.id)


def _event_body(record: EventRecord) -> dict:
    return EventOut.model_validate(record).to_json()


@router.post("", status_code=201, response_class=HALResponse)
def create_event(payload: EventIn, request: Request, events: Events, account: CurrentAccount):
    record = events.create_event(payload.model_dump(), account)

    self_href = _self_href(request, record)
    body = resource(
        _event_body(record),
        {
            "self": link(self_href),
            "query-events": link(url_for(request, "query_events")),
            "update-event": link(self_href),
            "profile": profile_link("resources-events-create"),
        },
    )
    return HALResponse(status_code=201, content=body, headers={"Location": self_href})


@router.get("", name="query_events", response_class=HALResponse)
def query_events(
    request: Request,
    events: Events,
    account: OptionalAccount,
    page: int = Query(default=0, ge=0, le=MAX_PAGE_NUMBER),
    size: int = Query(default=20, ge=1, le=MAX_PAGE_SIZE),
    sort: list[str] | None = Query(default=None),
):
    page_request = PageRequest(number=page, size=size, sort=_parse_sort(sort))
    result = events.list_events(page_request)

    def item(record: EventRecord) -> dict:
        return resource(_event_body(record), {"self": link(_self_href(request, record))})

    links = {"profile": profile_link("resources-events-list")}
    if account is not None:
        links["create-event"] = link(url_for(request, "query_events"))

    return HALResponse(
        content=paged_resource(
            result,
            base_href=url_for(request, "query_events"),
            rel="eventList",
            item=item,
            links=links,
        )
    )


@router.get("/{event_id}", name="get_event", response_class=HALResponse)
def get_event(event_id: int, request: Request, events: Events, account: OptionalAccount):
    record = events.get_event(event_id)

    self_href = _self_href(request, record)
    links = {
        "self": link(self_href),
        "profile": profile_link("resources-events-get"),
    }
    if can_manage(account, record):
        links["update-event"] = link(self_href)

    return HALResponse(content=resource(_event_body(record), links))


@router.put("/{event_id}", response_class=HALResponse)
def update_event(
    event_id: int,
    payload: EventIn,
    request: Request,
    events: Events,
    account: CurrentAccount,
):
    record = events.update_event(event_id, payload.model_dump(), account)

    body = resource(
        _event_body(record),
        {
            "self": link(_self_href(request, record)),
            "profile": profile_link("resources-events-update"),
        },
    )
    return HALResponse(content=body)
