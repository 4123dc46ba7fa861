from fastapi import APIRouter, Request

from events_api.api.hal import HALResponse, link, profile_link, url_for

router = APIRouter(tags=["index"])


@router.get("/api", name="index", response_class=HALResponse)
def index(request: Request):
    return HALResponse(
        content={
            "_links": {
                "events": link(url_for(request, "query_events")),
                "profile": profile_link("resources-index-access"),
            }
        }
    )
