"""HTTP routes for records, MusicBrainz lookups and orders."""

from typing import Any

from fastapi import APIRouter, Depends, Query, Request, Response, status

from recordstore.domain.exceptions import NotFoundError
from recordstore.infrastructure.api.schemas import (
    CreateOrderRequest,
    CreateRecordRequest,
    UpdateRecordRequest,
)
from recordstore.infrastructure.container import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


records_router = APIRouter(prefix="/records", tags=["records"])
orders_router = APIRouter(prefix="/orders", tags=["orders"])


# -----------------------------------------------------------------------------
# RECORDS
# -----------------------------------------------------------------------------


@records_router.post("", status_code=status.HTTP_201_CREATED)
async def create_record(
    body: CreateRecordRequest, services: ServiceContainer = Depends(get_container)
) -> dict[str, Any]:
    record = await services.record_service.create(body.to_fields())
    return record.to_dict()


@records_router.get("")
async def list_records(
    q: str | None = None,
    artist: str | None = None,
    album: str | None = None,
    format: str | None = None,
    category: str | None = None,
    page: int | None = None,
    limit: int | None = None,
    fields: str | None = None,
    services: ServiceContainer = Depends(get_container),
) -> dict[str, Any]:
    result = await services.catalog.query(
        q=q,
        artist=artist,
        album=album,
        format=format,
        category=category,
        page=page,
        limit=limit,
        fields=fields,
    )
    return result.to_dict()


@records_router.post("/seed", status_code=status.HTTP_201_CREATED)
async def seed_records(services: ServiceContainer = Depends(get_container)) -> dict[str, Any]:
    result = await services.seeder.seed()
    return {
        "message": "Records seeded successfully",
        "count": result.inserted_count,
        "skipped": result.failed_count,
    }


@records_router.get("/mb/fetch/{mbid}")
async def fetch_musicbrainz_document(
    mbid: str, services: ServiceContainer = Depends(get_container)
) -> dict[str, Any]:
    return await services.enrichment.release_document(mbid)


@records_router.get("/mb/{mbid}")
async def get_record_by_mbid(
    mbid: str, services: ServiceContainer = Depends(get_container)
) -> dict[str, Any]:
    record = await services.record_service.find_by_mbid(mbid)
    if record is None:
        raise NotFoundError("Record not found")
    return record.to_dict()


@records_router.get("/musicbrainz/search/artists")
async def search_artists(
    q: str | None = Query(default=None), services: ServiceContainer = Depends(get_container)
) -> list[dict[str, Any]]:
    artists = await services.enrichment.search_artists(q)
    return [artist.to_dict() for artist in artists]


@records_router.get("/musicbrainz/artists/{artist_id}/releases")
async def get_artist_releases(
    artist_id: str, services: ServiceContainer = Depends(get_container)
) -> list[dict[str, Any]]:
    releases = await services.enrichment.artist_releases(artist_id)
    return [release.to_dict() for release in releases]


@records_router.get("/musicbrainz/releases/{mbid}/xml")
async def get_release_xml(
    mbid: str, services: ServiceContainer = Depends(get_container)
) -> Response:
    xml = await services.enrichment.release_xml(mbid)
    return Response(content=xml, media_type="application/xml")


@records_router.get("/musicbrainz/{mbid}")
async def get_release_metadata(
    mbid: str, services: ServiceContainer = Depends(get_container)
) -> dict[str, Any]:
    metadata = await services.enrichment.lookup_release(mbid)
    return metadata.to_dict()


@records_router.get("/{record_id}")
async def get_record(
    record_id: int, services: ServiceContainer = Depends(get_container)
) -> dict[str, Any]:
    record = await services.record_service.find_one(record_id)
    if record is None:
        raise NotFoundError("Record not found")
    return record.to_dict()


@records_router.put("/{record_id}")
async def update_record(
    record_id: int,
    body: UpdateRecordRequest,
    services: ServiceContainer = Depends(get_container),
) -> dict[str, Any]:
    record = await services.record_service.update(record_id, body.to_fields())
    if record is None:
        raise NotFoundError("Record not found")
    return record.to_dict()


@records_router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(
    record_id: int, services: ServiceContainer = Depends(get_container)
) -> Response:
    deleted = await services.record_service.delete(record_id)
    if deleted is None:
        raise NotFoundError("Record not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# -----------------------------------------------------------------------------
# ORDERS
# -----------------------------------------------------------------------------


@orders_router.post("", status_code=status.HTTP_201_CREATED)
async def create_order(
    body: CreateOrderRequest, services: ServiceContainer = Depends(get_container)
) -> dict[str, Any]:
    order = await services.order_service.place_order(body.record_id, body.quantity)
    return order.to_dict()


@orders_router.get("")
async def list_orders(services: ServiceContainer = Depends(get_container)) -> list[dict[str, Any]]:
    return [order.to_dict() for order in await services.order_service.list_orders()]


@orders_router.get("/{order_id}")
async def get_order(
    order_id: int, services: ServiceContainer = Depends(get_container)
) -> dict[str, Any]:
    order = await services.order_service.get_order(order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return order.to_dict()
