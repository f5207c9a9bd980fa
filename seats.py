import logging
from typing import Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, Response
from pymongo.database import Database

from database import get_db
from dtos import SeatDto, SeatToCreate, SeatToPatch, SeatToUpdate, seat_to_dto
from links import ResourceRoutes
from pagination import RequestParameters
from repositories import HallRepository, SeatRepository
from responses import allow, collection_body, created, oid, request_parameters, resource_body, validated
from schemas import Seat
from shaping import check_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/halls/{hall_id}/seats", tags=["seats"])

SEAT_ROUTES = ResourceRoutes(
    get="get_seat",
    update="update_seat",
    partial_update="partially_update_seat",
    delete="delete_seat",
    id_param="seat_id",
)


def get_seat_repository(database: Database = Depends(get_db)) -> SeatRepository:
    return SeatRepository(database)


def existing_hall_id(hall_id: str, database: Database = Depends(get_db)) -> str:
    if not HallRepository(database).exists(oid(hall_id)):
        raise HTTPException(status_code=404, detail="Hall not found")
    return str(oid(hall_id))


def _check_owner(repo: SeatRepository, document_id: ObjectId, hall_id: str) -> None:
    if repo.owned_elsewhere(document_id, hall_id=hall_id):
        raise HTTPException(status_code=409, detail=f"Seat {document_id} belongs to another hall")


@router.get("", name="get_seats")
def list_seats(
    request: Request,
    response: Response,
    hall_id: str = Depends(existing_hall_id),
    params: RequestParameters = Depends(request_parameters),
    accept: Optional[str] = Header(None),
    repo: SeatRepository = Depends(get_seat_repository),
):
    check_fields(SeatDto, params.fields)
    page = repo.get_all(params, hall_id=hall_id)
    return collection_body(
        request, response, page, seat_to_dto, SeatDto, params, "seats", SEAT_ROUTES, "get_seats", accept
    )


@router.get("/{seat_id}", name="get_seat")
def get_seat(
    seat_id: str,
    request: Request,
    hall_id: str = Depends(existing_hall_id),
    fields: Optional[str] = Query(None),
    accept: Optional[str] = Header(None),
    repo: SeatRepository = Depends(get_seat_repository),
):
    check_fields(SeatDto, fields)
    seat = repo.get(oid(seat_id), hall_id=hall_id)
    if not seat:
        raise HTTPException(status_code=404, detail="Seat not found")
    return resource_body(request, seat_to_dto(seat), fields, SEAT_ROUTES, accept)


@router.post("")
def create_seat(
    payload: SeatToCreate,
    request: Request,
    hall_id: str = Depends(existing_hall_id),
    accept: Optional[str] = Header(None),
    repo: SeatRepository = Depends(get_seat_repository),
):
    sid = repo.add(Seat(hall_id=hall_id, **payload.model_dump()))
    return created(request, seat_to_dto(repo.get(oid(sid))), SEAT_ROUTES, accept)


@router.put("/{seat_id}", name="update_seat")
def update_seat(
    seat_id: str,
    payload: SeatToUpdate,
    request: Request,
    hall_id: str = Depends(existing_hall_id),
    accept: Optional[str] = Header(None),
    repo: SeatRepository = Depends(get_seat_repository),
):
    document_id = oid(seat_id)
    if not repo.exists(document_id, hall_id=hall_id):
        _check_owner(repo, document_id, hall_id)
        logger.info("Seat %s not found, creating it", seat_id)
        repo.add(Seat(hall_id=hall_id, **payload.model_dump()), document_id=document_id)
        return created(request, seat_to_dto(repo.get(document_id)), SEAT_ROUTES, accept)
    repo.update(document_id, payload.model_dump())
    return Response(status_code=204)


@router.patch("/{seat_id}", name="partially_update_seat")
def partially_update_seat(
    seat_id: str,
    payload: SeatToPatch,
    request: Request,
    hall_id: str = Depends(existing_hall_id),
    accept: Optional[str] = Header(None),
    repo: SeatRepository = Depends(get_seat_repository),
):
    document_id = oid(seat_id)
    changes = payload.model_dump(exclude_unset=True)
    seat = repo.get(document_id, hall_id=hall_id)
    if seat is None:
        _check_owner(repo, document_id, hall_id)
        logger.info("Seat %s not found, creating it from patch", seat_id)
        new_seat = validated(SeatToCreate, changes)
        repo.add(Seat(hall_id=hall_id, **new_seat.model_dump()), document_id=document_id)
        return created(request, seat_to_dto(repo.get(document_id)), SEAT_ROUTES, accept)
    current = seat_to_dto(seat).model_dump(exclude={"id", "hall_id"})
    repo.update(document_id, validated(SeatToUpdate, {**current, **changes}).model_dump())
    return Response(status_code=204)


@router.delete("/{seat_id}", name="delete_seat")
def delete_seat(
    seat_id: str,
    hall_id: str = Depends(existing_hall_id),
    repo: SeatRepository = Depends(get_seat_repository),
):
    document_id = oid(seat_id)
    if not repo.exists(document_id, hall_id=hall_id):
        raise HTTPException(status_code=404, detail="Seat not found")
    repo.delete(document_id)
    return Response(status_code=204)


@router.options("")
def seats_options(hall_id: str):
    return allow(["GET", "POST", "OPTIONS"])


@router.options("/{seat_id}")
def seat_options(hall_id: str, seat_id: str):
    return allow(["GET", "PUT", "PATCH", "DELETE", "OPTIONS"])
