import logging
from typing import Any, Dict, Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, Response
from pymongo.database import Database

from database import get_db
from dtos import TicketDto, TicketToCreate, TicketToPatch, TicketToUpdate, ticket_to_dto
from links import ResourceRoutes
from pagination import RequestParameters
from repositories import SeatRepository, ShowtimeRepository, TicketRepository
from responses import allow, collection_body, created, oid, request_parameters, resource_body, validated
from schemas import Ticket
from shaping import check_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/showtimes/{showtime_id}/tickets", tags=["tickets"])

TICKET_ROUTES = ResourceRoutes(
    get="get_ticket",
    update="update_ticket",
    partial_update="partially_update_ticket",
    delete="delete_ticket",
    id_param="ticket_id",
)


def get_ticket_repository(database: Database = Depends(get_db)) -> TicketRepository:
    return TicketRepository(database)


def existing_showtime(showtime_id: str, database: Database = Depends(get_db)) -> Dict[str, Any]:
    showtime = ShowtimeRepository(database).get(oid(showtime_id))
    if not showtime:
        raise HTTPException(status_code=404, detail="Showtime not found")
    return showtime


def _check_owner(repo: TicketRepository, document_id: ObjectId, showtime_id: str) -> None:
    if repo.owned_elsewhere(document_id, showtime_id=showtime_id):
        raise HTTPException(status_code=409, detail=f"Ticket {document_id} belongs to another showtime")


def _check_seat(repo: TicketRepository, showtime: Dict[str, Any], seat_id: str,
                ticket_id: Optional[ObjectId] = None) -> None:
    seat = SeatRepository(repo.db).get(oid(seat_id))
    if not seat:
        raise HTTPException(status_code=404, detail="Seat not found")
    if seat["hall_id"] != showtime["hall_id"]:
        raise HTTPException(status_code=400, detail=f"Seat {seat_id} is not in the showtime's hall")
    if repo.seat_taken(str(showtime["_id"]), seat_id, exclude_id=ticket_id):
        raise HTTPException(status_code=400, detail=f"Seat {seat_id} already booked")


@router.get("", name="get_tickets")
def list_tickets(
    request: Request,
    response: Response,
    showtime: Dict[str, Any] = Depends(existing_showtime),
    params: RequestParameters = Depends(request_parameters),
    accept: Optional[str] = Header(None),
    repo: TicketRepository = Depends(get_ticket_repository),
):
    check_fields(TicketDto, params.fields)
    page = repo.get_all(params, showtime_id=str(showtime["_id"]))
    return collection_body(
        request, response, page, ticket_to_dto, TicketDto, params, "tickets", TICKET_ROUTES, "get_tickets", accept
    )


@router.get("/{ticket_id}", name="get_ticket")
def get_ticket(
    ticket_id: str,
    request: Request,
    showtime: Dict[str, Any] = Depends(existing_showtime),
    fields: Optional[str] = Query(None),
    accept: Optional[str] = Header(None),
    repo: TicketRepository = Depends(get_ticket_repository),
):
    check_fields(TicketDto, fields)
    ticket = repo.get(oid(ticket_id), showtime_id=str(showtime["_id"]))
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return resource_body(request, ticket_to_dto(ticket), fields, TICKET_ROUTES, accept)


@router.post("")
def create_ticket(
    payload: TicketToCreate,
    request: Request,
    showtime: Dict[str, Any] = Depends(existing_showtime),
    accept: Optional[str] = Header(None),
    repo: TicketRepository = Depends(get_ticket_repository),
):
    _check_seat(repo, showtime, payload.seat_id)
    tid = repo.add(Ticket(showtime_id=str(showtime["_id"]), **payload.model_dump()))
    return created(request, ticket_to_dto(repo.get(oid(tid))), TICKET_ROUTES, accept)


@router.put("/{ticket_id}", name="update_ticket")
def update_ticket(
    ticket_id: str,
    payload: TicketToUpdate,
    request: Request,
    showtime: Dict[str, Any] = Depends(existing_showtime),
    accept: Optional[str] = Header(None),
    repo: TicketRepository = Depends(get_ticket_repository),
):
    document_id = oid(ticket_id)
    showtime_id = str(showtime["_id"])
    exists = repo.exists(document_id, showtime_id=showtime_id)
    if not exists:
        _check_owner(repo, document_id, showtime_id)
    _check_seat(repo, showtime, payload.seat_id, ticket_id=document_id)
    if not exists:
        logger.info("Ticket %s not found, creating it", ticket_id)
        repo.add(Ticket(showtime_id=showtime_id, **payload.model_dump()), document_id=document_id)
        return created(request, ticket_to_dto(repo.get(document_id)), TICKET_ROUTES, accept)
    repo.update(document_id, payload.model_dump())
    return Response(status_code=204)


@router.patch("/{ticket_id}", name="partially_update_ticket")
def partially_update_ticket(
    ticket_id: str,
    payload: TicketToPatch,
    request: Request,
    showtime: Dict[str, Any] = Depends(existing_showtime),
    accept: Optional[str] = Header(None),
    repo: TicketRepository = Depends(get_ticket_repository),
):
    document_id = oid(ticket_id)
    showtime_id = str(showtime["_id"])
    changes = payload.model_dump(exclude_unset=True)
    ticket = repo.get(document_id, showtime_id=showtime_id)
    if ticket is None:
        _check_owner(repo, document_id, showtime_id)
        logger.info("Ticket %s not found, creating it from patch", ticket_id)
        new_ticket = validated(TicketToCreate, changes)
        _check_seat(repo, showtime, new_ticket.seat_id, ticket_id=document_id)
        repo.add(Ticket(showtime_id=showtime_id, **new_ticket.model_dump()), document_id=document_id)
        return created(request, ticket_to_dto(repo.get(document_id)), TICKET_ROUTES, accept)
    current = ticket_to_dto(ticket).model_dump(exclude={"id", "showtime_id"})
    patched = validated(TicketToUpdate, {**current, **changes})
    _check_seat(repo, showtime, patched.seat_id, ticket_id=document_id)
    repo.update(document_id, patched.model_dump())
    return Response(status_code=204)


@router.delete("/{ticket_id}", name="delete_ticket")
def delete_ticket(
    ticket_id: str,
    showtime: Dict[str, Any] = Depends(existing_showtime),
    repo: TicketRepository = Depends(get_ticket_repository),
):
    document_id = oid(ticket_id)
    if not repo.exists(document_id, showtime_id=str(showtime["_id"])):
        raise HTTPException(status_code=404, detail="Ticket not found")
    repo.delete(document_id)
    return Response(status_code=204)


@router.options("")
def tickets_options(showtime_id: str):
    return allow(["GET", "POST", "OPTIONS"])


@router.options("/{ticket_id}")
def ticket_options(showtime_id: str, ticket_id: str):
    return allow(["GET", "PUT", "PATCH", "DELETE", "OPTIONS"])
