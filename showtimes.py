import logging
from typing import Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, Response
from pymongo.database import Database

from database import get_db
from dtos import ShowtimeDto, ShowtimeToCreate, ShowtimeToPatch, ShowtimeToUpdate, showtime_to_dto
from links import ResourceRoutes
from pagination import RequestParameters
from repositories import HallRepository, MovieRepository, ShowtimeRepository
from responses import allow, collection_body, created, oid, request_parameters, resource_body, validated
from schemas import Showtime
from shaping import check_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/movies/{movie_id}/showtimes", tags=["showtimes"])

SHOWTIME_ROUTES = ResourceRoutes(
    get="get_showtime",
    update="update_showtime",
    partial_update="partially_update_showtime",
    delete="delete_showtime",
    id_param="showtime_id",
)


def get_showtime_repository(database: Database = Depends(get_db)) -> ShowtimeRepository:
    return ShowtimeRepository(database)


def existing_movie_id(movie_id: str, database: Database = Depends(get_db)) -> str:
    if not MovieRepository(database).exists(oid(movie_id)):
        raise HTTPException(status_code=404, detail="Movie not found")
    return str(oid(movie_id))


def _check_hall(database: Database, hall_id: str) -> None:
    if not HallRepository(database).exists(oid(hall_id)):
        raise HTTPException(status_code=404, detail="Hall not found")


def _check_owner(repo: ShowtimeRepository, document_id: ObjectId, movie_id: str) -> None:
    if repo.owned_elsewhere(document_id, movie_id=movie_id):
        raise HTTPException(status_code=409, detail=f"Showtime {document_id} belongs to another movie")


@router.get("", name="get_showtimes")
def list_showtimes(
    request: Request,
    response: Response,
    movie_id: str = Depends(existing_movie_id),
    params: RequestParameters = Depends(request_parameters),
    accept: Optional[str] = Header(None),
    repo: ShowtimeRepository = Depends(get_showtime_repository),
):
    check_fields(ShowtimeDto, params.fields)
    page = repo.get_all(params, movie_id=movie_id)
    return collection_body(
        request, response, page, showtime_to_dto, ShowtimeDto, params, "showtimes", SHOWTIME_ROUTES,
        "get_showtimes", accept,
    )


@router.get("/{showtime_id}", name="get_showtime")
def get_showtime(
    showtime_id: str,
    request: Request,
    movie_id: str = Depends(existing_movie_id),
    fields: Optional[str] = Query(None),
    accept: Optional[str] = Header(None),
    repo: ShowtimeRepository = Depends(get_showtime_repository),
):
    check_fields(ShowtimeDto, fields)
    showtime = repo.get(oid(showtime_id), movie_id=movie_id)
    if not showtime:
        raise HTTPException(status_code=404, detail="Showtime not found")
    return resource_body(request, showtime_to_dto(showtime), fields, SHOWTIME_ROUTES, accept)


@router.post("")
def create_showtime(
    payload: ShowtimeToCreate,
    request: Request,
    movie_id: str = Depends(existing_movie_id),
    accept: Optional[str] = Header(None),
    repo: ShowtimeRepository = Depends(get_showtime_repository),
):
    _check_hall(repo.db, payload.hall_id)
    sid = repo.add(Showtime(movie_id=movie_id, **payload.model_dump()))
    return created(request, showtime_to_dto(repo.get(oid(sid))), SHOWTIME_ROUTES, accept)


@router.put("/{showtime_id}", name="update_showtime")
def update_showtime(
    showtime_id: str,
    payload: ShowtimeToUpdate,
    request: Request,
    movie_id: str = Depends(existing_movie_id),
    accept: Optional[str] = Header(None),
    repo: ShowtimeRepository = Depends(get_showtime_repository),
):
    document_id = oid(showtime_id)
    _check_hall(repo.db, payload.hall_id)
    if not repo.exists(document_id, movie_id=movie_id):
        _check_owner(repo, document_id, movie_id)
        logger.info("Showtime %s not found, creating it", showtime_id)
        repo.add(Showtime(movie_id=movie_id, **payload.model_dump()), document_id=document_id)
        return created(request, showtime_to_dto(repo.get(document_id)), SHOWTIME_ROUTES, accept)
    repo.update(document_id, payload.model_dump())
    return Response(status_code=204)


@router.patch("/{showtime_id}", name="partially_update_showtime")
def partially_update_showtime(
    showtime_id: str,
    payload: ShowtimeToPatch,
    request: Request,
    movie_id: str = Depends(existing_movie_id),
    accept: Optional[str] = Header(None),
    repo: ShowtimeRepository = Depends(get_showtime_repository),
):
    document_id = oid(showtime_id)
    changes = payload.model_dump(exclude_unset=True)
    showtime = repo.get(document_id, movie_id=movie_id)
    if showtime is None:
        _check_owner(repo, document_id, movie_id)
        logger.info("Showtime %s not found, creating it from patch", showtime_id)
        new_showtime = validated(ShowtimeToCreate, changes)
        _check_hall(repo.db, new_showtime.hall_id)
        repo.add(Showtime(movie_id=movie_id, **new_showtime.model_dump()), document_id=document_id)
        return created(request, showtime_to_dto(repo.get(document_id)), SHOWTIME_ROUTES, accept)
    current = showtime_to_dto(showtime).model_dump(exclude={"id", "movie_id"})
    patched = validated(ShowtimeToUpdate, {**current, **changes})
    _check_hall(repo.db, patched.hall_id)
    repo.update(document_id, patched.model_dump())
    return Response(status_code=204)


@router.delete("/{showtime_id}", name="delete_showtime")
def delete_showtime(
    showtime_id: str,
    movie_id: str = Depends(existing_movie_id),
    repo: ShowtimeRepository = Depends(get_showtime_repository),
):
    document_id = oid(showtime_id)
    if not repo.exists(document_id, movie_id=movie_id):
        raise HTTPException(status_code=404, detail="Showtime not found")
    repo.delete(document_id)
    return Response(status_code=204)


@router.options("")
def showtimes_options(movie_id: str):
    return allow(["GET", "POST", "OPTIONS"])


@router.options("/{showtime_id}")
def showtime_options(movie_id: str, showtime_id: str):
    return allow(["GET", "PUT", "PATCH", "DELETE", "OPTIONS"])
