import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, Response
from pymongo.database import Database

from database import get_db
from dtos import HallDto, HallToCreate, HallToPatch, HallToUpdate, hall_to_dto
from links import ResourceRoutes
from pagination import RequestParameters
from repositories import HallRepository
from responses import allow, collection_body, created, oid, request_parameters, resource_body, validated
from schemas import Hall
from shaping import check_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/halls", tags=["halls"])

HALL_ROUTES = ResourceRoutes(
    get="get_hall",
    update="update_hall",
    partial_update="partially_update_hall",
    delete="delete_hall",
    id_param="hall_id",
)


def get_hall_repository(database: Database = Depends(get_db)) -> HallRepository:
    return HallRepository(database)


@router.get("", name="get_halls")
def list_halls(
    request: Request,
    response: Response,
    params: RequestParameters = Depends(request_parameters),
    accept: Optional[str] = Header(None),
    repo: HallRepository = Depends(get_hall_repository),
):
    check_fields(HallDto, params.fields)
    page = repo.get_all(params)
    return collection_body(
        request, response, page, hall_to_dto, HallDto, params, "halls", HALL_ROUTES, "get_halls", accept
    )


@router.get("/{hall_id}", name="get_hall")
def get_hall(
    hall_id: str,
    request: Request,
    fields: Optional[str] = Query(None),
    accept: Optional[str] = Header(None),
    repo: HallRepository = Depends(get_hall_repository),
):
    check_fields(HallDto, fields)
    hall = repo.get(oid(hall_id))
    if not hall:
        raise HTTPException(status_code=404, detail="Hall not found")
    return resource_body(request, hall_to_dto(hall), fields, HALL_ROUTES, accept)


@router.post("")
def create_hall(
    payload: HallToCreate,
    request: Request,
    accept: Optional[str] = Header(None),
    repo: HallRepository = Depends(get_hall_repository),
):
    hid = repo.add(Hall(**payload.model_dump()))
    return created(request, hall_to_dto(repo.get(oid(hid))), HALL_ROUTES, accept)


@router.put("/{hall_id}", name="update_hall")
def update_hall(
    hall_id: str,
    payload: HallToUpdate,
    request: Request,
    accept: Optional[str] = Header(None),
    repo: HallRepository = Depends(get_hall_repository),
):
    document_id = oid(hall_id)
    if not repo.exists(document_id):
        logger.info("Hall %s not found, creating it", hall_id)
        repo.add(Hall(**payload.model_dump()), document_id=document_id)
        return created(request, hall_to_dto(repo.get(document_id)), HALL_ROUTES, accept)
    repo.update(document_id, payload.model_dump())
    return Response(status_code=204)


@router.patch("/{hall_id}", name="partially_update_hall")
def partially_update_hall(
    hall_id: str,
    payload: HallToPatch,
    request: Request,
    accept: Optional[str] = Header(None),
    repo: HallRepository = Depends(get_hall_repository),
):
    document_id = oid(hall_id)
    changes = payload.model_dump(exclude_unset=True)
    hall = repo.get(document_id)
    if hall is None:
        logger.info("Hall %s not found, creating it from patch", hall_id)
        repo.add(Hall(**validated(HallToCreate, changes).model_dump()), document_id=document_id)
        return created(request, hall_to_dto(repo.get(document_id)), HALL_ROUTES, accept)
    patched = validated(HallToUpdate, {**hall_to_dto(hall).model_dump(exclude={"id"}), **changes})
    repo.update(document_id, patched.model_dump())
    return Response(status_code=204)


@router.delete("/{hall_id}", name="delete_hall")
def delete_hall(hall_id: str, repo: HallRepository = Depends(get_hall_repository)):
    document_id = oid(hall_id)
    if not repo.exists(document_id):
        raise HTTPException(status_code=404, detail="Hall not found")
    repo.delete(document_id)
    return Response(status_code=204)


@router.options("")
def halls_options():
    return allow(["GET", "POST", "OPTIONS"])


@router.options("/{hall_id}")
def hall_options(hall_id: str):
    return allow(["GET", "PUT", "PATCH", "DELETE", "OPTIONS"])
