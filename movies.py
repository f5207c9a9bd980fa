import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, Response
from pymongo.database import Database

from database import get_db
from dtos import MovieDto, MovieToCreate, MovieToPatch, MovieToUpdate, movie_to_dto
from links import ResourceRoutes
from pagination import RequestParameters
from repositories import MovieRepository
from responses import allow, collection_body, created, oid, request_parameters, resource_body, validated
from schemas import Movie
from shaping import check_fields

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/movies", tags=["movies"])

MOVIE_ROUTES = ResourceRoutes(
    get="get_movie",
    update="update_movie",
    partial_update="partially_update_movie",
    delete="delete_movie",
    id_param="movie_id",
)


def get_movie_repository(database: Database = Depends(get_db)) -> MovieRepository:
    return MovieRepository(database)


@router.get("", name="get_movies")
def list_movies(
    request: Request,
    response: Response,
    params: RequestParameters = Depends(request_parameters),
    accept: Optional[str] = Header(None),
    repo: MovieRepository = Depends(get_movie_repository),
):
    check_fields(MovieDto, params.fields)
    page = repo.get_all(params)
    return collection_body(
        request, response, page, movie_to_dto, MovieDto, params, "movies", MOVIE_ROUTES, "get_movies", accept
    )


@router.get("/{movie_id}", name="get_movie")
def get_movie(
    movie_id: str,
    request: Request,
    fields: Optional[str] = Query(None),
    accept: Optional[str] = Header(None),
    repo: MovieRepository = Depends(get_movie_repository),
):
    check_fields(MovieDto, fields)
    movie = repo.get(oid(movie_id))
    if not movie:
        raise HTTPException(status_code=404, detail="Movie not found")
    return resource_body(request, movie_to_dto(movie), fields, MOVIE_ROUTES, accept)


@router.post("")
def create_movie(
    payload: MovieToCreate,
    request: Request,
    accept: Optional[str] = Header(None),
    repo: MovieRepository = Depends(get_movie_repository),
):
    mid = repo.add(Movie(**payload.model_dump()))
    return created(request, movie_to_dto(repo.get(oid(mid))), MOVIE_ROUTES, accept)


@router.put("/{movie_id}", name="update_movie")
def update_movie(
    movie_id: str,
    payload: MovieToUpdate,
    request: Request,
    accept: Optional[str] = Header(None),
    repo: MovieRepository = Depends(get_movie_repository),
):
    document_id = oid(movie_id)
    if not repo.exists(document_id):
        logger.info("Movie %s not found, creating it", movie_id)
        repo.add(Movie(**payload.model_dump()), document_id=document_id)
        return created(request, movie_to_dto(repo.get(document_id)), MOVIE_ROUTES, accept)
    repo.update(document_id, payload.model_dump())
    return Response(status_code=204)


@router.patch("/{movie_id}", name="partially_update_movie")
def partially_update_movie(
    movie_id: str,
    payload: MovieToPatch,
    request: Request,
    accept: Optional[str] = Header(None),
    repo: MovieRepository = Depends(get_movie_repository),
):
    document_id = oid(movie_id)
    changes = payload.model_dump(exclude_unset=True)
    movie = repo.get(document_id)
    if movie is None:
        logger.info("Movie %s not found, creating it from patch", movie_id)
        repo.add(Movie(**validated(MovieToCreate, changes).model_dump()), document_id=document_id)
        return created(request, movie_to_dto(repo.get(document_id)), MOVIE_ROUTES, accept)
    patched = validated(MovieToUpdate, {**movie_to_dto(movie).model_dump(exclude={"id"}), **changes})
    repo.update(document_id, patched.model_dump())
    return Response(status_code=204)


@router.delete("/{movie_id}", name="delete_movie")
def delete_movie(movie_id: str, repo: MovieRepository = Depends(get_movie_repository)):
    document_id = oid(movie_id)
    if not repo.exists(document_id):
        raise HTTPException(status_code=404, detail="Movie not found")
    repo.delete(document_id)
    return Response(status_code=204)


@router.options("")
def movies_options():
    return allow(["GET", "POST", "OPTIONS"])


@router.options("/{movie_id}")
def movie_options(movie_id: str):
    return allow(["GET", "PUT", "PATCH", "DELETE", "OPTIONS"])
