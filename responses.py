"""
Helpers shared by the resource routers: ids, query parameters, links and the
two response flavours (plain JSON and the HATEOAS media type).
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Type, TypeVar, Union

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException, Query, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

import settings
from links import LinkResolver, ResourceRoutes, build_collection_links, build_resource_links, page_url
from pagination import Page, RequestParameters
from shaping import shape, shape_many

ModelT = TypeVar("ModelT", bound=BaseModel)


def oid(id_str: str) -> ObjectId:
    try:
        return ObjectId(id_str)
    except (InvalidId, TypeError):
        raise HTTPException(status_code=400, detail="Invalid id")


def request_parameters(
    order_by: Optional[str] = Query(None, alias="orderBy"),
    fields: Optional[str] = Query(None),
    page_number: int = Query(1, alias="pageNumber"),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, alias="pageSize"),
    search_query: Optional[str] = Query(None, alias="searchQuery"),
    include_metadata: bool = Query(False, alias="includeMetadata"),
) -> RequestParameters:
    return RequestParameters(
        order_by=order_by,
        fields=fields,
        page_number=page_number,
        page_size=page_size,
        search_query=search_query,
        include_metadata=include_metadata,
    )


def wants_hateoas(accept: Optional[str]) -> bool:
    if not accept:
        return False
    media_types = [part.split(";")[0].strip().lower() for part in accept.split(",")]
    return settings.HATEOAS_MEDIA_TYPE.lower() in media_types


def link_resolver(request: Request) -> LinkResolver:
    """
    Resolve named routes to absolute URLs.

    Path parameters of the current request are reused, so a nested resource
    only has to name its own id. Lookup goes through `url_for`, which also
    finds routes inside included routers.
    """

    def resolve(route_name: str, path_params: Mapping[str, Any], query: Mapping[str, Any]) -> str:
        url = request.url_for(
            route_name, **{**request.path_params, **{name: str(value) for name, value in path_params.items()}}
        )
        query = {key: value for key, value in query.items() if value is not None}
        if query:
            url = url.include_query_params(**query)
        return str(url)

    return resolve


def allow(methods: Sequence[str]) -> Response:
    return Response(status_code=200, headers={"Allow": ",".join(methods)})


def validated(model_type: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    """Validate a merged patch document, failing like a bad request body would."""
    try:
        return model_type(**data)
    except ValidationError as e:
        raise RequestValidationError(e.errors())


def _dump_links(links) -> List[Dict[str, str]]:
    return [link.model_dump() for link in links]


def resource_body(request: Request, dto: BaseModel, fields: Optional[str], routes: ResourceRoutes,
                  accept: Optional[str]) -> Dict[str, Any]:
    shaped = shape(dto, fields)
    if wants_hateoas(accept):
        shaped["links"] = _dump_links(build_resource_links(link_resolver(request), routes, dto.id, fields))
    return shaped


def created(request: Request, dto: BaseModel, routes: ResourceRoutes, accept: Optional[str]) -> JSONResponse:
    body = resource_body(request, dto, None, routes, accept)
    location = link_resolver(request)(routes.get, {routes.id_param: dto.id}, {})
    return JSONResponse(status_code=201, content=jsonable_encoder(body), headers={"Location": location})


def collection_body(
    request: Request,
    response: Response,
    page: Page,
    to_dto: Callable[[Dict[str, Any]], BaseModel],
    dto_type: type,
    params: RequestParameters,
    collection_key: str,
    routes: ResourceRoutes,
    collection_route: str,
    accept: Optional[str],
) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
    resolve = link_resolver(request)
    dtos = [to_dto(document) for document in page.items]
    shaped = shape_many(dtos, params.fields, dto_type)

    if wants_hateoas(accept):
        metadata = page.metadata().model_dump(by_alias=True, exclude={"previous_page_link", "next_page_link"})
        response.headers["X-Pagination"] = page.metadata().model_dump_json(
            by_alias=True, exclude={"previous_page_link", "next_page_link"}
        )
        for record, dto in zip(shaped, dtos):
            record["links"] = _dump_links(build_resource_links(resolve, routes, dto.id, params.fields))
        body: Dict[str, Any] = {}
        if params.include_metadata:
            body["metadata"] = metadata
        body[collection_key] = shaped
        body["links"] = _dump_links(
            build_collection_links(resolve, collection_route, params, page.has_next, page.has_previous)
        )
        return body

    previous_page_link = page_url(resolve, collection_route, params, page.current_page - 1) if page.has_previous else None
    next_page_link = page_url(resolve, collection_route, params, page.current_page + 1) if page.has_next else None
    metadata = page.metadata(previous_page_link, next_page_link)
    response.headers["X-Pagination"] = metadata.model_dump_json(by_alias=True)
    if params.include_metadata:
        return {"metadata": metadata.model_dump(by_alias=True), "records": shaped}
    return shaped
