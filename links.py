"""
Hypermedia links for single resources and paged collections.

Links are built through a LinkResolver supplied by the web layer, which turns a
route name, its path parameters and a query map into an absolute URL.
"""

from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional

from pydantic import BaseModel

from pagination import RequestParameters

LinkResolver = Callable[[str, Mapping[str, Any], Mapping[str, Any]], str]


class Link(BaseModel):
    href: str
    rel: str
    method: str


class ResourceRoutes(NamedTuple):
    get: str
    update: str
    partial_update: str
    delete: str
    id_param: str


def build_resource_links(resolve: LinkResolver, routes: ResourceRoutes, resource_id: Any,
                         fields: Optional[str] = None) -> List[Link]:
    path = {routes.id_param: resource_id}
    self_query = {"fields": fields} if fields and fields.strip() else {}
    return [
        Link(href=resolve(routes.get, path, self_query), rel="self", method="GET"),
        Link(href=resolve(routes.update, path, {}), rel="update", method="PUT"),
        Link(href=resolve(routes.partial_update, path, {}), rel="partial-update", method="PATCH"),
        Link(href=resolve(routes.delete, path, {}), rel="delete", method="DELETE"),
    ]


def _page_params(params: RequestParameters, page_number: int) -> Dict[str, Any]:
    query: Dict[str, Any] = {
        "orderBy": params.order_by,
        "searchQuery": params.search_query,
        "pageNumber": page_number,
        "pageSize": params.page_size,
    }
    if params.fields:
        query["fields"] = params.fields
    if params.include_metadata:
        query["includeMetadata"] = "true"
    return {key: value for key, value in query.items() if value is not None}


def page_url(resolve: LinkResolver, route: str, params: RequestParameters, page_number: int) -> str:
    return resolve(route, {}, _page_params(params, page_number))


def build_collection_links(resolve: LinkResolver, route: str, params: RequestParameters,
                           has_next: bool, has_previous: bool) -> List[Link]:
    links = [Link(href=page_url(resolve, route, params, params.page_number), rel="self", method="GET")]
    if has_next:
        links.append(Link(href=page_url(resolve, route, params, params.page_number + 1), rel="next", method="GET"))
    if has_previous:
        links.append(Link(href=page_url(resolve, route, params, params.page_number - 1), rel="previous", method="GET"))
    return links
