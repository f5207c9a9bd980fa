"""Tests for hypermedia link building."""

from urllib.parse import parse_qs, urlencode, urlparse

from links import ResourceRoutes, build_collection_links, build_resource_links, page_url
from pagination import RequestParameters

ROUTES = ResourceRoutes(
    get="get_ticket",
    update="update_ticket",
    partial_update="partially_update_ticket",
    delete="delete_ticket",
    id_param="ticket_id",
)


def resolve(route_name, path_params, query):
    path = "/".join(str(value) for value in path_params.values())
    encoded = urlencode(query)
    return f"http://test/{route_name}/{path}" + (f"?{encoded}" if encoded else "")


def query_of(href):
    return parse_qs(urlparse(href).query)


def test_resource_links_without_fields():
    links = build_resource_links(resolve, ROUTES, "abc")

    assert [(link.rel, link.method) for link in links] == [
        ("self", "GET"),
        ("update", "PUT"),
        ("partial-update", "PATCH"),
        ("delete", "DELETE"),
    ]
    self_links = [link for link in links if link.rel == "self"]
    assert len(self_links) == 1
    assert "fields" not in query_of(self_links[0].href)
    assert urlparse(self_links[0].href).path == "/get_ticket/abc"
    assert all(urlparse(link.href).path.endswith("/abc") for link in links)


def test_resource_links_with_fields_only_on_self():
    links = build_resource_links(resolve, ROUTES, "abc", fields="Id")

    assert query_of(links[0].href)["fields"] == ["Id"]
    assert all("fields" not in query_of(link.href) for link in links[1:])


def test_blank_fields_are_left_out():
    links = build_resource_links(resolve, ROUTES, "abc", fields="  ")

    assert "fields" not in query_of(links[0].href)


def test_collection_links_middle_page():
    params = RequestParameters(order_by="price desc", search_query="vip", page_number=2, page_size=5)

    links = build_collection_links(resolve, "get_tickets", params, has_next=True, has_previous=True)

    assert [link.rel for link in links] == ["self", "next", "previous"]
    pages = {link.rel: query_of(link.href) for link in links}
    assert pages["self"]["pageNumber"] == ["2"]
    assert pages["next"]["pageNumber"] == ["3"]
    assert pages["previous"]["pageNumber"] == ["1"]
    for query in pages.values():
        assert query["orderBy"] == ["price desc"]
        assert query["searchQuery"] == ["vip"]
        assert query["pageSize"] == ["5"]


def test_collection_links_skip_missing_neighbours():
    params = RequestParameters(page_number=1, page_size=10)

    only_self = build_collection_links(resolve, "get_tickets", params, has_next=False, has_previous=False)
    with_next = build_collection_links(resolve, "get_tickets", params, has_next=True, has_previous=False)

    assert [link.rel for link in only_self] == ["self"]
    assert [link.rel for link in with_next] == ["self", "next"]


def test_page_url_keeps_fields_and_metadata_flag():
    params = RequestParameters(fields="id,price", include_metadata=True)

    query = query_of(page_url(resolve, "get_tickets", params, 4))

    assert query["fields"] == ["id,price"]
    assert query["includeMetadata"] == ["true"]
    assert query["pageNumber"] == ["4"]
    assert "orderBy" not in query
