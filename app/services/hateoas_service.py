import logging
import math
from itertools import combinations
from typing import Any, List, Mapping, Optional, Protocol
from fastapi import Request
from starlette.routing import NoMatchFound
from app.schemas.pagination import Link

logger = logging.getLogger("tracker.hateoas")


class UrlResolver(Protocol):
    def resolve(self, route_name: str, params: Optional[Mapping[str, Any]] = None) -> str:
        ...


class RequestUrlResolver:
    """
    Resolves named FastAPI routes to absolute URLs for the current request.

    Parameters the route path accepts are substituted into it, every other
    parameter is appended as a query string. Unknown routes resolve to an
    empty string.
    """

    def __init__(self, request: Request):
        self.request = request

    def resolve(self, route_name: str, params: Optional[Mapping[str, Any]] = None) -> str:
        params = dict(params or {})
        # url_for only matches when the path params are exactly the route's own
        for size in range(len(params), -1, -1):
            for names in combinations(params, size):
                path_params = {k: str(params[k]) for k in names}
                try:
                    url = self.request.url_for(route_name, **path_params)
                except NoMatchFound:
                    continue
                query_params = {k: v for k, v in params.items() if k not in path_params}
                if query_params:
                    url = url.include_query_params(**query_params)
                return str(url)

        logger.warning(
            "Could not build link",
            extra={"route_name": route_name, "params": sorted(params)},
        )
        return ""


class HateoasService:
    """Builds navigation links for single resources and paged results."""

    def generate_resource_links(self, resource_name: str, resource_id, url_resolver: UrlResolver) -> List[Link]:
        route_params = {"id": resource_id}
        return [
            Link(rel="self", href=url_resolver.resolve(f"Get{resource_name}", route_params), method="GET"),
            Link(rel="update", href=url_resolver.resolve(f"Update{resource_name}", route_params), method="PUT"),
            Link(rel="delete", href=url_resolver.resolve(f"Delete{resource_name}", route_params), method="DELETE"),
        ]

    def generate_pagination_links(self, paged_result, resource_name: str, url_resolver: UrlResolver) -> List[Link]:
        """
        next/last when more items follow this page, prev/first when this is
        not the first page. A result that fits on one page gets no links.
        """
        current_page = paged_result.current_page
        page_size = paged_result.page_size
        total_items = paged_result.total_items
        list_route = f"Get{resource_name}s"

        has_next = current_page * page_size < total_items
        has_previous = current_page > 1

        def page_link(rel: str, page_number: int) -> Link:
            href = url_resolver.resolve(list_route, {"pageNumber": page_number, "pageSize": page_size})
            return Link(rel=rel, href=href, method="GET")

        links = []
        if has_next:
            links.append(page_link("next", current_page + 1))
            links.append(page_link("last", math.ceil(total_items / page_size)))
        if has_previous:
            links.append(page_link("prev", current_page - 1))
            links.append(page_link("first", 1))
        return links
