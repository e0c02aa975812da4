"""
Response post-processing: decorate JSON responses with the links configured for their route.

Links are configured explicitly in a `LinkRegistry`, keyed by route name,
and installed on the application with `install_links`. Routers opt in with
`route_class=LinkingRoute`.
"""
from __future__ import annotations

from collections.abc import Callable, Coroutine, Iterable
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.routing import APIRoute
from loguru import logger

from models.hateoas import LinkSpec, LinkSpecError
from utils.codec import JSONCodec
from utils.hateoas import JSONNode, walk


# -----------------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------------
class LinkRegistry:
    """Route name -> link specifications applied to that route's responses."""

    def __init__(self, links: dict[str, Iterable[LinkSpec]] | None = None):
        self._links: dict[str, list[LinkSpec]] = {}
        for route_name, specs in (links or {}).items():
            self.add(route_name, *specs)

    def add(self, route_name: str, *specs: LinkSpec) -> LinkRegistry:
        for spec in specs:
            if not isinstance(spec, LinkSpec):
                raise LinkSpecError(f"links for route {route_name!r} must be LinkSpec, got {type(spec).__name__}")
        self._links.setdefault(route_name, []).extend(specs)
        return self

    def specs_for(self, route_name: str) -> list[LinkSpec]:
        return list(self._links.get(route_name, ()))

    def __contains__(self, route_name: object) -> bool:
        return route_name in self._links

    def __len__(self) -> int:
        return len(self._links)


# -----------------------------------------------------------------------------
# Injector
# -----------------------------------------------------------------------------
def applicable(specs: Iterable[LinkSpec], status_code: int) -> list[LinkSpec]:
    """Specs whose status gate matches `status_code`."""
    return [spec for spec in specs if spec.status_code == status_code]


def is_json_response(response: Response) -> bool:
    media_type = (response.headers.get("content-type") or response.media_type or "").split(";")[0].strip()
    return media_type == "application/json" or media_type.endswith("+json")


class LinkInjector:
    def __init__(
        self,
        codec: JSONCodec | None = None,
        *,
        links_key: str | None = None,
        wildcard: str | None = None,
    ):
        self.codec = codec or JSONCodec()
        self.links_key = links_key
        self.wildcard = wildcard

    def apply(self, document: Any, specs: Iterable[LinkSpec]) -> JSONNode:
        """Walk every spec over `document` in order. Application objects are converted with the codec first."""
        node = document if isinstance(document, (dict, list)) else self.codec.to_node(document)
        for spec in specs:
            walk(node, spec, links_key=self.links_key, wildcard=self.wildcard)
        return node

    def inject(self, response: Response, specs: Iterable[LinkSpec]) -> Response:
        """
        Return a copy of `response` whose JSON body carries the links of `specs`.

        Non-JSON or empty responses, and responses whose status no spec is
        gated on, are returned as they are. If the body cannot be processed
        the original response is kept.
        """
        specs = applicable(specs, response.status_code)
        if not specs or not is_json_response(response):
            return response
        body = getattr(response, "body", None)
        if not body:
            return response

        try:
            document = self.codec.decode(body)
            content = self.codec.encode(self.apply(document, specs))
        except LinkSpecError:
            raise
        except Exception as e:
            logger.opt(exception=e).warning("Link injection failed; returning the original response")
            return response

        patched = Response(
            content=content,
            status_code=response.status_code,
            media_type=response.media_type or "application/json",
            background=response.background,
        )
        patched.raw_headers = [
            (name, value) for name, value in response.raw_headers if name != b"content-length"
        ] + [(b"content-length", str(len(content)).encode("latin-1"))]
        return patched


# -----------------------------------------------------------------------------
# FastAPI integration
# -----------------------------------------------------------------------------
def install_links(app: FastAPI, registry: LinkRegistry, injector: LinkInjector | None = None) -> None:
    """Make `registry` (and the injector that applies it) available to every LinkingRoute of `app`."""
    app.state.link_registry = registry
    app.state.link_injector = injector or LinkInjector()


class LinkingRoute(APIRoute):
    """APIRoute that decorates its responses with the links registered under the route's name."""

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        original_route_handler = super().get_route_handler()
        route_name = self.name

        async def custom_route_handler(request: Request) -> Response:
            # endpoint errors (HTTPException included) propagate before any injection
            response = await original_route_handler(request)

            registry: LinkRegistry | None = getattr(request.app.state, "link_registry", None)
            if registry is None or route_name not in registry:
                return response
            injector: LinkInjector = getattr(request.app.state, "link_injector", None) or LinkInjector()
            return injector.inject(response, registry.specs_for(route_name))

        return custom_route_handler
