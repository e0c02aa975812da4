"""
Path-driven link injection.

A `LinkSpec` names a relation, an href template and a path through the
document. `walk` follows the path (property names descend into objects, the
wildcard fans out over arrays) and, on every node it lands on, resolves the
href template against that node and appends the link to its `links` array.

    >>> doc = {"Results": [{"OrderNo": 1}, {"OrderNo": 2}]}
    >>> walk(doc, LinkSpec.of("detail", "/orders/{OrderNo}", "Results", "[]"))
    >>> doc["Results"][0]["links"]
    [{'rel': 'detail', 'href': '/orders/1'}]

Annotation is best effort: a path that does not fit the document, or a
template that cannot be filled, leaves that branch untouched.
"""
from __future__ import annotations

import json
import re
from typing import Any, Union

from loguru import logger

from config.settings import settings
from models.hateoas import HATEOASLink, LinkSpec, LinkSpecError

JSONScalar = Union[str, int, float, bool, None]
JSONNode = Union[dict[str, Any], list[Any], JSONScalar]

# {OrderNo}, {Client.FirstName}
PLACEHOLDER = re.compile(r"\{([A-Za-z0-9_]+(?:\.[A-Za-z0-9_]+)*)\}")


# -----------------------------------------------------------------------------
# Template resolution
# -----------------------------------------------------------------------------
def template_parameters(template: str) -> list[str]:
    """Distinct placeholder paths of `template`, in order of first appearance."""
    seen: list[str] = []
    for match in PLACEHOLDER.finditer(template):
        if match.group(1) not in seen:
            seen.append(match.group(1))
    return seen


def get_value(node: JSONNode, path: list[str]) -> JSONNode:
    """
    Follow `path` one property at a time starting at `node`.

    Raises KeyError if a step meets a non-object or a missing property.
    """
    current = node
    for name in path:
        if not isinstance(current, dict) or name not in current:
            raise KeyError(name)
        current = current[name]
    return current


def _stringify(value: JSONNode) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def resolve_parameters(template: str, node: JSONNode) -> str | None:
    """
    Replace every {Dotted.Path} placeholder in `template` with the value found in `node`.

    Returns None as soon as one placeholder cannot be resolved (missing
    property, non-object on the way, or a null value); partial hrefs are never
    produced. Property names are matched exactly.
    """
    result = template
    for path in template_parameters(template):
        placeholder = "{" + path + "}"
        try:
            value = get_value(node, path.split("."))
        except KeyError as missing:
            logger.debug("Unresolved placeholder {} in {!r}: no property {}", placeholder, template, missing)
            return None
        if value is None:
            logger.debug("Unresolved placeholder {} in {!r}: value is null", placeholder, template)
            return None
        # substituted text is searched again by later placeholders
        result = result.replace(placeholder, _stringify(value))
    return result


# -----------------------------------------------------------------------------
# Link mutation
# -----------------------------------------------------------------------------
def append_link(node: dict[str, Any], link: HATEOASLink, *, links_key: str | None = None) -> bool:
    """Append `link` to the node's links array, creating it if absent. Not idempotent."""
    if links_key is None:
        links_key = settings.LINKS_PROPERTY
    # models dumped without exclude_none carry "links": null
    if node.get(links_key) is None:
        node[links_key] = []
    links = node[links_key]
    if not isinstance(links, list):
        logger.debug("Cannot append link: {!r} is a {}, not an array", links_key, type(links).__name__)
        return False
    links.append(link.model_dump())
    return True


# -----------------------------------------------------------------------------
# Traversal
# -----------------------------------------------------------------------------
def walk(
    node: JSONNode,
    spec: LinkSpec,
    *,
    links_key: str | None = None,
    wildcard: str | None = None,
) -> None:
    """
    Inject the link described by `spec` into every node reached along `spec.query`.

    Mutates `node` in place. Shape mismatches and missing properties end the
    branch silently; only a malformed `spec` raises.
    """
    if not isinstance(spec, LinkSpec):
        raise LinkSpecError(f"expected a LinkSpec, got {type(spec).__name__}")
    if spec.query is None:
        raise LinkSpecError(f"link {spec.rel!r} has no query; use an empty sequence to link the root")

    if links_key is None:
        links_key = settings.LINKS_PROPERTY
    if wildcard is None:
        wildcard = settings.ARRAY_WILDCARD

    if spec.is_landing:
        if not isinstance(node, dict):
            logger.debug("Link {!r} landed on a {}, not an object", spec.rel, type(node).__name__)
            return
        href = resolve_parameters(spec.href, node)
        if href is not None:
            append_link(node, HATEOASLink(rel=spec.rel, href=href), links_key=links_key)
        return

    remaining = spec.next_layer()
    segment = spec.query[0]

    if segment == wildcard:
        if not isinstance(node, list):
            logger.debug("Link {!r}: wildcard applied to a {}, not an array", spec.rel, type(node).__name__)
            return
        for member in node:
            walk(member, remaining, links_key=links_key, wildcard=wildcard)
        return

    if not isinstance(node, dict):
        logger.debug("Link {!r}: property {!r} sought on a {}", spec.rel, segment, type(node).__name__)
        return
    value = node.get(segment)
    if value is None:
        logger.debug("Link {!r}: property {!r} is absent or null", spec.rel, segment)
        return
    walk(value, remaining, links_key=links_key, wildcard=wildcard)
