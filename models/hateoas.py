from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.settings import settings


class LinkSpecError(ValueError):
    """Raised when a link specification is malformed (a programming error, not a document problem)."""


class HATEOASLink(BaseModel):
    rel: str          # "self", "detail", "orderLineDetail"
    href: str         # resolved template, not validated as a URI


# -----------------------------------------------------------------------------
# Link specification
# -----------------------------------------------------------------------------
class LinkSpec(BaseModel):
    """
    Describes one link to inject into a JSON document.

    `query` is the path walked to reach the nodes that receive the link: each
    segment is a property name or the array wildcard (`"[]"` by default). An
    empty query means the link lands on the node the walk starts from.
    """
    rel: str = Field(
        ...,
        min_length=1,
        description="Relation type of the injected link"
    )
    href: str = Field(
        ...,
        description="Href template; {Dotted.Path} placeholders are looked up in the landing node"
    )
    status_code: int = Field(
        settings.DEFAULT_LINK_STATUS,
        ge=100,
        le=599,
        description="Response status the link is conditioned on"
    )
    query: tuple[str, ...] = Field(
        (),
        description="Path segments leading to the nodes that receive the link"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("query", mode="before")
    @classmethod
    def _query_not_null(cls, value):
        if value is None:
            raise LinkSpecError("query must be a sequence of path segments, not None")
        if isinstance(value, str):
            raise LinkSpecError(f"query must be a sequence of path segments, got the string {value!r}")
        return value

    @classmethod
    def of(cls, rel: str, href: str, *query: str, status_code: int | None = None) -> LinkSpec:
        """Build a spec positionally: `LinkSpec.of("detail", "/orders/{OrderNo}", "Results", "[]")`."""
        if status_code is None:
            status_code = settings.DEFAULT_LINK_STATUS
        return cls(rel=rel, href=href, status_code=status_code, query=query)

    @property
    def is_landing(self) -> bool:
        return not self.query

    def next_layer(self) -> LinkSpec:
        """Copy of this spec with the first path segment consumed."""
        return self.model_copy(update={"query": self.query[1:]})
