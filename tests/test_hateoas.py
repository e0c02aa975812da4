"""Tests for template resolution and path-driven link injection."""

import copy
import json

import pytest

from models.hateoas import LinkSpec, LinkSpecError
from utils.hateoas import (
    append_link,
    get_value,
    resolve_parameters,
    template_parameters,
    walk,
)
from models.hateoas import HATEOASLink


# -----------------------------------------------------------------------------
# resolve_parameters
# -----------------------------------------------------------------------------
def test_resolve_dotted_path():
    assert resolve_parameters("{a.b}", {"a": {"b": 7}}) == "7"


def test_resolve_missing_nested_property():
    assert resolve_parameters("{a.b}", {"a": {}}) is None


def test_repeated_token_substituted_everywhere():
    assert resolve_parameters("prefix/{x}/suffix/{x}", {"x": "42"}) == "prefix/42/suffix/42"


def test_template_without_placeholders_unchanged():
    assert resolve_parameters("/orders", {}) == "/orders"


def test_one_missing_token_fails_whole_template():
    """Even when other placeholders resolve, no partial href is produced."""
    assert resolve_parameters("/a/{a}/b/{b}", {"a": 1}) is None


def test_null_value_is_a_failure():
    assert resolve_parameters("/a/{a}", {"a": None}) is None


def test_non_object_on_the_way_fails():
    assert resolve_parameters("{a.b}", {"a": 5}) is None
    assert resolve_parameters("{a.b}", {"a": [{"b": 1}]}) is None


def test_property_names_are_case_sensitive():
    assert resolve_parameters("/orders/{orderno}", {"OrderNo": 1}) is None
    assert resolve_parameters("/orders/{OrderNo}", {"OrderNo": 1}) == "/orders/1"


def test_scalars_stringified_as_json():
    node = {"t": True, "f": False, "i": 3, "x": 1.5, "s": "abc"}
    assert resolve_parameters("{t}/{f}/{i}/{x}/{s}", node) == "true/false/3/1.5/abc"


def test_nested_values_stringified_as_compact_json():
    assert resolve_parameters("{a}", {"a": {"b": [1, 2]}}) == '{"b":[1,2]}'


def test_client_first_name_example():
    widget = {
        "ID": "123456",
        "Client": {"FirstName": "Fred", "LastName": "Ngyuen"},
        "Balance": "98765.43",
    }
    assert resolve_parameters("/a/b/{Client.FirstName}/c", widget) == "/a/b/Fred/c"


def test_ancestor_escape_is_not_a_placeholder():
    assert resolve_parameters("/x/{../Id}", {"Id": 1}) == "/x/{../Id}"


def test_underscored_names():
    assert resolve_parameters("/orders/{order_no}", {"order_no": 12}) == "/orders/12"


def test_template_parameters_in_first_appearance_order():
    assert template_parameters("/{b}/{a.c}/{b}") == ["b", "a.c"]
    assert template_parameters("/static") == []


def test_get_value_raises_on_miss():
    assert get_value({"a": {"b": 2}}, ["a", "b"]) == 2
    with pytest.raises(KeyError):
        get_value({"a": {}}, ["a", "b"])


# -----------------------------------------------------------------------------
# append_link
# -----------------------------------------------------------------------------
def test_append_link_creates_and_extends():
    node = {}
    assert append_link(node, HATEOASLink(rel="a", href="/a"))
    assert append_link(node, HATEOASLink(rel="b", href="/b"))
    assert node == {"links": [{"rel": "a", "href": "/a"}, {"rel": "b", "href": "/b"}]}


def test_append_link_replaces_null_links():
    node = {"links": None}
    append_link(node, HATEOASLink(rel="a", href="/a"))
    assert node["links"] == [{"rel": "a", "href": "/a"}]


def test_append_link_refuses_non_array_links():
    node = {"links": "elsewhere"}
    assert not append_link(node, HATEOASLink(rel="a", href="/a"))
    assert node == {"links": "elsewhere"}


# -----------------------------------------------------------------------------
# walk
# -----------------------------------------------------------------------------
def test_walk_root_link():
    doc = {"Id": 9}
    walk(doc, LinkSpec.of("self", "/things/{Id}"))
    assert doc == {"Id": 9, "links": [{"rel": "self", "href": "/things/9"}]}


def test_walk_root_unresolved_leaves_document_unchanged():
    doc = {"Name": "x"}
    walk(doc, LinkSpec.of("self", "/things/{Id}"))
    assert doc == {"Name": "x"}


def test_walk_results_array():
    doc = {"Results": [{"OrderNo": 1}, {"OrderNo": 2}]}
    walk(doc, LinkSpec.of("detail", "/orders/{OrderNo}", "Results", "[]"))
    assert doc == {
        "Results": [
            {"OrderNo": 1, "links": [{"rel": "detail", "href": "/orders/1"}]},
            {"OrderNo": 2, "links": [{"rel": "detail", "href": "/orders/2"}]},
        ]
    }


def test_walk_nested_arrays():
    doc = {
        "Results": [
            {"OrderNo": 1, "OrderLines": [{"OrderNo": 1, "OrderLineNo": 1}, {"OrderNo": 1, "OrderLineNo": 2}]},
            {"OrderNo": 2, "OrderLines": []},
        ]
    }
    spec = LinkSpec.of(
        "orderLineDetail", "api/orders/{OrderNo}/detail/{OrderLineNo}", "Results", "[]", "OrderLines", "[]"
    )
    walk(doc, spec)
    lines = doc["Results"][0]["OrderLines"]
    assert lines[0]["links"] == [{"rel": "orderLineDetail", "href": "api/orders/1/detail/1"}]
    assert lines[1]["links"] == [{"rel": "orderLineDetail", "href": "api/orders/1/detail/2"}]
    assert "links" not in doc["Results"][0]
    assert doc["Results"][1] == {"OrderNo": 2, "OrderLines": []}


def test_walk_absent_first_property_leaves_document_unchanged():
    doc = {"Results": [{"OrderNo": 1}]}
    before = json.dumps(doc)
    walk(doc, LinkSpec.of("detail", "/orders/{OrderNo}", "Items", "[]"))
    assert json.dumps(doc) == before


def test_walk_null_property_is_not_followed():
    doc = {"Results": None}
    walk(doc, LinkSpec.of("detail", "/orders/{OrderNo}", "Results", "[]"))
    assert doc == {"Results": None}


def test_walk_twice_appends_twice():
    doc = {"Id": 1}
    spec = LinkSpec.of("self", "/things/{Id}")
    walk(doc, spec)
    walk(doc, spec)
    assert doc["links"] == [
        {"rel": "self", "href": "/things/1"},
        {"rel": "self", "href": "/things/1"},
    ]


def test_walk_appends_to_existing_links():
    doc = {"Id": 1, "links": [{"rel": "up", "href": "/"}]}
    walk(doc, LinkSpec.of("self", "/things/{Id}"))
    walk(doc, LinkSpec.of("edit", "/things/{Id}/edit"))
    assert [link["rel"] for link in doc["links"]] == ["up", "self", "edit"]


def test_wildcard_on_non_array_is_a_no_op():
    doc = {"Results": {"OrderNo": 1}}
    walk(doc, LinkSpec.of("detail", "/orders/{OrderNo}", "Results", "[]"))
    assert doc == {"Results": {"OrderNo": 1}}


def test_property_on_array_is_a_no_op():
    doc = [{"OrderNo": 1}]
    walk(doc, LinkSpec.of("detail", "/orders/{OrderNo}", "OrderNo"))
    assert doc == [{"OrderNo": 1}]


def test_landing_on_scalars_skips_only_those_elements():
    doc = {"Results": [1, {"OrderNo": 2}, "x", {"Other": 3}]}
    walk(doc, LinkSpec.of("detail", "/orders/{OrderNo}", "Results", "[]"))
    assert doc["Results"][0] == 1
    assert doc["Results"][1]["links"] == [{"rel": "detail", "href": "/orders/2"}]
    assert doc["Results"][2] == "x"
    assert doc["Results"][3] == {"Other": 3}


def test_wildcard_matches_walking_each_element_in_order():
    items = [{"n": 1}, {"m": 2}, {"n": 3}]
    expected = copy.deepcopy(items)
    spec = LinkSpec.of("item", "/items/{n}", "[]")
    walk(items, spec)
    for element in expected:
        walk(element, spec.next_layer())
    assert items == expected


def test_large_array_does_not_deepen_recursion():
    doc = {"Results": [{"Id": i} for i in range(5000)]}
    walk(doc, LinkSpec.of("self", "/things/{Id}", "Results", "[]"))
    assert doc["Results"][4999]["links"] == [{"rel": "self", "href": "/things/4999"}]


def test_custom_links_key_and_wildcard():
    doc = {"items": [{"Id": 1}]}
    walk(doc, LinkSpec.of("self", "/things/{Id}", "items", "*"), links_key="_links", wildcard="*")
    assert doc["items"][0]["_links"] == [{"rel": "self", "href": "/things/1"}]


def test_walk_rejects_non_spec():
    with pytest.raises(LinkSpecError):
        walk({}, {"rel": "self", "href": "/", "query": []})


def test_walk_rejects_null_query():
    spec = LinkSpec.model_construct(rel="self", href="/", status_code=200, query=None)
    with pytest.raises(LinkSpecError):
        walk({}, spec)


def test_substituted_values_are_searched_by_later_placeholders():
    assert resolve_parameters("{a}/{b}", {"a": "{b}", "b": "X"}) == "X/X"


def test_explicit_empty_links_key_is_used_as_given():
    doc = {"Id": 1}
    walk(doc, LinkSpec.of("self", "/things/{Id}"), links_key="")
    assert doc == {"Id": 1, "": [{"rel": "self", "href": "/things/1"}]}


def test_explicit_empty_links_key_in_append_link():
    node = {}
    append_link(node, HATEOASLink(rel="a", href="/a"), links_key="")
    assert node == {"": [{"rel": "a", "href": "/a"}]}
