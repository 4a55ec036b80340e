"""Tests for the lenient JSON:API wire models."""

from payloadtree.schemas.jsonapi import Document, Pointer, RawObject, RelationshipPayload
from payloadtree.schemas.nodes import OperationKind


# --- Wire parsing ---


def test_pointer_reads_temp_id_alias():
    pointer = Pointer.model_validate({"type": "tags", "temp-id": "abc", "method": "create"})
    assert pointer.temp_id == "abc"
    assert pointer.id is None
    assert pointer.method == "create"


def test_pointer_coerces_integer_id():
    assert Pointer.model_validate({"type": "tags", "id": 7}).id == "7"


def test_pointer_drops_non_scalar_fields():
    pointer = Pointer.model_validate({"type": ["x"], "id": {"a": 1}, "method": 3})
    assert pointer.type is None
    assert pointer.id is None
    assert pointer.method is None


def test_relationship_payload_tri_state():
    absent = RelationshipPayload.model_validate({})
    cleared = RelationshipPayload.model_validate({"data": None})
    linked = RelationshipPayload.model_validate({"data": {"type": "a", "id": "1"}})

    assert not absent.is_present
    assert cleared.is_present and cleared.data is None
    assert linked.is_present and isinstance(linked.data, Pointer)


def test_relationship_payload_to_many_skips_garbage():
    payload = RelationshipPayload.model_validate(
        {"data": [{"type": "a", "id": "1"}, "junk", 5, {"type": "a", "id": "2"}]}
    )
    assert [p.id for p in payload.data] == ["1", "2"]


def test_raw_object_tolerates_malformed_maps():
    obj = RawObject.model_validate({"type": "posts", "attributes": "nope", "relationships": [1]})
    assert obj.attributes == {}
    assert obj.relationships == {}


def test_raw_object_non_mapping_relationship_is_absent():
    obj = RawObject.model_validate({"type": "posts", "relationships": {"author": "x"}})
    assert not obj.relationships["author"].is_present


def test_document_unwraps_envelope():
    doc = Document.parse({"_jsonapi": {"data": {"type": "posts", "id": "1"}}})
    assert doc.data.type == "posts"


def test_document_envelope_unwrapping_can_be_disabled():
    doc = Document.parse({"_jsonapi": {"data": {"type": "posts"}}}, envelope_key=None)
    assert doc.data is None


def test_document_from_non_mapping_is_empty():
    doc = Document.parse(["not", "a", "document"])
    assert doc.data is None
    assert doc.included == []


def test_document_included_must_be_a_list():
    doc = Document.parse({"data": None, "included": {"type": "a"}})
    assert doc.included == []


# --- OperationKind ---


def test_http_method_table():
    assert OperationKind.from_http_method("POST") is OperationKind.CREATE
    assert OperationKind.from_http_method("PUT") is OperationKind.UPDATE
    assert OperationKind.from_http_method("PATCH") is OperationKind.UPDATE
    assert OperationKind.from_http_method("delete") is OperationKind.DESTROY
    assert OperationKind.from_http_method("GET") is None
    assert OperationKind.from_http_method(None) is None


def test_parse_method_token():
    assert OperationKind.parse("disassociate") is OperationKind.DISASSOCIATE
    assert OperationKind.parse(" Destroy ") is OperationKind.DESTROY
    assert OperationKind.parse("explode") is None
    assert OperationKind.parse(None) is None


def test_removes():
    assert OperationKind.DESTROY.removes
    assert OperationKind.DISASSOCIATE.removes
    assert not OperationKind.CREATE.removes
    assert not OperationKind.UPDATE.removes
