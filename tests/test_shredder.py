"""Tests for context and unstructured-event shredding."""

import json

import pytest
from conftest import CONTEXTS_ENVELOPE_URI, LINK_CLICK_URI, WEB_PAGE_URI, make_contexts, make_unstruct
from eventshred.errors import InvalidContextsJSON, InvalidUnstructJSON, MalformedSchemaURI, MissingInnerData
from eventshred.kernel.shredder import shred_contexts, shred_unstruct


WEB_PAGE_KEY = "contexts_com_snowplowanalytics_snowplow_web_page_1"


class TestShredContexts:
    """Tests for shred_contexts."""

    def test_groups_entries_by_canonical_name(self):
        raw = make_contexts(
            (WEB_PAGE_URI, {"id": "a"}),
            ("iglu:com.acme/user/jsonschema/1-0-0", {"name": "x"}),
            (WEB_PAGE_URI, {"id": "b"}),
            ("iglu:com.snowplowanalytics.snowplow/web_page/jsonschema/1-1-0", {"id": "c"}),
        )
        result = shred_contexts(raw)
        assert set(result) == {WEB_PAGE_KEY, "contexts_com_acme_user_1"}
        assert result[WEB_PAGE_KEY] == [{"id": "a"}, {"id": "b"}, {"id": "c"}]
        assert result["contexts_com_acme_user_1"] == [{"name": "x"}]

    def test_accepts_bytes(self):
        raw = make_contexts((WEB_PAGE_URI, {"id": "a"})).encode("utf-8")
        assert shred_contexts(raw) == {WEB_PAGE_KEY: [{"id": "a"}]}

    def test_payloads_kept_as_is(self):
        """Payloads of any JSON type pass through untouched."""
        raw = make_contexts((WEB_PAGE_URI, [1, 2.5, None]), (WEB_PAGE_URI, "text"), (WEB_PAGE_URI, None))
        assert shred_contexts(raw) == {WEB_PAGE_KEY: [[1, 2.5, None], "text", None]}

    def test_empty_data_list(self):
        assert shred_contexts(make_contexts()) == {}

    def test_missing_data_list(self):
        assert shred_contexts(json.dumps({"schema": CONTEXTS_ENVELOPE_URI})) == {}

    @pytest.mark.parametrize("raw", [
        "not json",
        "{",
        '{"schema": "x", "data": {"schema": "y"}}',   # data must be a list
        '{"data": [{"schema": 5, "data": 1}]}',       # schema must be a string
        "[]",
    ])
    def test_invalid_json_or_shape(self, raw):
        with pytest.raises(InvalidContextsJSON):
            shred_contexts(raw)

    def test_one_bad_schema_fails_everything(self):
        raw = make_contexts((WEB_PAGE_URI, {"id": "a"}), ("iglu:bad/schema", {}))
        with pytest.raises(MalformedSchemaURI):
            shred_contexts(raw)

    def test_missing_entry_schema_is_malformed(self):
        raw = json.dumps({"data": [{"data": {"id": 1}}]})
        with pytest.raises(MalformedSchemaURI):
            shred_contexts(raw)


class TestShredUnstruct:
    """Tests for shred_unstruct."""

    def test_returns_single_pair(self):
        name, payload = shred_unstruct(make_unstruct(LINK_CLICK_URI, {"targetUrl": "http://a.b"}))
        assert name == "unstruct_event_com_snowplowanalytics_snowplow_link_click_1"
        assert payload == {"targetUrl": "http://a.b"}

    def test_absent_inner_data(self):
        raw = json.dumps({"data": {"schema": LINK_CLICK_URI}})
        with pytest.raises(MissingInnerData, match="could not extract inner data"):
            shred_unstruct(raw)

    def test_null_inner_data_counts_as_missing(self):
        with pytest.raises(MissingInnerData):
            shred_unstruct(make_unstruct(LINK_CLICK_URI, None))

    def test_absent_outer_data(self):
        with pytest.raises(MissingInnerData):
            shred_unstruct("{}")

    def test_falsy_payloads_are_present(self):
        for payload in ({}, [], 0, False, ""):
            _, result = shred_unstruct(make_unstruct(LINK_CLICK_URI, payload))
            assert result == payload

    @pytest.mark.parametrize("raw", ["", "nope", '{"data": []}', '{"data": {"schema": 1, "data": {}}}'])
    def test_invalid_json_or_shape(self, raw):
        with pytest.raises(InvalidUnstructJSON):
            shred_unstruct(raw)

    def test_bad_inner_schema(self):
        with pytest.raises(MalformedSchemaURI):
            shred_unstruct(make_unstruct("iglu:com.acme/x/jsonschema/0-0-0", {"a": 1}))

    def test_missing_data_checked_before_schema(self):
        raw = json.dumps({"data": {"schema": "not-a-uri"}})
        with pytest.raises(MissingInnerData):
            shred_unstruct(raw)


class TestEnvelopeDecoding:
    """Envelope decoding mirrors the producer's JSON decoder."""

    def test_null_contexts_yield_no_groups(self):
        assert shred_contexts("null") == {}

    def test_null_unstruct_is_missing_data(self):
        with pytest.raises(MissingInnerData):
            shred_unstruct("null")

    def test_null_context_entry_has_no_schema(self):
        with pytest.raises(MalformedSchemaURI):
            shred_contexts('{"data": [null]}')

    def test_field_name_is_not_a_json_key(self):
        """Only "schema" names the schema; the model attribute name is ignored."""
        raw = '{"data": [{"schema_uri": "iglu:com.acme/x/jsonschema/1-0-0", "data": 1}]}'
        with pytest.raises(MalformedSchemaURI):
            shred_contexts(raw)

    def test_keys_match_ignoring_case(self):
        raw = '{"Data": [{"SCHEMA": "iglu:com.acme/x/jsonschema/1-0-0", "Data": {"a": 1}}]}'
        assert shred_contexts(raw) == {"contexts_com_acme_x_1": [{"a": 1}]}

    def test_unstruct_keys_match_ignoring_case(self):
        raw = '{"DATA": {"Schema": "iglu:com.acme/x/jsonschema/2-0-0", "dAtA": [1]}}'
        assert shred_unstruct(raw) == ("unstruct_event_com_acme_x_2", [1])

    def test_last_case_variant_wins(self):
        raw = '{"data": {"schema": "iglu:com.acme/x/jsonschema/1-0-0", "data": 1, "Data": 2}}'
        assert shred_unstruct(raw)[1] == 2
