"""Pytest configuration and shared fixtures.

No sys.path hacks - tests import from the installed eventshred package.
"""

import json

import pytest

from eventshred.kernel.fields import ENRICHED_EVENT_FIELDS


LINK_CLICK_URI = "iglu:com.snowplowanalytics.snowplow/link_click/jsonschema/1-0-1"
WEB_PAGE_URI = "iglu:com.snowplowanalytics.snowplow/web_page/jsonschema/1-0-0"
PERFORMANCE_TIMING_URI = "iglu:org.w3/PerformanceTiming/jsonschema/1-0-0"
CONTEXTS_ENVELOPE_URI = "iglu:com.snowplowanalytics.snowplow/contexts/jsonschema/1-0-0"
UNSTRUCT_ENVELOPE_URI = "iglu:com.snowplowanalytics.snowplow/unstruct_event/jsonschema/1-0-0"


def make_contexts(*entries):
    """Build a contexts column value from (schema, data) pairs."""
    return json.dumps({
        "schema": CONTEXTS_ENVELOPE_URI,
        "data": [{"schema": schema, "data": data} for schema, data in entries],
    })


def make_unstruct(schema, data):
    return json.dumps({
        "schema": UNSTRUCT_ENVELOPE_URI,
        "data": {"schema": schema, "data": data},
    })


def make_event_line(**values):
    """Build a full enriched-event TSV line; unnamed columns are empty."""
    keys = [f.key for f in ENRICHED_EVENT_FIELDS]
    unknown = set(values) - set(keys)
    if unknown:
        raise KeyError(f"Not enriched event columns: {sorted(unknown)}")
    return "\t".join(values.get(key, "") for key in keys)


@pytest.fixture
def page_view_line():
    """A realistic page view with contexts, derived contexts and geo columns."""
    return make_event_line(
        app_id="angry-birds",
        platform="web",
        etl_tstamp="2017-01-26 00:01:25.292",
        collector_tstamp="2013-11-26 00:02:05.000",
        dvce_created_tstamp="2013-11-26 00:03:57.885",
        event="page_view",
        event_id="c6ef3124-b53a-4b13-a233-0088f79dcbcb",
        txn_id="41828",
        name_tracker="cloudfront-1",
        v_tracker="js-2.1.0",
        v_collector="clj-tomcat-0.1.0",
        v_etl="serde-0.5.2",
        user_id="jon.doe@email.com",
        user_ipaddress="92.231.54.234",
        domain_userid="bc2e92ec6c204a14",
        domain_sessionidx="3",
        geo_country="US",
        geo_region="TX",
        geo_city="New York",
        geo_zipcode="94109",
        geo_latitude="37.443604",
        geo_longitude="-122.4124",
        page_url="http://www.snowplowanalytics.com",
        page_urlport="80",
        contexts=make_contexts(
            (WEB_PAGE_URI, {"id": "4b13"}),
            (PERFORMANCE_TIMING_URI, {"navigationStart": 1415358089861}),
        ),
        br_features_pdf="1",
        br_features_flash="0",
        br_viewwidth="1024",
        tr_total="12.5",
        derived_contexts=make_contexts(
            ("iglu:com.snowplowanalytics.snowplow/ua_parser_context/jsonschema/1-0-0", {"useragentFamily": "IE"}),
        ),
        derived_tstamp="2013-11-26 00:03:57.886",
    )


@pytest.fixture
def link_click_line():
    return make_event_line(
        app_id="angry-birds",
        event="unstruct",
        unstruct_event=make_unstruct(LINK_CLICK_URI, {"targetUrl": "http://www.example.com"}),
    )
