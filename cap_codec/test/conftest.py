"""Shared fixtures for the CAP codec tests.

``alert_factory`` builds a fully populated, valid alert for any CAP version;
the ``alert`` fixture runs a test once per supported version.
"""

from datetime import datetime, timedelta, timezone

import pytest

from cap_codec import CAP_VERSIONS, Alert, CodecConfig
from cap_codec.models.alert import MSG_TYPE_ALERT, SCOPE_PRIVATE, STATUS_ACTUAL
from cap_codec.models.info import (
    CATEGORY_GEO,
    CATEGORY_SAFETY,
    CERTAINTY_LIKELY,
    RESPONSE_TYPE_EVACUATE,
    RESPONSE_TYPE_MONITOR,
    SEVERITY_SEVERE,
    URGENCY_IMMEDIATE,
)

SENT = datetime(2026, 3, 14, 9, 26, 53, tzinfo=timezone(timedelta(hours=2)))
RING = ((-33.5, 18.9), (-33.6, 19.0), (-33.7, 18.8), (-33.5, 18.9))


def _build_alert(version: str) -> Alert:
    alert = Alert(
        cap_version=version,
        identifier="ZA-WC-2026-0001",
        sender="alerts@disaster.example.org",
        sent=SENT,
        status=STATUS_ACTUAL,
        msg_type=MSG_TYPE_ALERT,
        password="secret",
        source="Western Cape Disaster Management",
        scope=SCOPE_PRIVATE,
        addresses=["ops desk", "mayor"],
        codes=["IPAWSv1.0", "drill"],
        note='Flooding expected "near" the river',
        references=["alerts@disaster.example.org,ZA-WC-2026-0000,2026-03-14T08:00:00+02:00"],
        incidents=["FLOOD-42", "FLOOD-43"],
    )

    info = alert.add_info(
        language="en-ZA",
        categories=[CATEGORY_GEO, CATEGORY_SAFETY],
        event="Flood",
        urgency=URGENCY_IMMEDIATE,
        severity=SEVERITY_SEVERE,
        certainty=CERTAINTY_LIKELY,
        audience="Residents of low lying areas",
        effective=SENT,
        onset=SENT + timedelta(hours=1),
        expires=SENT + timedelta(days=1),
        sender_name="Western Cape Disaster Management Centre",
        headline="Flood warning for the Berg river",
        description="Heavy rain upstream.\nRiver levels rising.",
        instruction="Move to higher ground.",
        web="https://disaster.example.org/flood",
        contact="+27 21 000 0000",
    )
    if version != "1.0":
        info.response_types = [RESPONSE_TYPE_EVACUATE, RESPONSE_TYPE_MONITOR]
    info.add_event_code(name="SAME", value="FLW")
    info.add_parameter(name="WMOHEADER", value="WWZA01")
    info.add_parameter(name="river", value="Berg")

    resource = info.add_resource(
        resource_desc="River level chart",
        mime_type="image/png",
        uri="https://disaster.example.org/chart.png",
    )
    if version != "1.0":
        resource.attach_content(b"\x89PNG chart bytes")
    else:
        resource.size = 2048
        resource.digest = "da39a3ee5e6b4b0d3255bfef95601890afd80709"

    area = info.add_area(area_desc="Berg river flood plain", altitude=100.0, ceiling=2500.5)
    polygon = area.add_polygon()
    for latitude, longitude in RING:
        polygon.add_point(latitude, longitude)
    area.add_circle(point=(-33.55, 18.95), radius=12.5)
    area.add_geocode(name="SAME", value="006113")
    area.add_geocode(name="FIPS6", value="006")
    return alert


@pytest.fixture
def alert_factory():
    return _build_alert


@pytest.fixture(params=CAP_VERSIONS)
def alert(request) -> Alert:
    """A valid alert, once per CAP version."""
    return _build_alert(request.param)


@pytest.fixture
def config() -> CodecConfig:
    return CodecConfig()
