from datetime import datetime, timezone

import pytest
from hypothesis import HealthCheck, given, settings

from alert_strategies import alerts
from cap_codec import (
    Alert,
    CodecConfig,
    DecodeError,
    EncodeError,
    UnrepresentableFieldError,
    UnsupportedVersionError,
    decode_element,
    decode_markup,
    encode_element,
    encode_markup,
)
from cap_codec.models import Circle, Info, Parameter, Resource
from cap_codec.schema import CAP_1_0, CAP_1_1, CAP_1_2


NS_1_0 = CAP_1_0.namespace
NS_1_1 = CAP_1_1.namespace
NS_1_2 = CAP_1_2.namespace


def _document(namespace: str, info_body: str = "", alert_body: str = "") -> str:
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<alert xmlns="{namespace}">
  <identifier>TEST-1</identifier>
  <sender>sender@example.org</sender>
  <sent>2026-03-14T09:26:53+02:00</sent>
  <status>Actual</status>
  <msgType>Alert</msgType>
  <scope>Public</scope>
  {alert_body}
  <info>
    <event>Flood</event>
    <urgency>Immediate</urgency>
    <severity>Severe</severity>
    <certainty>Likely</certainty>
    {info_body}
  </info>
</alert>
"""


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


class TestRoundTrip:
    def test_markup_round_trip(self, alert):
        assert decode_markup(encode_markup(alert)) == alert

    @settings(max_examples=75, suppress_health_check=[HealthCheck.too_slow, HealthCheck.data_too_large])
    @given(alerts())
    def test_generated_alerts_round_trip(self, generated):
        assert decode_markup(encode_markup(generated)) == generated

    def test_pretty_round_trip(self, alert):
        text = encode_markup(alert, pretty=True)
        assert "\n  <identifier>" in text
        assert decode_markup(text) == alert

    def test_element_round_trip(self, alert):
        assert decode_element(encode_element(alert)) == alert

    def test_bytes_input(self, alert):
        assert decode_markup(encode_markup(alert).encode("utf-8")) == alert

    def test_duplicate_parameters_are_preserved(self, alert_factory):
        alert = alert_factory("1.2")
        alert.infos[0].parameters = [Parameter("river", "Berg"), Parameter("river", "Breede")]
        decoded = decode_markup(encode_markup(alert))
        assert decoded.infos[0].parameters == [Parameter("river", "Berg"), Parameter("river", "Breede")]

    def test_absent_identifier_stays_absent(self):
        alert = Alert(identifier=None, sender="s", status="Test")
        decoded = decode_markup(encode_markup(alert))
        assert decoded.identifier is None
        assert decoded == alert


class TestEncoding:
    def test_declaration_and_default_namespace(self, alert):
        text = encode_markup(alert)
        assert text.startswith("<?xml version='1.0' encoding='utf-8'?>")
        namespace = {"1.0": NS_1_0, "1.1": NS_1_1, "1.2": NS_1_2}[alert.cap_version]
        assert f'<alert xmlns="{namespace}">' in text

    def test_alert_element_order(self, alert_factory):
        root = encode_element(alert_factory("1.2"))
        tags = [_local(child.tag) for child in root]
        assert tags == [
            "identifier", "sender", "sent", "status", "msgType", "password", "source", "scope",
            "addresses", "code", "code", "note", "references", "incidents", "info",
        ]

    def test_info_element_order_with_response_types(self, alert_factory):
        root = encode_element(alert_factory("1.1"))
        tags = [_local(child.tag) for child in root.find(f"{{{NS_1_1}}}info")]
        assert tags.index("event") < tags.index("responseType") < tags.index("urgency")
        assert tags.index("eventCode") < tags.index("effective")
        assert tags[-2:] == ["resource", "area"]

    def test_pairs_as_text_in_1_0(self, alert_factory):
        text = encode_markup(alert_factory("1.0"))
        assert "<parameter>WMOHEADER=WWZA01</parameter>" in text
        assert "<eventCode>SAME=FLW</eventCode>" in text
        assert "<geocode>SAME=006113</geocode>" in text

    def test_pairs_as_value_name_in_1_2(self, alert_factory):
        text = encode_markup(alert_factory("1.2"))
        assert "<parameter><valueName>WMOHEADER</valueName><value>WWZA01</value></parameter>" in text
        assert "<geocode><valueName>SAME</valueName><value>006113</value></geocode>" in text

    def test_cap_list_and_geometry_text(self, alert_factory):
        text = encode_markup(alert_factory("1.2"))
        assert '<addresses>"ops desk" mayor</addresses>' in text
        assert "<circle>-33.55,18.95 12.5</circle>" in text
        assert "<polygon>-33.5,18.9 -33.6,19.0 -33.7,18.8 -33.5,18.9</polygon>" in text

    def test_timestamps_keep_offset(self, alert):
        text = encode_markup(alert)
        assert "<sent>2026-03-14T09:26:53+02:00</sent>" in text

    def test_naive_timestamp_written_as_utc(self):
        alert = Alert(sent=datetime(2026, 1, 2, 3, 4, 5, 678000))
        text = encode_markup(alert)
        assert "<sent>2026-01-02T03:04:05+00:00</sent>" in text
        assert decode_markup(text) == alert

    def test_none_fields_are_omitted(self):
        text = encode_markup(Alert(identifier="X"))
        assert "<sender" not in text
        assert "<info" not in text

    def test_response_types_unrepresentable_in_1_0(self):
        alert = Alert(cap_version="1.0", infos=[Info(response_types=["Shelter"])])
        with pytest.raises(UnrepresentableFieldError) as excinfo:
            encode_markup(alert)
        assert excinfo.value.path == "alert/info[0].response_types"

    def test_deref_uri_unrepresentable_in_1_0(self):
        alert = Alert(cap_version="1.0", infos=[Info(resources=[Resource(deref_uri="AAAA")])])
        with pytest.raises(UnrepresentableFieldError):
            encode_markup(alert)

    def test_circle_without_point(self):
        alert = Alert()
        alert.add_info().add_area(area_desc="x").circles.append(Circle(radius=1.0))
        with pytest.raises(EncodeError) as excinfo:
            encode_markup(alert)
        assert excinfo.value.path == "alert/info[0]/area[0]/circle[0]"

    def test_text_pair_name_with_separator(self):
        alert = Alert(cap_version="1.0", infos=[Info(parameters=[Parameter("a=b", "c")])])
        with pytest.raises(EncodeError):
            encode_markup(alert)

    def test_unknown_version(self):
        with pytest.raises(EncodeError):
            encode_markup(Alert(cap_version="2.0"))

    def test_pretty_default_from_config(self):
        alert = Alert(identifier="X")
        assert "\n" not in encode_markup(alert, config=CodecConfig()).split("?>", 1)[1].strip()
        assert "\n  <identifier>" in encode_markup(alert, config=CodecConfig(pretty_print=True))


class TestDecoding:
    def test_version_from_namespace(self):
        assert decode_markup(_document(NS_1_0)).cap_version == "1.0"
        assert decode_markup(_document(NS_1_2)).cap_version == "1.2"

    def test_later_version_elements_ignored_in_1_0(self):
        text = _document(
            NS_1_0,
            info_body="""
            <responseType>Shelter</responseType>
            <resource>
              <resourceDesc>map</resourceDesc>
              <derefUri>AAAA</derefUri>
            </resource>
            """,
        )
        info = decode_markup(text).infos[0]
        assert info.response_types == []
        assert info.resources[0].deref_uri is None
        assert info.resources[0].resource_desc == "map"

    def test_1_0_text_pairs(self):
        text = _document(NS_1_0, info_body="<parameter>river=Berg=upper</parameter>")
        assert decode_markup(text).infos[0].parameters == [Parameter("river", "Berg=upper")]

    def test_1_0_pair_without_separator(self):
        text = _document(NS_1_0, info_body="<eventCode>SAME</eventCode>")
        with pytest.raises(DecodeError) as excinfo:
            decode_markup(text)
        assert excinfo.value.path == "alert/info[0]/eventCode[0]"

    def test_absent_language_decodes_to_none(self):
        assert decode_markup(_document(NS_1_2)).infos[0].language is None

    def test_timestamp_parsed(self):
        sent = decode_markup(_document(NS_1_2)).sent
        assert sent == datetime(2026, 3, 14, 7, 26, 53, tzinfo=timezone.utc)

    def test_malformed_document(self):
        with pytest.raises(DecodeError):
            decode_markup("<alert><identifier>")

    def test_unknown_namespace(self):
        with pytest.raises(UnsupportedVersionError):
            decode_markup(_document("urn:example:not-cap"))

    def test_missing_namespace(self):
        with pytest.raises(UnsupportedVersionError):
            decode_markup("<alert><identifier>X</identifier></alert>")

    def test_version_hint(self):
        assert decode_markup(_document(NS_1_0), version="1.0").cap_version == "1.0"

    def test_version_hint_mismatch(self):
        with pytest.raises(DecodeError):
            decode_markup(_document(NS_1_0), version="1.2")

    def test_wrong_root_element(self):
        with pytest.raises(DecodeError):
            decode_markup(f'<message xmlns="{NS_1_2}"/>')

    def test_invalid_timestamp(self):
        text = _document(NS_1_2).replace("2026-03-14T09:26:53+02:00", "yesterday")
        with pytest.raises(DecodeError) as excinfo:
            decode_markup(text)
        assert excinfo.value.path == "alert/sent"

    def test_bad_circle_path(self):
        text = _document(NS_1_2, info_body="""
            <area><areaDesc>a</areaDesc></area>
            <area><areaDesc>b</areaDesc><circle>1,2 3</circle><circle>north 5</circle></area>
        """)
        with pytest.raises(DecodeError) as excinfo:
            decode_markup(text)
        assert excinfo.value.path == "alert/info[0]/area[1]/circle[1]"

    def test_empty_altitude_is_an_error(self):
        text = _document(NS_1_2, info_body="<area><areaDesc>a</areaDesc><altitude></altitude></area>")
        with pytest.raises(DecodeError) as excinfo:
            decode_markup(text)
        assert excinfo.value.path == "alert/info[0]/area[0]/altitude"

    def test_unterminated_cap_list(self):
        text = _document(NS_1_2, alert_body='<addresses>"ops desk</addresses>')
        with pytest.raises(DecodeError):
            decode_markup(text)

    @pytest.mark.parametrize(
        "policy, expected",
        [("zero", 0), ("none", None)],
    )
    def test_empty_size_policy(self, policy, expected):
        text = _document(NS_1_2, info_body="<resource><resourceDesc>r</resourceDesc><size></size></resource>")
        alert = decode_markup(text, config=CodecConfig(empty_numeric=policy))
        assert alert.infos[0].resources[0].size == expected

    def test_empty_size_rejected_by_default(self):
        text = _document(NS_1_2, info_body="<resource><resourceDesc>r</resourceDesc><size/></resource>")
        with pytest.raises(DecodeError) as excinfo:
            decode_markup(text, config=CodecConfig())
        assert excinfo.value.path == "alert/info[0]/resource[0]/size"

    def test_absent_size_is_none(self):
        text = _document(NS_1_2, info_body="<resource><resourceDesc>r</resourceDesc></resource>")
        assert decode_markup(text).infos[0].resources[0].size is None

    def test_non_integer_size(self):
        text = _document(NS_1_2, info_body="<resource><resourceDesc>r</resourceDesc><size>1.5</size></resource>")
        with pytest.raises(DecodeError):
            decode_markup(text)
