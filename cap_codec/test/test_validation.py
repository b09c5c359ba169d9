import copy

import pytest

from cap_codec import validate
from cap_codec.models import Alert, Area, Circle, Info, Point, Polygon, Resource
from cap_codec.schema.validation import Inclusion, Presence, ValidationResult, Violation


def test_fixture_alert_is_valid(alert):
    result = validate(alert)
    assert result.valid, result.violations


def test_missing_identifier_is_the_only_violation(alert):
    alert.identifier = None
    result = validate(alert)
    assert [v.attribute_path for v in result.violations] == ["identifier"]
    assert result.messages_for("identifier") == ["is not present"]


def test_validation_does_not_mutate(alert):
    alert.infos[0].severity = "Catastrophic"
    snapshot = copy.deepcopy(alert)
    assert not validate(alert).valid
    assert alert == snapshot


class TestAlertRules:
    def test_private_scope_requires_addresses(self, alert_factory):
        alert = alert_factory("1.2")
        alert.addresses = []
        result = validate(alert)
        assert result.paths() == ["addresses"]
        assert "required when scope is Private" in result.messages_for("addresses")[0]

    def test_addresses_depend_on_private_scope(self, alert_factory):
        alert = alert_factory("1.2")
        alert.scope = "Public"
        assert validate(alert).messages_for("addresses") == ["is dependent on scope being Private"]

    def test_restriction_depends_on_restricted_scope(self, alert_factory):
        alert = alert_factory("1.2")
        alert.restriction = "staff only"
        assert validate(alert).paths() == ["restriction"]
        alert.scope = "Restricted"
        alert.addresses = []
        assert validate(alert).valid

    def test_empty_identifier_is_reported_once(self, alert_factory):
        alert = alert_factory("1.2")
        alert.identifier = ""
        result = validate(alert)
        assert result.paths() == ["identifier"]
        assert result.messages_for("identifier") == ["is not present"]

    @pytest.mark.parametrize("identifier", ["has space", "a,b", "a&b", "a<b"])
    def test_identifier_format(self, identifier):
        result = validate(Alert(identifier=identifier, sender="s", sent=None))
        assert "is not in the correct format" in result.messages_for("identifier")

    def test_enumerations(self):
        result = validate(Alert(status="Draft", msg_type="Notice", scope="Everyone"))
        for attribute in ("status", "msg_type", "scope"):
            assert result.messages_for(attribute)[0].startswith("can only be assigned the following values")

    def test_unknown_cap_version(self):
        assert "cap_version" in validate(Alert(cap_version="2.0")).paths()


class TestInfoRules:
    def test_severity_enumeration(self, alert_factory):
        alert = alert_factory("1.2")
        alert.infos[0].severity = "Catastrophic"
        assert validate(alert).paths() == ["infos[0].severity"]
        alert.infos[0].severity = "Extreme"
        assert validate(alert).valid

    def test_required_fields(self):
        result = validate(Info())
        assert sorted(result.paths()) == ["certainty", "event", "severity", "urgency"]

    def test_categories_members(self):
        result = validate(Info(event="e", urgency="Past", severity="Minor", certainty="Unknown", categories=["Weather"]))
        assert result.paths() == ["categories"]

    def test_response_types_by_version(self):
        info = Info(event="e", urgency="Past", severity="Minor", certainty="Unknown", response_types=["AllClear"])
        assert validate(info, "1.1").paths() == ["response_types"]
        assert validate(info, "1.2").valid

    def test_version_gated_rules_follow_the_alert(self, alert_factory):
        alert = alert_factory("1.1")
        alert.infos[0].response_types = ["Avoid"]
        assert validate(alert).paths() == ["infos[0].response_types"]
        alert.cap_version = "1.2"
        assert validate(alert).valid


class TestAreaRules:
    def test_nested_path(self, alert_factory):
        alert = alert_factory("1.2")
        alert.infos[0].areas[0].area_desc = None
        assert validate(alert).paths() == ["infos[0].areas[0].area_desc"]

    def test_ceiling_needs_altitude(self):
        result = validate(Area(area_desc="a", ceiling=10.0))
        assert result.messages_for("ceiling") == ["is dependent on altitude being present"]

    def test_polygon_must_be_closed(self):
        polygon = Polygon([Point(0, 0), Point(0, 1), Point(1, 1), Point(1, 0)])
        assert validate(polygon).messages_for("points") == ["must have the same first and last member"]

    def test_polygon_needs_four_points(self):
        polygon = Polygon([Point(0, 0), Point(0, 1), Point(0, 0)])
        assert validate(polygon).messages_for("points") == ["must have at least 4 members"]

    def test_point_ranges(self):
        area = Area(area_desc="a", circles=[Circle(Point(91, 0), 5)])
        result = validate(area)
        assert result.paths() == ["circles[0].point.latitude"]

    def test_negative_radius(self):
        assert validate(Circle(Point(0, 0), -1)).paths() == ["radius"]

    def test_geocode_needs_value(self):
        area = Area(area_desc="a")
        area.add_geocode(name="SAME")
        assert validate(area).paths() == ["geocodes[0].value"]


class TestResourceRules:
    def test_mime_type_required_from_1_2(self):
        resource = Resource(resource_desc="map")
        assert validate(resource, "1.2").paths() == ["mime_type"]
        assert validate(resource, "1.1").valid
        assert validate(resource, "1.0").valid

    def test_negative_size(self):
        resource = Resource(resource_desc="map", mime_type="image/png", size=-1)
        assert validate(resource).paths() == ["size"]

    def test_non_numeric_size(self):
        resource = Resource(resource_desc="map", mime_type="image/png", size="big")
        assert validate(resource).messages_for("size") == ["is not a number"]


class TestEngine:
    def test_rules_are_class_level(self):
        assert Presence("identifier") in Alert.validation_rules()
        assert Alert.validation_rules() is Alert.VALIDATION_RULES

    def test_entity_helpers(self, alert):
        assert alert.is_valid()
        assert alert.validate() == validate(alert)

    def test_result_helpers(self):
        result = ValidationResult((Violation("a", "is bad"), Violation("a", "is worse"), Violation("b", "is bad")))
        assert not result.valid
        assert result.paths() == ["a", "a", "b"]
        assert result.messages_for("a") == ["is bad", "is worse"]
        assert str(result.violations[0]) == "a is bad"

    def test_inclusion_ignores_none(self):
        rule = Inclusion("status", ("Actual",))
        assert list(rule.check(Alert(), None)) == []

    def test_unvalidatable_object(self):
        assert not validate(object()).valid


class TestCollectionTypes:
    def test_single_info_instead_of_list(self, alert_factory):
        alert = alert_factory("1.2")
        alert.infos = alert.infos[0]
        result = validate(alert)
        assert result.paths() == ["infos"]
        assert result.messages_for("infos") == ["is not a collection"]

    def test_string_instead_of_categories(self, alert_factory):
        alert = alert_factory("1.2")
        alert.infos[0].categories = "Geo"
        assert validate(alert).messages_for("infos[0].categories") == ["is not a collection"]

    def test_polygon_points_reported_once(self):
        polygon = Polygon(points=Point(0, 0))
        assert validate(polygon).messages_for("points") == ["is not a collection"]

    def test_tuples_are_collections(self):
        polygon = Polygon(points=(Point(0, 0), Point(0, 1), Point(1, 1), Point(0, 0)))
        assert validate(polygon).valid
