import unittest

from schemas.scenario import ScenarioImpact
from services.scenarios.descriptor import build_basic_descriptor
from services.scenarios.deterministic_impacts import generate_deterministic_impacts
from services.scenarios.errors import SchemaViolationError
from services.scenarios.validation import clamp_impact, validate_impact_assessment


def _valid_payload() -> dict:
    impacts = generate_deterministic_impacts(build_basic_descriptor("inflation", 4, "increase"))
    return impacts.model_dump(by_alias=True)


class TestValidateImpactAssessment(unittest.TestCase):
    def test_valid_assessment_passes(self):
        validate_impact_assessment(ScenarioImpact.model_validate(_valid_payload()))

    def test_bounds_are_inclusive(self):
        data = _valid_payload()
        data["markets"]["stocks"]["overall"] = 10
        data["markets"]["bonds"]["overall"] = -10
        validate_impact_assessment(ScenarioImpact.model_validate(data))

    def test_out_of_range_sector_names_field(self):
        data = _valid_payload()
        data["markets"]["stocks"]["sectors"]["Technology"]["impact"] = 10.5
        with self.assertRaises(SchemaViolationError) as ctx:
            validate_impact_assessment(ScenarioImpact.model_validate(data))
        self.assertEqual(ctx.exception.field, "markets.stocks.sectors.Technology.impact")

    def test_out_of_range_macro_indicator(self):
        data = _valid_payload()
        data["markets"]["economy"]["gdp"] = -11
        with self.assertRaises(SchemaViolationError) as ctx:
            validate_impact_assessment(ScenarioImpact.model_validate(data))
        self.assertEqual(ctx.exception.field, "markets.economy.gdp")

    def test_nan_is_rejected(self):
        data = _valid_payload()
        data["markets"]["commodities"]["gold"] = float("nan")
        with self.assertRaises(SchemaViolationError):
            validate_impact_assessment(ScenarioImpact.model_validate(data))

    def test_infinity_names_field(self):
        data = _valid_payload()
        data["markets"]["commodities"]["oil"] = float("-inf")
        with self.assertRaises(SchemaViolationError) as ctx:
            validate_impact_assessment(ScenarioImpact.model_validate(data))
        self.assertEqual(ctx.exception.field, "markets.commodities.oil")

    def test_empty_analysis(self):
        data = _valid_payload()
        data["analysis"] = "  "
        with self.assertRaises(SchemaViolationError) as ctx:
            validate_impact_assessment(ScenarioImpact.model_validate(data))
        self.assertEqual(ctx.exception.field, "analysis")

    def test_empty_learning_points(self):
        data = _valid_payload()
        data["learningPoints"] = []
        with self.assertRaises(SchemaViolationError) as ctx:
            validate_impact_assessment(ScenarioImpact.model_validate(data))
        self.assertEqual(ctx.exception.field, "learningPoints")

    def test_blank_learning_point(self):
        data = _valid_payload()
        data["learningPoints"].append("")
        with self.assertRaises(SchemaViolationError):
            validate_impact_assessment(ScenarioImpact.model_validate(data))

    def test_empty_description(self):
        data = _valid_payload()
        data["markets"]["bonds"]["description"] = ""
        with self.assertRaises(SchemaViolationError) as ctx:
            validate_impact_assessment(ScenarioImpact.model_validate(data))
        self.assertEqual(ctx.exception.field, "markets.bonds.description")

    def test_clamp(self):
        self.assertEqual(clamp_impact(42), 10)
        self.assertEqual(clamp_impact(-42), -10)
        self.assertEqual(clamp_impact(3.5), 3.5)


if __name__ == "__main__":
    unittest.main()
