import unittest

from pydantic import ValidationError

from schemas.scenario import ScenarioChange, ScenarioDetails, magnitude_label
from services.scenarios.descriptor import build_basic_descriptor
from services.scenarios.errors import InvalidInputError


class TestMagnitudeLabel(unittest.TestCase):
    def test_boundaries_fall_into_lower_tier(self):
        self.assertEqual(magnitude_label(0.1), "slight")
        self.assertEqual(magnitude_label(2), "slight")
        self.assertEqual(magnitude_label(2.01), "moderate")
        self.assertEqual(magnitude_label(5), "moderate")
        self.assertEqual(magnitude_label(5.01), "significant")
        self.assertEqual(magnitude_label(20), "significant")


class TestBuildBasicDescriptor(unittest.TestCase):
    def test_defaults(self):
        d = build_basic_descriptor("interest_rate", 0.75, "increase")
        self.assertEqual(d.change.type, "interest_rate")
        self.assertEqual(d.change.value, 0.75)
        self.assertEqual(d.change.direction, "increase")
        self.assertEqual(d.change.magnitude, "slight")
        self.assertEqual(d.timeframe, "immediate")
        self.assertEqual(d.change.rationale, "Rising interest rate due to changing economic conditions.")

    def test_decrease_rationale_template(self):
        d = build_basic_descriptor("oil_price", 3, "decrease")
        self.assertEqual(d.change.rationale, "Falling oil price due to changing economic conditions.")
        self.assertEqual(d.change.magnitude, "moderate")

    def test_custom_context_used_verbatim(self):
        d = build_basic_descriptor("tariff", 10, "increase", "Broad tariffs on imported steel.")
        self.assertEqual(d.change.rationale, "Broad tariffs on imported steel.")
        self.assertEqual(d.change.magnitude, "significant")

    def test_blank_context_uses_template(self):
        d = build_basic_descriptor("tariff", 1, "increase", "   ")
        self.assertTrue(d.change.rationale.startswith("Rising tariff"))

    def test_tokens_are_normalized(self):
        d = build_basic_descriptor("  Interest Rate ", 1, " Increase ")
        self.assertEqual(d.change.type, "interest_rate")
        self.assertEqual(d.change.direction, "increase")

    def test_rejects_non_positive_value(self):
        for bad in (0, -1, float("nan"), float("inf"), "abc"):
            with self.subTest(value=bad):
                with self.assertRaises(InvalidInputError):
                    build_basic_descriptor("inflation", bad, "increase")

    def test_rejects_unknown_direction(self):
        with self.assertRaises(InvalidInputError):
            build_basic_descriptor("inflation", 1, "sideways")

    def test_rejects_empty_type(self):
        with self.assertRaises(InvalidInputError):
            build_basic_descriptor("  ", 1, "increase")

    def test_rejects_over_long_type(self):
        with self.assertRaises(InvalidInputError):
            build_basic_descriptor("x" * 65, 1, "increase")
        self.assertEqual(build_basic_descriptor("x" * 64, 1, "increase").change.type, "x" * 64)

    def test_same_input_same_descriptor(self):
        a = build_basic_descriptor("currency", 4, "decrease", "note")
        b = build_basic_descriptor("currency", 4, "decrease", "note")
        self.assertEqual(a, b)


class TestScenarioModels(unittest.TestCase):
    def test_descriptor_is_immutable(self):
        d = build_basic_descriptor("inflation", 1, "increase")
        with self.assertRaises(ValidationError):
            d.timeframe = "long_term"
        with self.assertRaises(ValidationError):
            d.change.value = 9

    def test_magnitude_is_always_derived(self):
        change = ScenarioChange(type="inflation", value=1.5, direction="increase", magnitude="severe")
        self.assertEqual(change.magnitude, "slight")

    def test_timeframe_tokens_normalized(self):
        d = ScenarioDetails.model_validate(
            {"change": {"type": "tariff", "value": 3, "direction": "increase"}, "timeframe": "Short-Term"}
        )
        self.assertEqual(d.timeframe, "short_term")

    def test_rejects_unknown_timeframe(self):
        with self.assertRaises(ValidationError):
            ScenarioDetails.model_validate(
                {"change": {"type": "tariff", "value": 3, "direction": "increase"}, "timeframe": "someday"}
            )


if __name__ == "__main__":
    unittest.main()
