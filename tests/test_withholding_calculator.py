"""Unit tests for WithholdingCalculator."""

from decimal import Decimal

import pytest
from hypothesis import given, strategies as st

from labor_payroll.calculators.withholding_calculator import WithholdingCalculator
from labor_payroll.errors import InvalidInputError

gross_values = st.decimals(min_value=0, max_value=100000, places=2)

TOTAL_RATE = Decimal("0.12") + Decimal("0.05") + Decimal("0.062") + Decimal("0.0145")


class TestWithholdingCalculator:
    """Test statutory lines and net pay."""

    def test_standard_week(self):
        result = WithholdingCalculator().calculate(Decimal("950.00"))

        assert result.federal_tax == Decimal("114.00")
        assert result.state_tax == Decimal("47.50")
        assert result.social_security == Decimal("58.90")
        assert result.medicare == Decimal("13.78")  # 13.775 rounds half-up
        assert result.other_deductions == Decimal("0.00")
        assert result.net_pay == Decimal("715.82")
        assert result.total_taxes == Decimal("234.18")

    def test_each_line_rounded_before_summing(self):
        # Unrounded lines sum to 24.67465; rounded lines sum to 24.68
        result = WithholdingCalculator().calculate(Decimal("100.10"))

        assert result.federal_tax == Decimal("12.01")
        assert result.state_tax == Decimal("5.01")
        assert result.social_security == Decimal("6.21")
        assert result.medicare == Decimal("1.45")
        assert result.net_pay == Decimal("75.42")

    def test_zero_gross(self):
        result = WithholdingCalculator().calculate(Decimal("0.00"))

        assert result.total_taxes == Decimal("0")
        assert result.net_pay == Decimal("0.00")

    def test_other_deductions_reduce_net(self):
        result = WithholdingCalculator().calculate(Decimal("950.00"), Decimal("100.00"))

        assert result.other_deductions == Decimal("100.00")
        assert result.net_pay == Decimal("615.82")
        assert result.total_deductions == Decimal("334.18")

    def test_net_pay_is_not_clamped(self):
        result = WithholdingCalculator().calculate(Decimal("100.00"), Decimal("90.00"))

        # 100 - 12 - 5 - 6.20 - 1.45 - 90
        assert result.net_pay == Decimal("-14.65")

    def test_other_deductions_rounded_to_cents(self):
        result = WithholdingCalculator().calculate(Decimal("0"), "12.345")
        assert result.other_deductions == Decimal("12.35")

    @pytest.mark.parametrize("value", [Decimal("-0.01"), "abc", None, float("inf")])
    def test_invalid_other_deductions(self, value):
        with pytest.raises(InvalidInputError) as exc_info:
            WithholdingCalculator().calculate(Decimal("100"), value)
        assert exc_info.value.field == "other_deductions"

    @given(gross=gross_values)
    def test_net_tracks_combined_rate(self, gross):
        result = WithholdingCalculator().calculate(gross)

        # Four lines rounded independently can drift up to half a cent each
        assert abs(result.net_pay - gross * (1 - TOTAL_RATE)) <= Decimal("0.02")
        assert result.net_pay <= gross
        assert result.net_pay == gross - result.total_taxes

    def test_largest_storable_other_deductions(self):
        result = WithholdingCalculator().calculate(Decimal("0"), "9999999999.99")
        assert result.other_deductions == Decimal("9999999999.99")
        assert result.net_pay == Decimal("-9999999999.99")

    @pytest.mark.parametrize("value", ["10000000000", "9999999999.995", "1e30"])
    def test_other_deductions_beyond_storage(self, value):
        with pytest.raises(InvalidInputError) as exc_info:
            WithholdingCalculator().validate_other_deductions(value)
        assert exc_info.value.field == "other_deductions"
