"""Tests for the utilization analyzer."""

from decimal import Decimal

import pytest

from kubehygiene.core.config import Allocations
from kubehygiene.core.issues import ROOT, Issue, Level
from kubehygiene.core.quantity import to_bytes, to_millicores
from kubehygiene.core.utilization import (
    ConsumptionMetrics,
    Dimension,
    UtilizationAnalyzer,
    to_perc,
)

BAND = Allocations(under_perc=100, over_perc=50)


class TestUtilizationAnalyzer:
    """Tests for UtilizationAnalyzer class."""

    def setup_method(self):
        self.analyzer = UtilizationAnalyzer()

    def test_cpu_under_allocated(self):
        issue = self.analyzer.check(
            Dimension.CPU, to_millicores("10m"), to_millicores("20m"), BAND
        )

        assert issue == Issue(
            ROOT, Level.WARN,
            "At current load, CPU under allocated. Current:20m vs Requested:10m (200.00%)",
        )

    def test_memory_under_allocated(self):
        issue = self.analyzer.check(
            Dimension.MEMORY, to_bytes("10Mi"), to_bytes("20Mi"), BAND
        )

        assert issue == Issue(
            ROOT, Level.WARN,
            "At current load, Memory under allocated. Current:20Mi vs Requested:10Mi (200.00%)",
        )

    def test_memory_decimal_units(self):
        issue = self.analyzer.check(
            Dimension.MEMORY, to_bytes("100M"), to_bytes("300M"), BAND
        )

        assert issue == Issue(
            ROOT, Level.WARN,
            "At current load, Memory under allocated. Current:300M vs Requested:100M (300.00%)",
        )

    def test_cpu_over_allocated(self):
        issue = self.analyzer.check(
            Dimension.CPU, to_millicores("60m"), to_millicores("20m"), BAND
        )

        assert issue == Issue(
            ROOT, Level.WARN,
            "At current load, CPU over allocated. Current:20m vs Requested:60m (300.00%)",
        )

    def test_within_tolerance(self):
        assert self.analyzer.check(
            Dimension.CPU, to_millicores("20m"), to_millicores("20m"), BAND
        ) is None
        assert self.analyzer.check(
            Dimension.CPU, to_millicores("20m"), to_millicores("39m"), BAND
        ) is None

    def test_zero_request_skipped(self):
        """Test nothing is compared against a zero baseline."""
        assert self.analyzer.check(Dimension.CPU, Decimal(0), Decimal(500), BAND) is None

    def test_zero_usage_skipped(self):
        """Test missing usage does not produce an over allocation."""
        assert self.analyzer.check(Dimension.CPU, Decimal(500), Decimal(0), BAND) is None

    @pytest.mark.parametrize("requested, current", [
        (1, 1), (1, 2), (2, 1), (10, 31), (31, 10), (100, 1), (1, 100), (7, 9),
    ])
    def test_at_most_one_direction(self, requested, current):
        """Test under and over allocation never both fire."""
        tight = Allocations(under_perc=0, over_perc=0)
        issue = self.analyzer.check(Dimension.CPU, Decimal(requested), Decimal(current), tight)

        assert issue is not None
        under = "under allocated" in issue.message
        over = "over allocated" in issue.message
        assert under != over

    def test_analyze_reports_cpu_then_memory(self):
        mx = ConsumptionMetrics()
        mx.add_requests(to_millicores("60m"), to_bytes("10Mi"))
        mx.add_usage(to_millicores("20m"), to_bytes("20Mi"))

        issues = self.analyzer.analyze(mx, BAND, BAND)

        assert [i.message.split(".")[0] for i in issues] == [
            "At current load, CPU over allocated",
            "At current load, Memory under allocated",
        ]


class TestToPerc:
    """Tests for the percentage helper."""

    def test_to_perc(self):
        assert to_perc(Decimal(20), Decimal(10)) == 200.0
        assert to_perc(Decimal(20), Decimal(0)) == 0.0
