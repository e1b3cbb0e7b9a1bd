"""Tests for the pod sanitizer and container helpers."""

from kubehygiene.core.collector import Collector
from kubehygiene.core.config import SanitizeOptions
from kubehygiene.core.issues import Issue, Level
from kubehygiene.sanitizers import container
from kubehygiene.sanitizers.pod import PodSanitizer

from fakes import FakePodLister, make_container, make_pod, make_pod_metrics

FULL = dict(rcpu="100m", rmem="100Mi", lcpu="100m", lmem="100Mi")


def sanitize(lister, options=None):
    sanitizer = PodSanitizer(Collector(), lister)
    sanitizer.sanitize(options)
    return sanitizer.outcome()


class TestPodSanitizer:
    """Tests for PodSanitizer class."""

    def test_good(self):
        outcome = sanitize(FakePodLister({"default/p1": make_pod("p1", **FULL)}))

        assert outcome["default/p1"] == []

    def test_best_effort(self):
        outcome = sanitize(FakePodLister({"default/p1": make_pod("p1")}))

        assert outcome["default/p1"] == [
            Issue("i1", Level.WARN, "No resources defined"),
            Issue("c1", Level.WARN, "No resources defined"),
        ]

    def test_restarts(self):
        """Test containers restarting beyond the ceiling are flagged."""
        pod = make_pod("p1", restarts={"c1": 4, "i1": 3}, **FULL)

        outcome = sanitize(FakePodLister({"default/p1": pod}, restarts=3))

        assert outcome["default/p1"] == [
            Issue("c1", Level.WARN, "Pod was restarted (4) times"),
        ]

    def test_limit_thresholds(self):
        """Test usage close to limits is flagged when opted in."""
        lister = FakePodLister(
            {"default/p1": make_pod("p1", **FULL)},
            metrics={"default/p1": make_pod_metrics("p1", "90m", "50Mi", containers=["c1"])},
        )

        assert sanitize(lister)["default/p1"] == []
        assert sanitize(lister, SanitizeOptions(over_allocs=True))["default/p1"] == [
            Issue("c1", Level.WARN, "CPU threshold (80%) reached (90.00%)"),
        ]

    def test_limit_thresholds_without_limits(self):
        """Test containers without limits have nothing to compare against."""
        lister = FakePodLister(
            {"default/p1": make_pod("p1", rcpu="10m", rmem="10Mi")},
            metrics={"default/p1": make_pod_metrics("p1", "90m", "90Mi")},
        )

        assert sanitize(lister, SanitizeOptions(over_allocs=True))["default/p1"] == []


class TestContainerHelpers:
    """Tests for container resource helpers."""

    def test_pod_requests_ignore_init_containers(self):
        spec = {
            "initContainers": [make_container("i1", rcpu="500m")],
            "containers": [make_container("c1", rcpu="5m", rmem="1Mi"), make_container("c2", rcpu="5m")],
        }

        cpu, mem = container.pod_requests(spec)

        assert cpu == 10
        assert mem == 1024 * 1024

    def test_partial_resources_are_declared(self):
        assert container.check_resources(make_container("c1", lmem="10Mi")) is None
        assert container.check_resources({"name": "c1", "resources": {"requests": {}}}) == Issue(
            "c1", Level.WARN, "No resources defined"
        )
