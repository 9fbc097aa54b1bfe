import random

from vmdash.client.dashboard import build_clone_payload, resource_level, summarize
from vmdash.client.store import demo_vms
from vmdash.models.vm import REGIONS, VMStatus


class TestSummarize:
    def test_demo_dataset_summary(self):
        summary = summarize(demo_vms())
        assert summary.total == 5
        assert summary.running == 2
        assert summary.regions == 5
        assert summary.avg_cpu == 33.4
        assert summary.by_status[VMStatus.IDLING] == 1

    def test_empty(self):
        summary = summarize([])
        assert summary.total == 0
        assert summary.avg_memory == 0.0


class TestResourceLevel:
    def test_thresholds(self):
        assert resource_level(0) == "normal"
        assert resource_level(59) == "normal"
        assert resource_level(60) == "warning"
        assert resource_level(79) == "warning"
        assert resource_level(80) == "critical"
        assert resource_level(150) == "critical"


class TestClonePayload:
    def test_defaults_follow_source(self):
        source = demo_vms()[0]
        payload = build_clone_payload(source, rng=random.Random(1))
        assert payload.name == "web-server-prod-clone"
        assert payload.region == source.region
        assert payload.status is VMStatus.TERMINATED
        assert 10 <= payload.cpu < 40
        assert 20 <= payload.memory < 60
        assert 30 <= payload.storage < 80
        octets = [int(part) for part in payload.ip_address.split(".")]
        assert len(octets) == 4
        assert all(0 <= o < 255 for o in octets)

    def test_auto_start_and_overrides(self):
        payload = build_clone_payload(
            demo_vms()[1], name="db-replica", region=REGIONS[4], auto_start=True
        )
        assert payload.name == "db-replica"
        assert payload.region == "Asia Pacific (Tokyo)"
        assert payload.status is VMStatus.STARTING
