"""Tests for port resolution."""

from http_prober.core.models import ProbeTarget
from http_prober.prober.ports import resolve_ports


class TestTargetPortFilter:
    """Tests for explicit target port lists."""

    def test_target_order_is_kept(self):
        """Target ports come out in the caller's order."""
        ports = resolve_ports({"8080", "9090"}, target_ports=[9090, 8080])

        assert ports == ["9090", "8080"]

    def test_missing_targets_are_dropped(self):
        """Targets that are not published are silently skipped."""
        ports = resolve_ports({"8080", "9090"}, target_ports=[7000, 8080])

        assert ports == ["8080"]

    def test_targets_ignore_exposed_order(self):
        """Exposed ports play no role once targets are given."""
        ports = resolve_ports(
            {"80", "8080", "9090"},
            target_ports=[80],
            exposed_ports=["8080", "9090"],
        )

        assert ports == ["80"]

    def test_duplicate_targets_kept(self):
        """The target list is filtered, not deduplicated."""
        ports = resolve_ports({"8080", "9090"}, target_ports=[8080, 9090, 8080])

        assert ports == ["8080", "9090", "8080"]

    def test_no_target_available(self):
        """An empty result is valid."""
        assert resolve_ports({"8080"}, target_ports=[1234]) == []


class TestExposedPortOrder:
    """Tests for ordering by exposed ports."""

    def test_unavailable_exposed_port_skipped(self):
        """Exposed ports that are not published are skipped."""
        ports = resolve_ports({"8080"}, exposed_ports=["8080", "9090"])

        assert ports == ["8080"]

    def test_last_declared_first(self):
        """Exposed ports are tried last-declared first, before the rest."""
        ports = resolve_ports(
            {"80", "443", "8080", "9000"},
            exposed_ports=["80", "8080"],
        )

        assert ports[:2] == ["8080", "80"]
        assert sorted(ports[2:]) == ["443", "9000"]

    def test_no_duplicates(self):
        """Repeated exposed declarations do not repeat ports."""
        ports = resolve_ports(
            {"80", "8080", "9000"},
            exposed_ports=["80", "8080", "80"],
        )

        assert ports[:2] == ["80", "8080"]
        assert len(ports) == len(set(ports)) == 3

    def test_transport_suffix_matches_port(self):
        """'8080/tcp' matches the published port '8080'."""
        ports = resolve_ports({"8080", "9000"}, exposed_ports=["8080/tcp"])

        assert ports[0] == "8080"

    def test_no_exposed_ports(self):
        """Without exposed ports every available port is probed."""
        ports = resolve_ports({"1", "2", "3"})

        assert sorted(ports) == ["1", "2", "3"]

    def test_nothing_available(self):
        assert resolve_ports(set(), exposed_ports=["8080"]) == []


class TestAvailablePorts:
    """Tests for the inspector's port bindings."""

    def test_inspector_ports_excluded(self, target: ProbeTarget):
        """Command and event ports are never probed."""
        assert target.available_ports() == {"8080"}

    def test_first_host_port_used(self):
        """Only the first host binding counts."""
        target = ProbeTarget(port_bindings={"80/tcp": ["32770", "32771"]})

        assert target.available_ports() == {"32770"}

    def test_empty_binding_ignored(self):
        target = ProbeTarget(port_bindings={"80/tcp": []})

        assert target.available_ports() == set()
