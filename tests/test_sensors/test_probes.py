"""Tests for the probe contract and the psutil probes."""

from collections import namedtuple
from unittest.mock import patch

import psutil
import pytest

from host_sampler.sensors import (
    CpuReading,
    MemoryReading,
    Observation,
    Probe,
    ProbeErrorKind,
    ProbeExecutionFailed,
    ProbeParseFailed,
    ProbeSet,
    ProbeUnavailable,
)
from host_sampler.sensors.platforms import CpuProbe, MemoryProbe, NetworkProbe

BASE = "host_sampler.sensors.platforms.base.psutil"

VirtualMemory = namedtuple("VirtualMemory", "total available percent used free")
NetIO = namedtuple("NetIO", "bytes_sent bytes_recv packets_sent packets_recv")


class StaticProbe(Probe):
    def __init__(self, key: str, reading=None) -> None:
        super().__init__()
        self.key = key
        self.reading = reading

    def sample(self):
        return self.reading


class TestProbeErrors:
    """Test the error taxonomy."""

    @pytest.mark.parametrize(
        "error_cls,kind",
        [
            (ProbeUnavailable, ProbeErrorKind.UNAVAILABLE),
            (ProbeExecutionFailed, ProbeErrorKind.EXECUTION_FAILED),
            (ProbeParseFailed, ProbeErrorKind.PARSE_FAILED),
        ],
    )
    def test_kind_and_key(self, error_cls, kind) -> None:
        error = error_cls("window", "osascript missing")

        assert error.kind is kind
        assert error.key == "window"
        assert str(error) == "osascript missing"


class TestProbeSet:
    """Test ordered, keyed probe collections."""

    def test_preserves_order(self) -> None:
        probes = ProbeSet([StaticProbe("b"), StaticProbe("a"), StaticProbe("c")])

        assert probes.keys == ["b", "a", "c"]
        assert [p.key for p in probes] == ["b", "a", "c"]
        assert len(probes) == 3
        assert "a" in probes
        assert "z" not in probes

    def test_sample_by_key(self) -> None:
        reading = CpuReading(percent=3.0, logical_cores=4)
        probes = ProbeSet([StaticProbe("cpu", reading)])

        assert probes.sample("cpu") == reading

    def test_unknown_key(self) -> None:
        with pytest.raises(KeyError):
            ProbeSet([]).sample("gpu")

    def test_rejects_duplicates(self) -> None:
        with pytest.raises(ValueError, match="Duplicate probe key: cpu"):
            ProbeSet([StaticProbe("cpu"), StaticProbe("cpu")])

    def test_rejects_missing_key(self) -> None:
        with pytest.raises(ValueError, match="has no key"):
            ProbeSet([StaticProbe("")])

    def test_default_clock_is_monotonic(self) -> None:
        probe = StaticProbe("x")
        assert probe.clock() <= probe.clock()


class TestCpuProbe:
    """Test CPU utilization sampling."""

    def test_reading(self) -> None:
        with patch(f"{BASE}.cpu_percent", return_value=37.5) as cpu_percent, patch(
            f"{BASE}.cpu_count", return_value=10
        ):
            reading = CpuProbe(sample_seconds=0.5).sample()

        assert reading == CpuReading(percent=37.5, logical_cores=10)
        cpu_percent.assert_called_once_with(interval=0.5)

    def test_zero_window_is_non_blocking(self) -> None:
        with patch(f"{BASE}.cpu_percent", return_value=0.0) as cpu_percent, patch(
            f"{BASE}.cpu_count", return_value=None
        ):
            reading = CpuProbe(sample_seconds=0).sample()

        cpu_percent.assert_called_once_with(interval=None)
        assert reading.logical_cores == 0

    @pytest.mark.parametrize("value", [-1.0, 100.5])
    def test_out_of_range(self, value: float) -> None:
        with patch(f"{BASE}.cpu_percent", return_value=value), patch(
            f"{BASE}.cpu_count", return_value=8
        ):
            with pytest.raises(ProbeParseFailed):
                CpuProbe().sample()

    def test_psutil_error(self) -> None:
        with patch(f"{BASE}.cpu_percent", side_effect=psutil.AccessDenied()):
            with pytest.raises(ProbeExecutionFailed):
                CpuProbe().sample()


class TestMemoryProbe:
    """Test virtual memory sampling."""

    def test_reading(self) -> None:
        vm = VirtualMemory(
            total=16 * 1024**3, available=8 * 1024**3, percent=50.0, used=8 * 1024**3, free=0
        )
        with patch(f"{BASE}.virtual_memory", return_value=vm):
            reading = MemoryProbe().sample()

        assert reading == MemoryReading(
            used_bytes=8 * 1024**3, total_bytes=16 * 1024**3, percent=50.0
        )

    def test_zero_total(self) -> None:
        vm = VirtualMemory(total=0, available=0, percent=0.0, used=0, free=0)
        with patch(f"{BASE}.virtual_memory", return_value=vm):
            with pytest.raises(ProbeParseFailed):
                MemoryProbe().sample()

    def test_os_error(self) -> None:
        with patch(f"{BASE}.virtual_memory", side_effect=OSError("sysctl failed")):
            with pytest.raises(ProbeExecutionFailed, match="sysctl failed"):
                MemoryProbe().sample()


class TestNetworkProbe:
    """Test per-interface counter observations."""

    def test_one_observation_per_interface(self) -> None:
        counters = {
            "lo0": NetIO(bytes_sent=10, bytes_recv=10, packets_sent=1, packets_recv=1),
            "en0": NetIO(bytes_sent=500, bytes_recv=900, packets_sent=5, packets_recv=9),
        }
        with patch(f"{BASE}.net_io_counters", return_value=counters) as net_io:
            observations = NetworkProbe(clock=lambda: 42.0).sample()

        net_io.assert_called_once_with(pernic=True)
        assert observations == [
            Observation("network/en0", 42.0, {"bytes_sent": 500, "bytes_recv": 900}),
            Observation("network/lo0", 42.0, {"bytes_sent": 10, "bytes_recv": 10}),
        ]

    def test_no_interfaces(self) -> None:
        with patch(f"{BASE}.net_io_counters", return_value={}):
            assert NetworkProbe().sample() == []

    def test_psutil_error(self) -> None:
        with patch(f"{BASE}.net_io_counters", side_effect=OSError("no route")):
            with pytest.raises(ProbeExecutionFailed) as exc_info:
                NetworkProbe().sample()

        assert exc_info.value.key == "network"
