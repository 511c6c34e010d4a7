"""Tests for discrete / integrated GPU classification."""

import pytest

from rocmwatch.backends.classify import GpuClassifier, classify
from rocmwatch.config import Settings
from rocmwatch.models import DeviceRecord, GpuKind


@pytest.mark.parametrize(
    "fields",
    [
        {"product": "AMD Radeon 780M (Phoenix1)"},
        {"card_series": "REMBRANDT"},
        {"product": "Van Gogh"},
        {"product": "Raphael", "vram_vendor": "hynix", "power_avg": 120.0},
    ],
)
def test_integrated_keyword_wins(fields):
    """A codename match is Integrated regardless of vendor or power."""
    assert classify(DeviceRecord(**fields)) is GpuKind.INTEGRATED


def test_memory_vendor_is_discrete_even_at_low_power():
    """A dedicated memory vendor alone is enough for Discrete."""
    record = DeviceRecord(product="Navi 31", vram_vendor="samsung", power_avg=12.0)
    assert classify(record) is GpuKind.DISCRETE


def test_power_threshold_without_vendor():
    """Power above 50 W is Discrete; at or below it stays Unknown."""
    assert classify(DeviceRecord(product="Navi 21", power_avg=50.5)) is GpuKind.DISCRETE
    assert classify(DeviceRecord(product="Navi 21", power_avg=50.0)) is GpuKind.UNKNOWN
    assert classify(DeviceRecord(product="Navi 21")) is GpuKind.UNKNOWN


def test_empty_record_is_unknown():
    """No information means Unknown."""
    assert classify(DeviceRecord()) is GpuKind.UNKNOWN


def test_classification_is_deterministic():
    """The same record always yields the same kind."""
    record = DeviceRecord(product="Navi 31", power_avg=112.0)
    assert classify(record) == classify(record)


def test_classifier_extra_keywords():
    """New codenames can be added without touching the defaults."""
    record = DeviceRecord(product="Strix Point", power_avg=80.0)
    assert GpuClassifier()(record) is GpuKind.DISCRETE

    extended = GpuClassifier().with_keywords([" Strix ", ""])
    assert "strix" in extended.keywords
    assert "phoenix" in extended.keywords
    assert extended(record) is GpuKind.INTEGRATED


def test_classifier_from_settings():
    """Settings contribute extra keywords and the power threshold."""
    settings = Settings(extra_integrated_keywords=("hawk point",), discrete_power_watts=100.0)
    classifier = GpuClassifier.from_settings(settings)

    assert classifier(DeviceRecord(product="Hawk Point")) is GpuKind.INTEGRATED
    assert classifier(DeviceRecord(product="Navi 21", power_avg=80.0)) is GpuKind.UNKNOWN
