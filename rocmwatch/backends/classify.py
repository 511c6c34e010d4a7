"""Discrete / integrated GPU classification.

rocm-smi does not say whether a GPU is an APU's integrated graphics or a
discrete card, so the kind is inferred:

1. A known APU codename in the product name or card series -> Integrated.
   Checked first because some APUs report a high combined package power.
2. A dedicated memory vendor, or average power above the threshold
   -> Discrete.
3. Otherwise -> Unknown.

The codename list is an allow-list that will always lag behind new parts,
so it is extensible through GpuClassifier and ROCMWATCH_IGPU_KEYWORDS.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from rocmwatch.config import Settings
from rocmwatch.models.constants import (
    DEFAULT_DISCRETE_POWER_WATTS,
    DEFAULT_INTEGRATED_KEYWORDS,
    GpuKind,
)
from rocmwatch.models.device_models import DeviceRecord


def classify(
    record: DeviceRecord,
    keywords: Iterable[str] = DEFAULT_INTEGRATED_KEYWORDS,
    discrete_power_watts: float = DEFAULT_DISCRETE_POWER_WATTS,
) -> GpuKind:
    """Classify a device record.

    Args:
        record: Decoded device.
        keywords: Lower-case codename fragments of integrated GPUs.
        discrete_power_watts: Average power above which a GPU is discrete.

    Returns
    -------
        GpuKind for the device. Pure function of its arguments.
    """
    name = (record.product or "").lower()
    series = (record.card_series or "").lower()

    if any(key in name or key in series for key in keywords):
        return GpuKind.INTEGRATED

    if record.vram_vendor is not None:
        return GpuKind.DISCRETE
    if record.power_avg is not None and record.power_avg > discrete_power_watts:
        return GpuKind.DISCRETE

    return GpuKind.UNKNOWN


@dataclass(frozen=True)
class GpuClassifier:
    """Classification heuristic with a configurable keyword allow-list."""

    keywords: tuple[str, ...] = DEFAULT_INTEGRATED_KEYWORDS
    discrete_power_watts: float = DEFAULT_DISCRETE_POWER_WATTS

    @classmethod
    def from_settings(cls, settings: Settings) -> GpuClassifier:
        """Build a classifier with the default keywords plus configured extras."""
        return cls().with_keywords(settings.extra_integrated_keywords).with_threshold(
            settings.discrete_power_watts
        )

    def with_keywords(self, extra: Iterable[str]) -> GpuClassifier:
        """Return a classifier that also matches ``extra`` codenames."""
        merged = list(self.keywords)
        for key in extra:
            key = key.strip().lower()
            if key and key not in merged:
                merged.append(key)
        return GpuClassifier(tuple(merged), self.discrete_power_watts)

    def with_threshold(self, discrete_power_watts: float) -> GpuClassifier:
        """Return a classifier with a different power threshold."""
        return GpuClassifier(self.keywords, discrete_power_watts)

    def __call__(self, record: DeviceRecord) -> GpuKind:
        return classify(record, self.keywords, self.discrete_power_watts)
