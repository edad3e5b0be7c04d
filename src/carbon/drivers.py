"""Climate driver trajectories for the forcing scenario."""

from __future__ import annotations

from dataclasses import dataclass

from .schema import ModelConstants, ModelParams, SiteRecord


@dataclass(frozen=True)
class DriverState:
    temp: float  # degC
    temp_anomaly: float  # degC above site MAT
    precip: float  # mm
    precip_modifier: float  # fraction of baseline MAP
    pet_modifier: float  # fraction of baseline PET
    aridity: float  # effective aridity index


def drivers_for_year(
    site: SiteRecord,
    params: ModelParams,
    t: int,
    constants: ModelConstants,
) -> DriverState:
    """
    Linear warming and precipitation trends from the site baseline.

    PET grows by a fixed fraction per degree of warming, so the effective
    aridity index rises with wetter trends and erodes with warming.
    """
    temp = site.mat + params.warming_rate * t
    precip_modifier = 1 + (params.precip_change / 100) * t
    precip = site.map * precip_modifier
    anomaly = temp - site.mat
    pet_modifier = max(1 + constants.pet_per_degree * anomaly, constants.eps)
    aridity = site.aridity_index * (precip_modifier / pet_modifier)
    return DriverState(
        temp=temp,
        temp_anomaly=anomaly,
        precip=precip,
        precip_modifier=precip_modifier,
        pet_modifier=pet_modifier,
        aridity=aridity,
    )
