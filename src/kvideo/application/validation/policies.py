"""Sampling policies for source and episode validation.

Both checks probe a small sample and generalize the outcome to the full
set.  The rules are kept as plain functions so callers (and tests) can
swap them without touching the validators.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from kvideo.domain.entities.availability import LivenessProbeResult
from kvideo.domain.playback import is_manifest_url

# Called after every sample probe with all results so far;
# True declares the source available and stops probing.
SourceVerdictPolicy = Callable[[Sequence[LivenessProbeResult]], bool]

# Decides from the sampled probe results whether the episode set works.
EpisodeSamplePolicy = Callable[[Sequence[LivenessProbeResult]], bool]

# Decides a single format-valid episode given the sample verdict.
EpisodeValidityRule = Callable[[str, bool], bool]


def short_circuit_on_first_reachable(results: Sequence[LivenessProbeResult]) -> bool:
    """A source is available as soon as one sample video is reachable."""
    return any(r.is_reachable for r in results)


def any_sample_reachable(results: Sequence[LivenessProbeResult]) -> bool:
    """One reachable sample vouches for every format-valid episode."""
    return any(r.is_reachable for r in results)


def sample_or_manifest(url: str, samples_ok: bool) -> bool:
    """Episode is valid when the sample passed or it is an HLS manifest."""
    return samples_ok or is_manifest_url(url)
