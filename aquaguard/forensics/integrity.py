"""
Collector Integrity Scoring

Ranks field collectors by how plausible their submissions look, without any
ground truth. Two kinds of rules:

Metric rules (per collector, per tracked metric, penalty points):
1. Variance suppression - readings far more stable than the population
2. Mean deviation - collector mean far from the population mean
3. Normality mismatch - population looks normal, collector does not
4. Benford deviation - first digits far from Benford's Law (high-precision metrics)

History rules (whole time-ordered collector history, subtracted from the score):
5. Travel speed - consecutive samples imply > 130 km/h (applied once)
6. Short-range gradient - nearby consecutive samples differ more than
   physically plausible (optional, -12 per violation)

Score = mean over metrics of max(0, 100 - penalty), minus history penalties,
clamped to [0, 100].
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from ..config import (
    BENFORD_METRICS,
    DEFAULT_COLLECTORS,
    METRIC_KEYS,
    CollectorProfile,
    IntegrityThresholds,
    Metric,
)
from ..geo import elapsed_minutes, sample_distance
from ..models import GradientViolation, RankingEntry, Sample, StatResult
from .digits import benford_deviation, benford_distribution
from .statistics import clean_values, compute_stats

logger = logging.getLogger(__name__)


# =============================================================================
# Rule Definitions
# =============================================================================

@dataclass(frozen=True)
class IntegrityRule:
    """Configuration for a single integrity rule."""
    id: str
    name: str
    scope: str  # 'metric' or 'history'
    description: str
    enabled_by_default: bool = True


INTEGRITY_RULES: Dict[str, IntegrityRule] = {
    "I01": IntegrityRule(
        id="I01",
        name="variance_suppression",
        scope="metric",
        description="Readings unnaturally stable compared with the population",
    ),
    "I02": IntegrityRule(
        id="I02",
        name="mean_deviation",
        scope="metric",
        description="Collector mean far from the population mean",
    ),
    "I03": IntegrityRule(
        id="I03",
        name="normality_mismatch",
        scope="metric",
        description="Population is normally distributed but the collector is not",
    ),
    "I04": IntegrityRule(
        id="I04",
        name="benford_deviation",
        scope="metric",
        description="First digits deviate strongly from Benford's Law",
    ),
    "I05": IntegrityRule(
        id="I05",
        name="travel_speed",
        scope="history",
        description="Consecutive samples imply an impossible travel speed",
    ),
    "I06": IntegrityRule(
        id="I06",
        name="short_range_gradient",
        scope="history",
        description="Physically implausible jump between nearby samples",
        enabled_by_default=False,
    ),
}

# Metric jumps checked between nearby consecutive samples
GRADIENT_METRICS = (
    (Metric.CHLORINE, "chlorine_jump"),
    (Metric.PH, "ph_jump"),
)


# =============================================================================
# Scorer
# =============================================================================

class IntegrityScorer:
    """
    Per-collector integrity score and ranking.

    Usage:
        scorer = IntegrityScorer(check_gradients=True)
        ranking = scorer.rank(samples)
        print(ranking_frame(ranking))

    The scorer holds configuration only; every call recomputes from the
    samples it is given.
    """

    def __init__(
        self,
        thresholds: Optional[IntegrityThresholds] = None,
        collectors: Optional[Mapping[str, CollectorProfile]] = None,
        metrics: Optional[List[str]] = None,
        benford_metrics: Optional[List[str]] = None,
        check_gradients: bool = False,
        disabled_rules: Optional[List[str]] = None,
    ):
        """
        Initialize scorer.

        Args:
            thresholds: Scoring constants. None = defaults.
            collectors: Ordered collector id -> profile. Order breaks score ties.
            metrics: Tracked metrics averaged into the base score.
            benford_metrics: Metrics subject to the Benford rule.
            check_gradients: Enable the short-range gradient rule.
            disabled_rules: Rule ids to skip.
        """
        self.thresholds = thresholds or IntegrityThresholds()
        self.collectors = collectors if collectors is not None else DEFAULT_COLLECTORS
        self.metrics = metrics if metrics is not None else list(METRIC_KEYS)
        self.benford_metrics = benford_metrics if benford_metrics is not None else list(BENFORD_METRICS)

        enabled = {rid for rid, rule in INTEGRITY_RULES.items() if rule.enabled_by_default}
        if check_gradients:
            enabled.add("I06")
        if disabled_rules:
            enabled -= set(disabled_rules)
        self.rule_configs = {rid: r for rid, r in INTEGRITY_RULES.items() if rid in enabled}

    def _enabled(self, name: str) -> bool:
        return any(r.name == name for r in self.rule_configs.values())

    # =========================================================================
    # Ranking
    # =========================================================================

    def rank(self, samples: Iterable[Sample]) -> List[RankingEntry]:
        """
        Score every configured collector and rank them.

        Args:
            samples: Snapshot of all samples

        Returns:
            RankingEntry list, best score first; ties keep collector order
        """
        samples = list(samples)

        unknown = {s.collector_id for s in samples} - set(self.collectors)
        if unknown:
            logger.warning("Ignoring samples from unconfigured collectors: %s", sorted(unknown))

        population = {m: compute_stats(s.metric(m) for s in samples) for m in self.metrics}

        entries = []
        for collector_id, profile in self.collectors.items():
            own = sorted(
                (s for s in samples if s.collector_id == collector_id),
                key=lambda s: s.timestamp,
            )
            entry = self._score_collector(collector_id, own, population)
            entry.label = profile.label
            entries.append(entry)

        ranking = sorted(entries, key=lambda e: -e.score)
        logger.info("Ranked %d collectors from %d samples", len(ranking), len(samples))
        return ranking

    def _score_collector(
        self,
        collector_id: str,
        own: List[Sample],
        population: Dict[str, Optional[StatResult]],
    ) -> RankingEntry:
        if not own:
            return RankingEntry(collector_id=collector_id, total_samples=0, score=0.0)

        flags: List[str] = []
        metric_scores: Dict[str, float] = {}

        for metric in self.metrics:
            values = clean_values(s.metric(metric) for s in own)
            penalty, metric_flags = self._metric_penalty(metric, values, population.get(metric))
            metric_scores[metric] = max(0.0, 100.0 - penalty)
            flags.extend(metric_flags)

        base = sum(metric_scores.values()) / len(metric_scores) if metric_scores else 100.0

        history_penalty = 0.0
        if self._enabled("travel_speed"):
            speed_flag = self._check_travel_speed(own)
            if speed_flag:
                flags.append(speed_flag)
                history_penalty += self.thresholds.speed_penalty

        if self._enabled("short_range_gradient"):
            for v in find_gradient_violations(collector_id, own, self.thresholds):
                flags.append(
                    f"physically implausible short-range jump: {v.metric} "
                    f"{v.previous_value:g} -> {v.value:g} within {v.distance_m:.0f} m"
                )
                history_penalty += self.thresholds.gradient_penalty

        score = min(100.0, max(0.0, base - history_penalty))
        logger.debug("%s: base=%.2f history=-%.1f flags=%d", collector_id, base, history_penalty, len(flags))

        return RankingEntry(
            collector_id=collector_id,
            total_samples=len(own),
            score=score,
            flags=flags,
            metric_scores=metric_scores,
        )

    # =========================================================================
    # Metric Rules
    # =========================================================================

    def _metric_penalty(
        self,
        metric: str,
        values: List[float],
        population: Optional[StatResult],
    ) -> Tuple[float, List[str]]:
        """Penalty points and flags for one collector on one metric."""
        own = compute_stats(values)
        t = self.thresholds
        penalty = 0.0
        flags = []

        if self._enabled("variance_suppression") and self._check_variance_suppression(own, population):
            penalty += t.variance_penalty
            flags.append(f"variance suppression: {metric}")

        if self._enabled("mean_deviation") and self._check_mean_deviation(own, population):
            penalty += t.mean_deviation_penalty
            flags.append(f"mean deviation: {metric}")

        if self._enabled("normality_mismatch") and self._check_normality_mismatch(own, population):
            penalty += t.normality_penalty
            flags.append(f"normality mismatch: {metric}")

        if (
            self._enabled("benford_deviation")
            and metric in self.benford_metrics
            and self._check_benford_deviation(values)
        ):
            penalty += t.benford_penalty
            flags.append(f"Benford deviation: {metric}")

        return penalty, flags

    def _check_variance_suppression(self, own: Optional[StatResult], population: Optional[StatResult]) -> bool:
        if own is None or population is None or population.std_dev == 0:
            return False
        ratio = own.std_dev / population.std_dev
        return ratio < self.thresholds.variance_ratio and own.n > self.thresholds.variance_min_samples

    def _check_mean_deviation(self, own: Optional[StatResult], population: Optional[StatResult]) -> bool:
        if own is None or population is None or population.mean == 0:
            return False
        deviation = abs(own.mean - population.mean) / population.mean
        return deviation > self.thresholds.mean_deviation_ratio and own.n > self.thresholds.mean_deviation_min_samples

    def _check_normality_mismatch(self, own: Optional[StatResult], population: Optional[StatResult]) -> bool:
        if own is None or population is None:
            return False
        return population.is_normal and not own.is_normal

    def _check_benford_deviation(self, values: List[float]) -> bool:
        if len(values) <= self.thresholds.benford_min_samples:
            return False
        deviation = benford_deviation(benford_distribution(values))
        return deviation > self.thresholds.benford_deviation

    # =========================================================================
    # History Rules
    # =========================================================================

    def _check_travel_speed(self, own: List[Sample]) -> Optional[str]:
        """Flag for the first consecutive pair faster than the speed limit."""
        for prev, curr in zip(own, own[1:]):
            minutes = elapsed_minutes(prev, curr)
            if minutes <= 0:
                continue
            speed_kmh = (sample_distance(prev, curr) / 1000) / (minutes / 60)
            if speed_kmh > self.thresholds.max_speed_kmh:
                return f"illegal travel speed: {speed_kmh:.0f} km/h before sample {curr.id}"
        return None


# =============================================================================
# Gradient Violations
# =============================================================================

def find_gradient_violations(
    collector_id: str,
    own: List[Sample],
    thresholds: Optional[IntegrityThresholds] = None,
) -> List[GradientViolation]:
    """Implausible jumps between nearby consecutive samples of one collector (time-ordered)."""
    t = thresholds or IntegrityThresholds()
    violations = []

    for prev, curr in zip(own, own[1:]):
        distance = sample_distance(prev, curr)
        if not (t.gradient_min_distance_m < distance < t.gradient_max_distance_m):
            continue
        for metric, limit_name in GRADIENT_METRICS:
            a = prev.metric(metric)
            b = curr.metric(metric)
            if a is None or b is None:
                continue
            if abs(a - b) > getattr(t, limit_name):
                violations.append(GradientViolation(
                    collector_id=collector_id,
                    metric=metric,
                    previous_value=a,
                    value=b,
                    distance_m=distance,
                    sample_id=curr.id,
                ))
    return violations


def gradient_violations(
    samples: Iterable[Sample],
    collectors: Optional[Iterable[str]] = None,
    thresholds: Optional[IntegrityThresholds] = None,
) -> List[GradientViolation]:
    """Gradient violations for every collector, in collector order."""
    samples = list(samples)
    collectors = list(collectors) if collectors is not None else list(DEFAULT_COLLECTORS)

    violations = []
    for collector_id in collectors:
        own = sorted((s for s in samples if s.collector_id == collector_id), key=lambda s: s.timestamp)
        violations.extend(find_gradient_violations(collector_id, own, thresholds))
    return violations


def ranking_frame(ranking: List[RankingEntry]) -> pd.DataFrame:
    """Ranking as a DataFrame, one row per collector in rank order."""
    return pd.DataFrame([
        {
            "rank": i + 1,
            "collector_id": e.collector_id,
            "label": e.label,
            "total_samples": e.total_samples,
            "score": round(e.score, 2),
            "flags_count": len(e.flags),
            "flags": "; ".join(e.flags),
        }
        for i, e in enumerate(ranking)
    ])
