"""Foreign key resolution for one relation over one batch of sources."""

import hashlib
import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from relseed.exceptions import NoEligibleTargetError, UniqueTargetPoolError
from relseed.models import EntityDefinition, RelationDefinition, SelectorStrategy
from relseed.result import GeneratedData

logger = logging.getLogger(__name__)


def type_identity(entity_type: type) -> str:
    """Stable, process-independent name of a type."""
    return f"{entity_type.__module__}.{entity_type.__qualname__}"


def derive_seed(seed: int, *parts: str) -> int:
    """
    Combine a global seed with a stable hash of parts.

    Python's hash() is salted per process, so md5 is used instead to keep
    runs with the same seed identical.
    """
    digest = hashlib.md5("->".join(parts).encode()).hexdigest()
    return seed + int(digest[:8], 16)


def relation_random(relation: RelationDefinition, seed: int | None) -> random.Random:
    """
    Random source dedicated to one relation.

    Args:
        relation: Relation being resolved
        seed: Global seed, None for a non-reproducible source

    Returns:
        random.Random whose draws don't depend on the order relations run in
    """
    if seed is None:
        return random.Random()
    return random.Random(
        derive_seed(
            seed,
            type_identity(relation.source_type),
            type_identity(relation.target_type),
        )
    )


@dataclass
class ResolutionSummary:
    """Outcome counts of one resolve() call."""

    bound: int = 0
    nulled: int = 0
    discarded: int = 0


class RelationResolver:
    """
    Assign target keys to the sources of one relation.

    Each active source ends in exactly one state: FK bound to an eligible
    target key, FK set to None (optional relation), or its index added to the
    discard set (ideal count). A required relation with no discard set raises
    instead.
    """

    def __init__(
        self,
        relation: RelationDefinition,
        target_definition: EntityDefinition,
        rng: random.Random,
        data: GeneratedData,
        discard: set[int] | None = None,
    ):
        """
        Initialize resolver.

        Args:
            relation: Relation to resolve
            target_definition: Definition of relation.target_type (key accessor)
            rng: Random source for this relation
            data: Store of finalized types, passed to data-aware predicates
            discard: Indices of discarded sources; None for exact counts
        """
        self.relation = relation
        self.target_definition = target_definition
        self.rng = rng
        self.data = data
        self.discard = discard
        self.summary = ResolutionSummary()

    def resolve(self, sources: Sequence[Any], targets: Sequence[Any]) -> ResolutionSummary:
        """
        Resolve the relation for every source not already discarded.

        Args:
            sources: Current batch of source instances
            targets: Materialized target instances (the batch itself for
                self-references)

        Returns:
            Counts of bound, nulled and discarded sources

        Raises:
            NoEligibleTargetError: Required relation, exact count, no eligible target
            UniqueTargetPoolError: Unique relation without enough eligible targets
        """
        self.summary = ResolutionSummary()
        strategy = self.relation.strategy

        if self.relation.unique:
            if self.relation.has_predicate:
                self._resolve_unique_greedy(sources, targets)
            else:
                self._resolve_unique_permutation(sources, targets)
        elif strategy is SelectorStrategy.RANDOM:
            self._resolve_random(sources, targets)
        elif strategy in (SelectorStrategy.ROUND_ROBIN, SelectorStrategy.SPREAD_EVENLY):
            # SPREAD_EVENLY shares the round-robin binding rule
            self._resolve_cyclic(sources, targets)
        elif strategy is SelectorStrategy.WEIGHTED:
            self._resolve_weighted(sources, targets)
        else:
            raise NotImplementedError(f"Selector strategy {strategy} is not supported")

        logger.debug(
            f"Resolved {self.relation.name} ({strategy.value}"
            f"{', unique' if self.relation.unique else ''}): "
            f"{self.summary.bound} bound, {self.summary.nulled} null, "
            f"{self.summary.discarded} discarded"
        )
        return self.summary

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _resolve_random(self, sources: Sequence[Any], targets: Sequence[Any]) -> None:
        for i in self._active_indices(sources):
            source = sources[i]
            eligible = self._eligible(source, targets)
            if not eligible:
                self._unresolved(i, source, targets)
                continue
            self._bind(source, targets[eligible[self.rng.randrange(len(eligible))]])

    def _resolve_cyclic(self, sources: Sequence[Any], targets: Sequence[Any]) -> None:
        if not self.relation.has_predicate:
            # Cheap path: cycle through the unfiltered target list by batch index
            for i in self._active_indices(sources):
                if not targets:
                    self._unresolved(i, sources[i], targets)
                    continue
                self._bind(sources[i], targets[i % len(targets)])
            return

        for i in self._active_indices(sources):
            source = sources[i]
            eligible = self._eligible(source, targets)
            if not eligible:
                self._unresolved(i, source, targets)
                continue
            self._bind(source, targets[eligible[i % len(eligible)]])

    def _resolve_weighted(self, sources: Sequence[Any], targets: Sequence[Any]) -> None:
        for i in self._active_indices(sources):
            source = sources[i]
            eligible = self._eligible(source, targets)
            if not eligible:
                self._unresolved(i, source, targets)
                continue
            self._bind(source, targets[self._pick_weighted(eligible, targets)])

    def _pick_weighted(self, eligible: list[int], targets: Sequence[Any]) -> int:
        """
        Cumulative-weight sampling over the eligible target indices.

        Negative weights count as zero; an all-zero total falls back to a
        uniform pick.
        """
        weight = self.relation.weight
        weights = [max(0.0, float(weight(targets[j]))) for j in eligible]
        total = sum(weights)

        if total <= 0:
            return eligible[self.rng.randrange(len(eligible))]

        draw = self.rng.random() * total
        cumulative = 0.0
        for j, w in zip(eligible, weights):
            cumulative += w
            if draw < cumulative:
                return j

        # Float rounding can leave draw == total; take the last weighted target
        return next(j for j, w in zip(reversed(eligible), reversed(weights)) if w > 0)

    def _resolve_unique_permutation(
        self, sources: Sequence[Any], targets: Sequence[Any]
    ) -> None:
        """Bind active sources to a random permutation prefix of the targets."""
        active = self._active_indices(sources)
        if not active:
            return

        if not targets:
            for i in active:
                self._unresolved(i, sources[i], targets)
            return

        if len(targets) < len(active) and self.relation.required and self.discard is None:
            raise UniqueTargetPoolError(
                self.relation.source_type.__name__,
                self.relation.target_type.__name__,
                source_count=len(active),
                target_count=len(targets),
            )

        permutation = list(range(len(targets)))
        self.rng.shuffle(permutation)

        for position, i in enumerate(active):
            if position < len(permutation):
                self._bind(sources[i], targets[permutation[position]])
            else:
                self._unresolved(i, sources[i], targets)

    def _resolve_unique_greedy(self, sources: Sequence[Any], targets: Sequence[Any]) -> None:
        """
        Greedy one-to-one assignment under a predicate.

        Sources are served in order, each taking a random target among the
        eligible ones not taken yet. This is not a maximum matching: an early
        source can take the only target a later source could use.
        """
        used: set[int] = set()

        for i in self._active_indices(sources):
            source = sources[i]
            eligible = self._eligible(source, targets)
            available = [j for j in eligible if j not in used]

            if not available:
                if not eligible or not self.relation.required or self.discard is not None:
                    self._unresolved(i, source, targets)
                    continue
                raise UniqueTargetPoolError(
                    self.relation.source_type.__name__,
                    self.relation.target_type.__name__,
                    source_count=len(sources),
                    target_count=len(eligible),
                    source_index=i,
                )

            pick = available[self.rng.randrange(len(available))]
            used.add(pick)
            self._bind(source, targets[pick])

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _active_indices(self, sources: Sequence[Any]) -> list[int]:
        if not self.discard:
            return list(range(len(sources)))
        return [i for i in range(len(sources)) if i not in self.discard]

    def _eligible(self, source: Any, targets: Sequence[Any]) -> list[int]:
        """Indices of targets the source may reference, recomputed per source."""
        relation = self.relation
        if relation.predicate_with_data is not None:
            return [
                j
                for j, target in enumerate(targets)
                if relation.predicate_with_data(source, target, self.data)
            ]
        if relation.predicate is not None:
            return [j for j, target in enumerate(targets) if relation.predicate(source, target)]
        return list(range(len(targets)))

    def _bind(self, source: Any, target: Any) -> None:
        self.relation.set_foreign_key(source, self.target_definition.get_key(target))
        self.summary.bound += 1

    def _unresolved(self, index: int, source: Any, targets: Sequence[Any]) -> None:
        """
        Apply the no-target policy to one source.

        Optional relations null the FK, ideal counts discard the source, and
        anything else is fatal.
        """
        if not self.relation.required:
            self.relation.set_foreign_key(source, None)
            self.summary.nulled += 1
            return
        if self.discard is not None:
            self.discard.add(index)
            self.summary.discarded += 1
            return
        raise NoEligibleTargetError(
            self.relation.source_type.__name__,
            self.relation.target_type.__name__,
            len(targets),
        )
