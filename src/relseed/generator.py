"""DataGenerator: materializes a schema type by type, resolving foreign keys."""

import logging
import random
from dataclasses import dataclass
from typing import Any

from relseed.config import GenerationConfig
from relseed.exceptions import (
    ConfigurationError,
    IdealCountShortfallError,
    UnsupportedKeyTypeError,
)
from relseed.generators import BaseSynthesizer, FakerSynthesizer, get_synthesizer
from relseed.keys import default_key_generator
from relseed.models import CountSpec, EntityDefinition, KeyGenerator, RelationDefinition
from relseed.resolver import RelationResolver, derive_seed, relation_random, type_identity
from relseed.result import GeneratedData
from relseed.schema import Schema
from relseed.settings import RelSeedSettings

logger = logging.getLogger(__name__)


@dataclass
class TypePlan:
    """
    What to do for one entity type in a run.

    Attributes:
        definition: Entity definition
        spec: Count specification (None for prefill without a count)
        prefill: Supplied instances, or None to synthesize
        key_generator: Key generator for synthesized instances
        synthesizer: Value synthesizer for synthesized instances
    """

    definition: EntityDefinition
    spec: CountSpec | None
    prefill: list[Any] | None = None
    key_generator: KeyGenerator | None = None
    synthesizer: BaseSynthesizer | None = None


class DataGenerator:
    """
    Generate in-memory data from a schema.

    Types are processed in generation order. Each type's batch is synthesized
    (or taken from prefill), its relations are resolved against types already
    finalized, and the surviving batch is added to the GeneratedData store
    where later types and post-processing steps can see it.
    """

    def __init__(
        self,
        settings: RelSeedSettings | None = None,
        synthesizer: BaseSynthesizer | None = None,
    ):
        """
        Initialize generator.

        Args:
            settings: Library settings (seed fallback, Faker locale). Logging is
                left alone; call configure_logging(settings) to apply log_level
            synthesizer: Synthesizer used for every type, overriding the
                per-entity synthesizer names
        """
        self.settings = settings or RelSeedSettings()
        self.synthesizer = synthesizer

    def generate(self, schema: Schema, config: GenerationConfig | None = None) -> GeneratedData:
        """
        Run generation.

        Args:
            schema: Built schema
            config: Counts, seed, prefill and post-processing steps

        Returns:
            GeneratedData with every generated or prefilled type

        Raises:
            UnsupportedKeyTypeError: If a key shape has no generator
            UnknownSynthesizerError: If an entity names an unknown synthesizer
            NoEligibleTargetError: If a required relation can't be resolved
            UniqueTargetPoolError: If a unique relation runs out of targets
            IdealCountShortfallError: If too few instances survive an ideal count
        """
        config = config or GenerationConfig()
        seed = config.seed_value if config.seed_value is not None else self.settings.seed

        # Configuration errors surface before anything is synthesized
        plans = self._plan(schema, config, seed)

        data = GeneratedData()
        for entity_type in schema.generation_order:
            plan = plans.get(entity_type)
            if plan is None:
                logger.debug(f"Skipping {entity_type.__name__}: no count or prefill")
                continue

            batch = self._materialize(plan, seed)
            discard: set[int] | None = set() if plan.spec and plan.spec.flexible else None

            relations = schema.relations_for(entity_type)
            for relation in relations:
                if relation.is_self_reference:
                    continue
                targets = data.get(relation.target_type) if relation.target_type in data else []
                self._resolver(schema, relation, seed, data, discard).resolve(batch, targets)

            # Self-references bind within the batch, so they run over survivors
            # only and repeat until no bound parent is discarded
            self_references = [r for r in relations if r.is_self_reference]
            while self_references:
                discarded_before = len(discard) if discard is not None else 0
                for relation in self_references:
                    targets = [
                        item for j, item in enumerate(batch) if not discard or j not in discard
                    ]
                    self._resolver(schema, relation, seed, data, discard).resolve(batch, targets)
                if discard is None or len(discard) == discarded_before:
                    break

            if discard:
                survivors = [item for i, item in enumerate(batch) if i not in discard]
                if len(survivors) < plan.spec.min:
                    raise IdealCountShortfallError(
                        entity_type.__name__, len(batch), len(survivors), plan.spec.min
                    )
                batch = survivors

            data.set(entity_type, batch)
            logger.info(
                f"Generated {len(batch)} {entity_type.__name__}(s)"
                + (f", {len(discard)} discarded" if discard else "")
            )

        for step in config.post_process_steps:
            step(data)

        return data

    @staticmethod
    def _resolver(
        schema: Schema,
        relation: RelationDefinition,
        seed: int | None,
        data: GeneratedData,
        discard: set[int] | None,
    ) -> RelationResolver:
        return RelationResolver(
            relation,
            schema.get_entity(relation.target_type),
            relation_random(relation, seed),
            data,
            discard,
        )

    def _plan(
        self, schema: Schema, config: GenerationConfig, seed: int | None
    ) -> dict[type, TypePlan]:
        """Validate the run configuration and pick generators per type."""
        plans = {}
        for entity_type in schema.generation_order:
            definition = schema.get_entity(entity_type)
            spec = config.get_count_spec(entity_type)
            prefill = config.get_prefill(entity_type)

            if prefill is not None:
                plans[entity_type] = TypePlan(definition, spec, prefill=prefill)
                continue
            if spec is None or spec.count == 0:
                continue

            plans[entity_type] = TypePlan(
                definition,
                spec,
                key_generator=self._key_generator(definition, seed),
                synthesizer=self._synthesizer_for(definition),
            )
        return plans

    def _materialize(self, plan: TypePlan, seed: int | None) -> list[Any]:
        """Prefilled instances as-is, else synthesized instances with fresh keys."""
        if plan.prefill is not None:
            return list(plan.prefill)

        definition = plan.definition
        count = plan.spec.count
        type_seed = None if seed is None else derive_seed(seed, type_identity(definition.entity_type))

        batch = plan.synthesizer.synthesize(definition, count, type_seed)
        if len(batch) != count:
            raise ConfigurationError(
                f"Synthesizer for '{definition.name}' returned {len(batch)} "
                f"instance(s), expected {count}"
            )

        for index, instance in enumerate(batch, start=1):
            definition.set_key(instance, plan.key_generator(index))
        return batch

    def _key_generator(self, definition: EntityDefinition, seed: int | None) -> KeyGenerator:
        if definition.key_generator is not None:
            return definition.key_generator

        rng = None
        if seed is not None:
            rng = random.Random(
                derive_seed(seed, type_identity(definition.entity_type), "key")
            )
        generator = default_key_generator(definition.key_type, rng)
        if generator is None:
            raise UnsupportedKeyTypeError(definition.name, definition.key_type)
        return generator

    def _synthesizer_for(self, definition: EntityDefinition) -> BaseSynthesizer:
        if self.synthesizer is not None:
            return self.synthesizer

        synthesizer_class = get_synthesizer(definition.synthesizer)
        if issubclass(synthesizer_class, FakerSynthesizer):
            return synthesizer_class(locale=self.settings.faker_locale)
        return synthesizer_class()
