"""Custom exceptions with helpful error messages."""

from collections.abc import Sequence


class RelSeedError(Exception):
    """Base exception for relseed errors."""

    pass


# ============================================================================
# Schema errors (raised by SchemaBuilder.build)
# ============================================================================


class SchemaError(RelSeedError):
    """Schema definition is invalid."""

    pass


class DuplicateEntityError(SchemaError):
    """Entity type registered twice in the same schema."""

    def __init__(self, entity_name: str):
        self.entity_name = entity_name
        super().__init__(
            f"Entity type '{entity_name}' is already registered.\n\n"
            f"Suggestions:\n"
            f"1. Register each entity type once and declare all of its relations there\n"
            f"2. Check for a copy-pasted builder.entity({entity_name}, ...) call"
        )


class UnregisteredTargetError(SchemaError):
    """Relation points at a type that is not registered as an entity."""

    def __init__(self, source_name: str, target_name: str):
        self.source_name = source_name
        self.target_name = target_name
        super().__init__(
            f"Relation {source_name} -> {target_name}: target type '{target_name}' "
            f"is not registered as an entity.\n\n"
            f"Suggestions:\n"
            f"1. Register it: builder.entity({target_name}, key='id')\n"
            f"2. Check the target class passed to .relation(...)"
        )


class CircularDependencyError(SchemaError):
    """Circular dependency detected between entity types."""

    def __init__(self, cycle: Sequence[str]):
        self.cycle = list(cycle)
        path = " -> ".join([*self.cycle, self.cycle[0]]) if self.cycle else "unknown"
        super().__init__(
            f"Circular dependency detected: {path}\n\n"
            f"Suggestions:\n"
            f"1. Make one relation in the cycle point the other way\n"
            f"2. Self-references are allowed; only cross-type cycles are rejected\n"
            f"3. Fill one side after generation with a post_process step"
        )


class MissingKeyError(SchemaError):
    """Entity has no key accessor/mutator."""

    def __init__(self, entity_name: str, detail: str = "no key was configured"):
        self.entity_name = entity_name
        super().__init__(
            f"Entity '{entity_name}': {detail}.\n\n"
            f"Suggestions:\n"
            f"1. Name a writable key attribute: builder.entity({entity_name}, key='id')\n"
            f"2. Or pass a (getter, setter) pair as key"
        )


class MissingWeightFunctionError(SchemaError):
    """Weighted strategy used without a weight function."""

    def __init__(self, relation_name: str):
        self.relation_name = relation_name
        super().__init__(
            f"Relation {relation_name} uses the WEIGHTED strategy but no weight "
            f"function was set.\n\n"
            f"Suggestions:\n"
            f"1. Use .weighted(lambda target: target.weight) instead of "
            f".with_strategy(SelectorStrategy.WEIGHTED)"
        )


# ============================================================================
# Configuration errors (raised before any entity is synthesized)
# ============================================================================


class ConfigurationError(RelSeedError):
    """Generation run is misconfigured."""

    pass


class InvalidCountError(ConfigurationError, ValueError):
    """Count specification is out of range."""

    def __init__(self, message: str):
        super().__init__(message)


class UnsupportedKeyTypeError(ConfigurationError):
    """No default key generator exists for the key type."""

    def __init__(self, entity_name: str, key_type: object):
        self.entity_name = entity_name
        self.key_type = key_type
        type_name = getattr(key_type, "__name__", repr(key_type))
        super().__init__(
            f"Key type '{type_name}' of entity '{entity_name}' is not supported.\n\n"
            f"Suggestions:\n"
            f"1. Use a key of type int, str or uuid.UUID\n"
            f"2. Or set a generator: builder.entity({entity_name}, "
            f"key_generator=lambda i: ...)"
        )


class UnknownSynthesizerError(ConfigurationError):
    """Entity names a synthesizer that is not registered."""

    def __init__(self, name: str, available: Sequence[str]):
        self.name = name
        super().__init__(
            f"Unknown synthesizer '{name}'. "
            f"Available: {', '.join(sorted(available)) or 'none'}.\n\n"
            f"Suggestions:\n"
            f"1. Register it first: register_synthesizer('{name}', MySynthesizer)"
        )


class PrefillError(ConfigurationError):
    """Prefill rows cannot be mapped onto the schema."""

    pass


# ============================================================================
# Resolution errors (raised while assigning foreign keys)
# ============================================================================


class ResolutionError(RelSeedError):
    """Foreign key could not be resolved."""

    pass


class NoEligibleTargetError(ResolutionError):
    """Required relation found no eligible target for a source instance."""

    def __init__(self, source_name: str, target_name: str, target_count: int):
        self.source_name = source_name
        self.target_name = target_name
        self.target_count = target_count
        self.target_absent = target_count == 0
        if self.target_absent:
            message = (
                f"Relation {source_name} -> {target_name}: cannot resolve FK because "
                f"no {target_name} entities were generated.\n\n"
                f"Suggestions:\n"
                f"1. Generate at least one: config.count({target_name}, N)\n"
                f"2. Make the relation optional: .optional()\n"
                f"3. Use config.ideal_count(...) to discard unresolvable instances"
            )
        else:
            message = (
                f"Predicate for relation {source_name} -> {target_name} excluded all "
                f"{target_count} target(s).\n\n"
                f"Suggestions:\n"
                f"1. Ensure at least one {target_name} satisfies the filter\n"
                f"2. Make the relation optional: .optional()\n"
                f"3. Use config.ideal_count(...) to discard unresolvable instances"
            )
        super().__init__(message)


class UniqueTargetPoolError(ResolutionError):
    """Unique relation has fewer eligible targets than sources."""

    def __init__(
        self,
        source_name: str,
        target_name: str,
        source_count: int,
        target_count: int,
        source_index: int | None = None,
    ):
        self.source_name = source_name
        self.target_name = target_name
        if source_index is None:
            detail = (
                f"there are {source_count} source(s) and only {target_count} "
                f"eligible target(s)"
            )
        else:
            detail = f"source at index {source_index} has no available eligible targets"
        super().__init__(
            f"Relation {source_name} -> {target_name} is unique but {detail}.\n\n"
            f"Suggestions:\n"
            f"1. Generate at least {source_count} {target_name} entities\n"
            f"2. Make the relation optional: .optional()\n"
            f"3. Use config.ideal_count(...) to discard the extra sources"
        )


class IdealCountShortfallError(RelSeedError):
    """Fewer instances survived resolution than the declared minimum."""

    def __init__(self, entity_name: str, generated: int, survived: int, minimum: int):
        self.entity_name = entity_name
        self.generated = generated
        self.survived = survived
        self.discarded = generated - survived
        self.minimum = minimum
        super().__init__(
            f"Generated {generated} {entity_name}(s) but only {survived} survived "
            f"relation resolution ({self.discarded} discarded due to no eligible "
            f"targets). Minimum required: {minimum}.\n\n"
            f"Suggestions:\n"
            f"1. Increase the target entity counts\n"
            f"2. Relax the relation predicates\n"
            f"3. Lower min in config.ideal_count({entity_name}, ..., min=...)"
        )


# ============================================================================
# Store access
# ============================================================================


class EntityNotGeneratedError(RelSeedError, KeyError):
    """Requested type is not present in the generated data."""

    def __init__(self, entity_name: str):
        self.entity_name = entity_name
        super().__init__(
            f"No generated data for entity type '{entity_name}'. Ensure it was "
            f"registered in the schema and a count or prefill was specified."
        )

    def __str__(self) -> str:
        return str(self.args[0])
