"""
relseed - Relationally valid synthetic data generation

Declare entity types and foreign key relations, then generate in-memory
datasets whose references always point at eligible targets, in dependency
order and reproducibly under a seed.
"""

from relseed.config import GenerationConfig
from relseed.exceptions import (
    CircularDependencyError,
    ConfigurationError,
    DuplicateEntityError,
    EntityNotGeneratedError,
    IdealCountShortfallError,
    InvalidCountError,
    MissingKeyError,
    MissingWeightFunctionError,
    NoEligibleTargetError,
    PrefillError,
    RelSeedError,
    ResolutionError,
    SchemaError,
    UniqueTargetPoolError,
    UnknownSynthesizerError,
    UnregisteredTargetError,
    UnsupportedKeyTypeError,
)
from relseed.generator import DataGenerator
from relseed.generators import (
    BaseSynthesizer,
    FakerSynthesizer,
    clear_synthesizers,
    list_synthesizers,
    register_synthesizer,
)
from relseed.models import CountSpec, EntityDefinition, RelationDefinition, SelectorStrategy
from relseed.prefill import PrefillSource
from relseed.result import GeneratedData
from relseed.schema import Schema, SchemaBuilder
from relseed.settings import RelSeedSettings, configure_logging

__version__ = "0.1.0"

__all__ = [
    "SchemaBuilder",
    "Schema",
    "DataGenerator",
    "GenerationConfig",
    "GeneratedData",
    "SelectorStrategy",
    "CountSpec",
    "EntityDefinition",
    "RelationDefinition",
    "PrefillSource",
    "RelSeedSettings",
    "configure_logging",
    "BaseSynthesizer",
    "FakerSynthesizer",
    "register_synthesizer",
    "list_synthesizers",
    "clear_synthesizers",
    "RelSeedError",
    "SchemaError",
    "ConfigurationError",
    "ResolutionError",
    "CircularDependencyError",
    "DuplicateEntityError",
    "UnregisteredTargetError",
    "MissingKeyError",
    "MissingWeightFunctionError",
    "InvalidCountError",
    "UnsupportedKeyTypeError",
    "UnknownSynthesizerError",
    "PrefillError",
    "NoEligibleTargetError",
    "UniqueTargetPoolError",
    "IdealCountShortfallError",
    "EntityNotGeneratedError",
]
