"""Generation run configuration: counts, seed, prefill and post-processing."""

from collections.abc import Callable, Iterable
from typing import Any

from relseed.models import CountSpec
from relseed.result import GeneratedData

PostProcessStep = Callable[[GeneratedData], None]


class GenerationConfig:
    """
    Per-run settings passed to DataGenerator.generate().

    Example:
        >>> config = (
        ...     GenerationConfig()
        ...     .count(Customer, 10)
        ...     .ideal_count(Order, 100, min=20)
        ...     .seed(42)
        ... )
    """

    def __init__(self):
        self._count_specs: dict[type, CountSpec] = {}
        self._prefill: dict[type, list[Any]] = {}
        self._post_process_steps: list[PostProcessStep] = []
        self._seed: int | None = None

    def count(self, entity_type: type, count: int) -> "GenerationConfig":
        """
        Generate exactly count instances of entity_type.

        Any instance that cannot resolve a required relation aborts the run.
        Ignored when prefill is set for the same type.

        Raises:
            InvalidCountError: If count is negative
        """
        self._count_specs[entity_type] = CountSpec.exact(count)
        return self

    def ideal_count(self, entity_type: type, count: int, min: int = 1) -> "GenerationConfig":
        """
        Generate up to count instances, discarding the unresolvable ones.

        Args:
            entity_type: Entity class
            count: Instances to synthesize (must be > 0)
            min: Survivors required after resolution (default 1)

        Raises:
            InvalidCountError: If count <= 0, min < 0 or min > count
        """
        self._count_specs[entity_type] = CountSpec.ideal(count, min)
        return self

    def seed(self, seed: int) -> "GenerationConfig":
        """Set the random seed for reproducible generation."""
        self._seed = seed
        return self

    def prefill(self, entity_type: type, instances: Iterable[Any]) -> "GenerationConfig":
        """
        Use supplied instances for entity_type instead of synthesizing them.

        Instances must already have their keys set. Relations declared on the
        type are still resolved against them.
        """
        if instances is None:
            raise TypeError("instances must not be None")
        self._prefill[entity_type] = list(instances)
        return self

    def post_process(self, step: PostProcessStep) -> "GenerationConfig":
        """
        Add a step run after every type is generated.

        Steps run in the order they are added and receive the GeneratedData.
        Use them to compute derived fields or to assert invariants; anything
        they raise aborts the run unchanged.
        """
        if step is None:
            raise TypeError("step must not be None")
        self._post_process_steps.append(step)
        return self

    def get_count_spec(self, entity_type: type) -> CountSpec | None:
        return self._count_specs.get(entity_type)

    def get_prefill(self, entity_type: type) -> list[Any] | None:
        return self._prefill.get(entity_type)

    @property
    def seed_value(self) -> int | None:
        return self._seed

    @property
    def post_process_steps(self) -> list[PostProcessStep]:
        return list(self._post_process_steps)
