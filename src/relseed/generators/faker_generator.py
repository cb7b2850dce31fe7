"""Faker-based value synthesizer."""

import datetime
import decimal
import inspect
import uuid
from typing import Any

from faker import Faker

from relseed.generators.base import BaseSynthesizer
from relseed.introspection import build_instance, field_types, fields_with_defaults
from relseed.models import EntityDefinition


class FakerSynthesizer(BaseSynthesizer):
    """Generate realistic field values using the Faker library."""

    # Field name → Faker method mapping
    FIELD_MAPPINGS = {
        "email": lambda fake: fake.email(),
        "first_name": lambda fake: fake.first_name(),
        "last_name": lambda fake: fake.last_name(),
        "name": lambda fake: fake.name(),
        "full_name": lambda fake: fake.name(),
        "company": lambda fake: fake.company(),
        "phone": lambda fake: fake.phone_number(),
        "phone_number": lambda fake: fake.phone_number(),
        "address": lambda fake: fake.address(),
        "street": lambda fake: fake.street_address(),
        "city": lambda fake: fake.city(),
        "state": lambda fake: fake.state(),
        "country": lambda fake: fake.country(),
        "zip": lambda fake: fake.zipcode(),
        "zipcode": lambda fake: fake.zipcode(),
        "url": lambda fake: fake.url(),
        "username": lambda fake: fake.user_name(),
        "title": lambda fake: fake.sentence(nb_words=4),
        "description": lambda fake: fake.text(max_nb_chars=200),
        "bio": lambda fake: fake.text(max_nb_chars=300),
    }

    # Type-based fallbacks
    TYPE_FALLBACKS = {
        str: lambda fake: fake.text(max_nb_chars=50),
        int: lambda fake: fake.random_int(min=1, max=1000),
        float: lambda fake: fake.pyfloat(min_value=0, max_value=10000),
        decimal.Decimal: lambda fake: fake.pydecimal(
            left_digits=5, right_digits=2, positive=True
        ),
        bool: lambda fake: fake.boolean(),
        datetime.datetime: lambda fake: fake.date_time_this_year(),
        datetime.date: lambda fake: fake.date_this_year(),
        uuid.UUID: lambda fake: fake.uuid4(cast_to=None),
    }

    def __init__(self, locale: str | None = None):
        self.locale = locale

    def synthesize(
        self, definition: EntityDefinition, count: int, seed: int | None = None
    ) -> list[Any]:
        """Create count instances, one Faker call per non-reserved field."""
        fake = Faker(self.locale)
        if seed is not None:
            fake.seed_instance(seed)

        entity_type = definition.entity_type
        fields = field_types(entity_type)
        defaults = fields_with_defaults(entity_type)
        reserved = definition.reserved_fields

        instances = []
        for index in range(1, count + 1):
            values: dict[str, Any] = {}
            for name, annotation in fields.items():
                if name in definition.rules:
                    values[name] = self._apply_rule(definition.rules[name], fake, index)
                elif name in defaults:
                    continue
                elif name in reserved:
                    # Filled by the generator (key) or the resolver (FK)
                    values[name] = None
                else:
                    values[name] = self.generate(name, annotation, fake)

            # Rules may target attributes that are not declared fields
            extra = {n: r for n, r in definition.rules.items() if n not in fields}
            instance = build_instance(entity_type, values)
            for name, rule in extra.items():
                setattr(instance, name, self._apply_rule(rule, fake, index))
            instances.append(instance)

        return instances

    def generate(self, field_name: str, annotation: Any, fake: Faker) -> Any:
        """Generate a value for a field based on name and type."""
        if field_name in self.FIELD_MAPPINGS and annotation in (str, Any):
            return self.FIELD_MAPPINGS[field_name](fake)

        if annotation in self.TYPE_FALLBACKS:
            return self.TYPE_FALLBACKS[annotation](fake)

        if annotation is Any:
            return fake.text(max_nb_chars=50)

        # Unknown shapes (lists, nested models, enums) are left for rules
        return None

    @staticmethod
    def _apply_rule(rule: Any, fake: Faker, index: int) -> Any:
        """
        Evaluate a field rule.

        Callables may take (), (fake) or (fake, index); anything else is used
        as a static value.
        """
        if not callable(rule):
            return rule

        try:
            params = len(inspect.signature(rule).parameters)
        except (TypeError, ValueError):
            params = 1
        if params == 0:
            return rule()
        if params == 1:
            return rule(fake)
        return rule(fake, index)
