"""Value synthesizers for non-key, non-FK fields."""

from relseed.generators.base import BaseSynthesizer
from relseed.generators.faker_generator import FakerSynthesizer
from relseed.generators.registry import (
    clear_synthesizers,
    get_synthesizer,
    list_synthesizers,
    register_synthesizer,
)

__all__ = [
    "BaseSynthesizer",
    "FakerSynthesizer",
    "clear_synthesizers",
    "get_synthesizer",
    "list_synthesizers",
    "register_synthesizer",
]
