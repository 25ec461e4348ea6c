"""Compile OWL ontologies into OpenAPI schemas and per-class path policies."""

from .config import YamlConfig
from .exceptions import (
    ConfigValidationError,
    InconsistentOntologyError,
    InvalidOntologyFormatError,
    OntoApiError,
)
from .mapper import Mapper, MappingResult
from .ontology import Ontology
from .restrictions import RestrictionKind, classify

__version__ = "0.1.0"
