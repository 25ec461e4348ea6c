"""
Errors raised while compiling an ontology into an API description.

Only the fatal conditions are exceptions. Missing descriptions, missing
annotations or unrecognized restriction shapes are logged and resolved to
defaults by the compiler instead.
"""


class OntoApiError(Exception):
    """Base class for every error that aborts a compile run."""


class ConfigValidationError(OntoApiError):
    """The configuration file is incomplete or contradicts itself."""


class InvalidOntologyFormatError(OntoApiError):
    """The ontology document carries no usable prefix declarations."""


class InconsistentOntologyError(OntoApiError):
    """The reasoner found the ontology unsatisfiable."""
