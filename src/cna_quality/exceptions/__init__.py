"""Exception hierarchy for CNA Quality."""

from .base import CnaQualityError
from .config import ConfigurationError, InvalidConfigError
from .interchange import InterchangeError, TemplateFormatError, UnknownKeyError
from .model import (
    DuplicateEntityError,
    EndpointNotFoundError,
    EntityNotFoundError,
    EntityTypeError,
    InvalidPropertyValueError,
    ModelIntegrityError,
    PropertyNotFoundError,
)
from .quality import (
    DuplicateFactorError,
    MissingMeasureError,
    QualityModelError,
    UnknownFactorError,
)

__all__ = [
    "CnaQualityError",
    "ModelIntegrityError",
    "EndpointNotFoundError",
    "EntityNotFoundError",
    "DuplicateEntityError",
    "EntityTypeError",
    "PropertyNotFoundError",
    "InvalidPropertyValueError",
    "QualityModelError",
    "UnknownFactorError",
    "DuplicateFactorError",
    "MissingMeasureError",
    "ConfigurationError",
    "InvalidConfigError",
    "InterchangeError",
    "TemplateFormatError",
    "UnknownKeyError",
]
