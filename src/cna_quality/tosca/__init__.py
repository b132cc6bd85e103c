"""TOSCA interchange: System <-> service template conversion."""

from .converter import ToscaConverter, convert_system
from .importer import ToscaImporter, import_template
from .keys import TwoWayKeyIdMap, UniqueKeyManager, normalize_key
from .serialization import from_json, load_template, save_template, to_json

__all__ = [
    "ToscaConverter",
    "convert_system",
    "ToscaImporter",
    "import_template",
    "TwoWayKeyIdMap",
    "UniqueKeyManager",
    "normalize_key",
    "from_json",
    "load_template",
    "save_template",
    "to_json",
]
