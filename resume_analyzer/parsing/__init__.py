from .fields import FieldSchema, FieldSpec, ParsedFields, first_list_item, parse_fields, strip_emphasis
from .profiles import PROFILES, AnalysisProfile, get_profile

__all__ = [
    "AnalysisProfile",
    "FieldSchema",
    "FieldSpec",
    "PROFILES",
    "ParsedFields",
    "first_list_item",
    "get_profile",
    "parse_fields",
    "strip_emphasis",
]
