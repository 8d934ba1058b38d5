"""Model schema: index declarations, type inference and document decoding."""

from es_query_builder.schema.type_mappings import TypeMapper
from es_query_builder.schema.index import IndexDefinition
from es_query_builder.schema.decoding import PRESERVE, decode, mapping_template
from es_query_builder.schema.model import Searchable

__all__ = [
    "TypeMapper",
    "IndexDefinition",
    "PRESERVE",
    "decode",
    "mapping_template",
    "Searchable",
]
