"""
Template-driven decoding of index documents.

A decode template is a list of ``(wire_key, target_key, spec)`` entries where
``spec`` is either ``PRESERVE`` (copy the value as-is) or a nested template.
Templates are derived from a model's mapping declarations.
"""

from typing import Any, Dict, List, Tuple, Union

PRESERVE = "preserve"

DecodeTemplate = List[Tuple[str, str, Union[str, "DecodeTemplate"]]]


def mapping_template(name: str, properties: Dict[str, Any]) -> Tuple[str, str, Any]:
    """
    Build the template entry for one mapped field.

    Args:
        name: Field name
        properties: Mapping properties declared for the field

    Returns:
        Template entry, with a nested template for object/nested mappings
    """
    sub_properties = properties.get("properties")
    if isinstance(sub_properties, dict):
        return (
            name,
            name,
            [mapping_template(key, value or {}) for key, value in sub_properties.items()],
        )
    return (name, name, PRESERVE)


def decode(template: DecodeTemplate, source: Any) -> Any:
    """
    Decode a source value through a template.

    Dicts decode key by key, lists decode element-wise and anything else
    decodes to None.
    """
    if isinstance(source, list):
        return [decode(template, item) for item in source]

    if not isinstance(source, dict):
        return None

    decoded: Dict[str, Any] = {}
    for wire_key, target_key, spec in template:
        value = source.get(wire_key)
        if spec == PRESERVE:
            decoded[target_key] = value
        else:
            decoded[target_key] = decode(spec, value)
    return decoded
