"""
JSON Schema builder with bottom-up traversal and pure transforms.

Traversal covers ``properties`` and ``patternProperties`` of object schemas,
``items`` of array schemas (single schema or tuple) and every member of
``anyOf``/``allOf``/``oneOf``. Boolean sub-schemas are skipped. Children are
always visited before their parent.

Sub-schema paths are built from the root, for example
``/properties/user/properties/name``, ``/items/0`` or ``/anyOf/1``.
"""

from __future__ import annotations

import copy

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from aipi.core.constants import SCHEMA_COMBINATORS
from aipi.schemas.json_schema_validator import JSONSchemaValidator
from aipi.schemas.schema_builder import SchemaBuilder, SchemaBuilderOptions, ValidationResult
from aipi.utils.logger import logger

JSONSchema = dict[str, Any]

#: Receives a sub-schema and its path. Used for read-only traversal.
SubSchemaCallback = Callable[[JSONSchema, str], None]

#: Receives a shallow copy of a sub-schema (children already transformed) and
#: its path. Returning a mapping replaces the node, returning None keeps it.
SchemaTransformer = Callable[[JSONSchema, str], Mapping[str, Any] | None]

RefResolver = Callable[[str, JSONSchema, str], Mapping[str, Any] | None]


def _children(schema: Mapping[str, Any], path: str) -> list[tuple[tuple[str, Any], Any, str]]:
    """Direct sub-schemas of a node as ``(location, child, child_path)``.

    ``location`` is ``(keyword, key_or_index)``, or ``("items", None)`` for a
    single ``items`` schema.
    """
    found: list[tuple[tuple[str, Any], Any, str]] = []

    if schema.get("type") == "object":
        for keyword in ("properties", "patternProperties"):
            members = schema.get(keyword)
            if isinstance(members, Mapping):
                for key, child in members.items():
                    found.append(((keyword, key), child, f"{path}/{keyword}/{key}"))

    items = schema.get("items")
    if schema.get("type") == "array" and items is not None:
        if isinstance(items, list):
            for index, child in enumerate(items):
                found.append((("items", index), child, f"{path}/items/{index}"))
        else:
            found.append((("items", None), items, f"{path}/items"))

    for keyword in SCHEMA_COMBINATORS:
        members = schema.get(keyword)
        if isinstance(members, list):
            for index, child in enumerate(members):
                found.append(((keyword, index), child, f"{path}/{keyword}/{index}"))

    return [entry for entry in found if isinstance(entry[1], Mapping)]


def for_each_sub_schema(schema: JSONSchema, callback: SubSchemaCallback, path: str = "") -> None:
    """Visit every sub-schema of ``schema`` bottom-up, the root last."""
    for _, child, child_path in _children(schema, path):
        for_each_sub_schema(child, callback, child_path)
    callback(schema, path)


def transform_schema(schema: Mapping[str, Any], transformer: SchemaTransformer, path: str = "") -> JSONSchema:
    """Return a transformed copy of ``schema``. The input is never mutated.

    Children are transformed first, so ``transformer`` sees a node whose
    sub-schemas are already in final form.
    """
    node: JSONSchema = dict(schema)

    for (keyword, slot), child, child_path in _children(schema, path):
        transformed = transform_schema(child, transformer, child_path)
        if slot is None:
            node[keyword] = transformed
            continue
        container = node[keyword]
        if container is schema[keyword]:
            # Copy the container once before writing into it
            container = dict(container) if isinstance(container, Mapping) else list(container)
            node[keyword] = container
        container[slot] = transformed

    replacement = transformer(dict(node), path)
    return dict(replacement) if replacement is not None else node


def resolve_obj_path(schema: Mapping[str, Any], path: str) -> JSONSchema | None:
    """Sub-schema at a dotted property path (``user.address.street``), or None."""
    current: Any = schema
    for part in path.split("."):
        properties = current.get("properties") if isinstance(current, Mapping) else None
        if not isinstance(properties, Mapping):
            return None
        current = properties.get(part)
        if not isinstance(current, Mapping):
            return None
    return current  # type: ignore[no-any-return]


def is_object_like_schema(schema: Mapping[str, Any] | bool) -> bool:
    """True for object, array and untyped schemas (and the ``true`` schema)."""
    if isinstance(schema, bool):
        return schema
    return schema.get("type") in ("object", "array") or not schema.get("type")


@dataclass(frozen=True)
class JSONSchemaBuilderOptions(SchemaBuilderOptions):
    """
    Attributes:
        validator: Validator used instead of the default "is a mapping" check
    """

    validator: JSONSchemaValidator | None = None


class JSONSchemaBuilder(SchemaBuilder[JSONSchema]):
    """Builder for JSON schemas. Subclass to add provider profiles."""

    #: Schema the built schema is checked against when a validator is set
    meta_schema: ClassVar[JSONSchema] = {"type": "object"}

    def __init__(self, schema: JSONSchema | None = None, options: JSONSchemaBuilderOptions | None = None) -> None:
        self.options = options or JSONSchemaBuilderOptions()
        super().__init__(schema if schema is not None else {}, self.options)

    for_each_sub_schema = staticmethod(for_each_sub_schema)
    transform_schema = staticmethod(transform_schema)
    resolve_obj_path = staticmethod(resolve_obj_path)
    is_object_like_schema = staticmethod(is_object_like_schema)

    def validate(self, schema: JSONSchema) -> ValidationResult:
        if self.options.validator is not None:
            return self.options.validator.validate(self.meta_schema, schema)
        if not isinstance(schema, Mapping):
            return ValidationResult(errors=["Invalid schema"])
        return ValidationResult()

    def transform(self, transformer: SchemaTransformer) -> JSONSchemaBuilder:
        """Replace the schema with ``transform_schema(schema, transformer)``."""
        self._schema = transform_schema(self._schema, transformer)
        return self

    def sub(self, path: str, schema: JSONSchema) -> JSONSchemaBuilder:
        """Set a sub-schema at a dotted property path.

        Intermediate object schemas are created as needed, e.g. ``user.address.street``.
        """
        *parents, last = path.split(".")
        current = self._schema
        for part in parents:
            properties = current.setdefault("properties", {})
            if not isinstance(properties.get(part), dict):
                properties[part] = {}
            current = properties[part]
        current.setdefault("properties", {})[last] = schema
        return self

    def pick(self, paths: list[str]) -> JSONSchemaBuilder:
        """Keep only the given dotted property paths.

        Parents keep their own keywords (type, description...); ``required``
        lists are narrowed to the picked properties. Unknown paths are skipped.
        """

        def shell(node: Mapping[str, Any]) -> JSONSchema:
            return {k: copy.deepcopy(v) for k, v in node.items() if k not in ("properties", "required")}

        source = self._schema
        picked = shell(source)
        # (picked node, source node) pairs whose required list needs narrowing
        parents: list[tuple[JSONSchema, Mapping[str, Any]]] = [(picked, source)]

        for path in paths:
            resolved = resolve_obj_path(source, path)
            if resolved is None:
                logger.debug(f"Schema path not found, skipping pick: {path}")
                continue
            src_node: Mapping[str, Any] = source
            dst_node = picked
            *steps, last = path.split(".")
            for part in steps:
                src_node = src_node["properties"][part]
                properties = dst_node.setdefault("properties", {})
                if part not in properties:
                    properties[part] = shell(src_node)
                    parents.append((properties[part], src_node))
                dst_node = properties[part]
            dst_node.setdefault("properties", {})[last] = copy.deepcopy(resolved)

        for node, original in parents:
            if isinstance(original.get("required"), list):
                node["required"] = [key for key in original["required"] if key in node.get("properties", {})]

        self._schema = picked
        return self

    def inject_refs(self, refs: Mapping[str, Mapping[str, Any]] | RefResolver) -> JSONSchemaBuilder:
        """Replace ``$ref`` nodes with the referenced schema.

        ``refs`` maps ref values to schemas, or is a callable
        ``(ref, sub_schema, path) -> schema | None``. The referenced schema's
        keys are merged over the node and ``$ref`` is dropped. Unresolved refs
        are left in place.
        """

        def inject(node: JSONSchema, path: str) -> JSONSchema | None:
            ref = node.get("$ref")
            if not isinstance(ref, str):
                return None
            target = refs(ref, node, path) if callable(refs) else refs.get(ref)
            if target is None:
                return None
            merged = {k: v for k, v in node.items() if k != "$ref"}
            merged.update(copy.deepcopy(dict(target)))
            return merged

        return self.transform(inject)


__all__ = [
    "JSONSchema",
    "JSONSchemaBuilder",
    "JSONSchemaBuilderOptions",
    "RefResolver",
    "SchemaTransformer",
    "SubSchemaCallback",
    "for_each_sub_schema",
    "is_object_like_schema",
    "resolve_obj_path",
    "transform_schema",
]
