"""
In-memory schema tree produced by the compiler.

A SchemaNode mirrors the subset of the OpenAPI 3.0 Schema Object the
compiler needs. A node is either an enum node (enum values, no properties,
no required list) or an object node; ``to_dict`` renders it with a fixed key
order and alphabetically sorted properties/required names so repeated runs
give identical output.
"""

from dataclasses import dataclass, field
from typing import Any

from .constants import SCHEMA_REF_PREFIX


@dataclass
class SchemaNode:
    name: str | None = None
    type: str | None = None
    format: str | None = None
    description: str | None = None
    ref: str | None = None
    nullable: bool | None = None
    read_only: bool | None = None
    write_only: bool | None = None
    default: Any = None
    example: Any = None
    enum: list | None = None
    min_items: int | None = None
    max_items: int | None = None
    items: "SchemaNode | None" = None
    not_: "SchemaNode | None" = None
    all_of: list["SchemaNode"] | None = None
    any_of: list["SchemaNode"] | None = None
    one_of: list["SchemaNode"] | None = None
    properties: dict[str, "SchemaNode"] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)

    # ---- enum / object invariant ----
    @property
    def is_enum(self) -> bool:
        return self.enum is not None

    def make_enum(self, values) -> None:
        """Turn this node into an enum node; properties and required are dropped."""
        vals = []
        for v in values:
            if v not in vals:
                vals.append(v)
        self.enum = vals
        if self.type in (None, "object"):
            self.type = "string"
        self.properties = {}
        self.required = []

    def add_property(self, name: str, prop: "SchemaNode") -> None:
        if self.is_enum:
            raise ValueError(f"Schema '{self.name}' is an enum and cannot carry property '{name}'")
        self.properties[name] = prop

    # ---- helpers ----
    @classmethod
    def reference(cls, schema_name: str) -> "SchemaNode":
        return cls(ref=SCHEMA_REF_PREFIX + schema_name)

    @property
    def ref_name(self) -> str | None:
        if self.ref and self.ref.startswith(SCHEMA_REF_PREFIX):
            return self.ref[len(SCHEMA_REF_PREFIX):]
        return self.ref

    @property
    def is_array(self) -> bool:
        return self.type == "array"

    @property
    def is_composed(self) -> bool:
        return bool(self.all_of or self.any_of or self.one_of)

    def set_required(self, names) -> None:
        self.required = sorted(set(names))

    def to_dict(self) -> dict:
        """OpenAPI rendering of this node."""
        out: dict[str, Any] = {}
        if self.ref is not None:
            out["$ref"] = self.ref
        for key, val in (
            ("type", self.type),
            ("format", self.format),
            ("description", self.description),
            ("nullable", self.nullable),
            ("readOnly", self.read_only),
            ("writeOnly", self.write_only),
            ("default", self.default),
            ("example", self.example),
        ):
            if val is not None:
                out[key] = val
        if self.enum is not None:
            out["enum"] = list(self.enum)
        if self.min_items is not None:
            out["minItems"] = self.min_items
        if self.max_items is not None:
            out["maxItems"] = self.max_items
        if self.items is not None:
            out["items"] = self.items.to_dict()
        if self.not_ is not None:
            out["not"] = self.not_.to_dict()
        for key, members in (("allOf", self.all_of), ("anyOf", self.any_of), ("oneOf", self.one_of)):
            if members:
                out[key] = [m.to_dict() for m in members]
        if self.properties:
            out["properties"] = {k: self.properties[k].to_dict() for k in sorted(self.properties)}
        if self.required:
            out["required"] = sorted(self.required)
        return out
