"""Pair the resolved path policies with the compiled schemas in an OpenAPI 3.0 document."""

import re

from .config import PathConfig, YamlConfig
from .constants import DEFAULT_API_VERSION, OPENAPI_VERSION, SCHEMA_REF_PREFIX
from .operations import OperationType, PathKeyType
from .paths import ClassPathPolicy, PathOperation

_SUMMARIES = {
    OperationType.GET_ALL: "List all instances of {name}",
    OperationType.GET_BY_KEY: "Get a single {name} by its {key}",
    OperationType.POST_SINGLE: "Create one {name}",
    OperationType.POST_BULK: "Create several {name} instances",
    OperationType.PUT_BY_KEY: "Update an existing {name}",
    OperationType.PUT_BULK: "Update several {name} instances",
    OperationType.DELETE_BY_KEY: "Delete an existing {name}",
    OperationType.SEARCH_BY_POST: "Search {name} instances",
}


def _operation_id(op: PathOperation, schema_name: str) -> str:
    return re.sub(r"[^0-9A-Za-z_]+", "_", f"{op.operation.label}_{schema_name}")


def _json_content(schema: dict) -> dict:
    return {"application/json": {"schema": schema}}


def _key_parameter(op: PathOperation, path_config: PathConfig) -> dict:
    cfg = path_config.operation(op.operation)
    key_type = cfg.key_type or PathKeyType.STRING
    return {
        "name": op.key_name,
        "in": "path",
        "required": True,
        "description": f"The {cfg.key_name_in_text or op.key_name} of the resource",
        "schema": {"type": key_type.value},
    }


def _search_body(path_config: PathConfig) -> dict:
    cfg = path_config.operation(OperationType.SEARCH_BY_POST)
    props = {}
    for i, name in enumerate(cfg.search_properties):
        type_ = cfg.search_property_types[i] if i < len(cfg.search_property_types) else "string"
        props[name] = {"type": type_}
    body = {"type": "object"}
    if props:
        body["properties"] = props
    return body


def operation_object(op: PathOperation, policy: ClassPathPolicy, path_config: PathConfig) -> dict:
    name = policy.schema_name
    ref = {"$ref": SCHEMA_REF_PREFIX + name}
    many = {"type": "array", "items": ref}
    kind = op.operation

    obj = {
        "summary": _SUMMARIES[kind].format(name=name, key=op.key_name or "key"),
        "operationId": _operation_id(op, name),
        "tags": [name],
    }
    if kind.is_keyed:
        obj["parameters"] = [_key_parameter(op, path_config)]

    if kind is OperationType.GET_ALL:
        responses = {"200": {"description": f"List of {name}", "content": _json_content(many)}}
    elif kind is OperationType.GET_BY_KEY:
        single = many if path_config.operation(kind).response_array else ref
        responses = {"200": {"description": f"The {name}", "content": _json_content(single)}}
    elif kind is OperationType.POST_SINGLE:
        obj["requestBody"] = {"required": True, "content": _json_content(ref)}
        responses = {"201": {"description": f"Created {name}", "content": _json_content(ref)}}
    elif kind is OperationType.POST_BULK:
        obj["requestBody"] = {"required": True, "content": _json_content(many)}
        responses = {"201": {"description": f"Created {name} instances", "content": _json_content(many)}}
    elif kind is OperationType.PUT_BY_KEY:
        obj["requestBody"] = {"required": True, "content": _json_content(ref)}
        responses = {"200": {"description": f"Updated {name}", "content": _json_content(ref)}}
    elif kind is OperationType.PUT_BULK:
        obj["requestBody"] = {"required": True, "content": _json_content(many)}
        responses = {"200": {"description": f"Updated {name} instances", "content": _json_content(many)}}
    elif kind is OperationType.DELETE_BY_KEY:
        responses = {"204": {"description": f"Deleted {name}"}}
    else:
        obj["requestBody"] = {"required": True, "content": _json_content(_search_body(path_config))}
        responses = {"200": {"description": f"Matching {name} instances", "content": _json_content(many)}}

    if path_config.use_common_default_path_responses:
        if kind.is_keyed:
            responses["404"] = {"description": f"{name} not found"}
        responses["default"] = {"description": "Unexpected error"}
    obj["responses"] = responses
    return obj


def build_document(config: YamlConfig, result) -> dict:
    """OpenAPI document for a MappingResult."""
    info = {"title": config.name, "version": DEFAULT_API_VERSION}
    info.update(config.openapi.get("info") or {})
    doc = {"openapi": OPENAPI_VERSION, "info": info}
    if config.openapi.get("servers"):
        doc["servers"] = list(config.openapi["servers"])

    paths: dict = {}
    for policy in sorted(result.policies, key=lambda p: p.base_path):
        for path, methods in policy.paths().items():
            item = paths.setdefault(path, {})
            for method, op in methods.items():
                item[method] = operation_object(op, policy, config.path_config)
    doc["paths"] = paths
    doc["components"] = {
        "schemas": {name: result.schemas[name].to_dict() for name in sorted(result.schemas)}
    }
    return doc
