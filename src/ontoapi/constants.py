from rdflib import Namespace
from rdflib.namespace import DC, DCTERMS, RDFS, SKOS

PROV = Namespace("http://www.w3.org/ns/prov#")

DEFAULT_DESCRIPTION = "Description not available"

# Checked in this order when looking up a description.
DESCRIPTION_PROPERTIES = (
    DC.description,
    DCTERMS.description,
    RDFS.comment,
    SKOS.definition,
    PROV.definition,
)

SCHEMA_REF_PREFIX = "#/components/schemas/"

OPENAPI_VERSION = "3.0.1"
DEFAULT_API_VERSION = "v1.0.0"

OPENAPI_YAML_FILENAME = "openapi.yaml"
OPENAPI_JSON_FILENAME = "openapi.json"
