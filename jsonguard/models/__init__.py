"""Schema declarations, their compiled form and file loading.

This package does not depend on the parse/stringify pipelines so that schema
handling stays usable on its own.
"""

from .schema import (
    ArrayOfSpec,
    ObjectSchema,
    OptionalSpec,
    PrimitiveSpec,
    SchemaIssue,
    SchemaSpec,
    check_declaration,
    compile_schema,
    to_declaration,
)
from .schema_loader import clear_cache, load_schema_file
