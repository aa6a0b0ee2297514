from .loader import load_project, read_project_payload
from .schema import PROJECT_SCHEMA, iter_project_errors, validate_project

__all__ = [
    "PROJECT_SCHEMA",
    "iter_project_errors",
    "load_project",
    "read_project_payload",
    "validate_project",
]
