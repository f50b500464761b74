from typing import Any, Mapping

# Type aliases for better clarity
Row = Any
SortSpec = list[tuple[str, int]]
FilterSpec = dict[str, Any]

# Constants
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
CURSOR_VERSION = 1  # Bump when the cursor payload layout changes


def get_field(row: Row, name: str, default: Any = None) -> Any:
    """Read a field from a mapping row or an attribute-style row.

    Args:
        row: Mapping (e.g. a raw MongoDB document) or object (e.g. a pydantic model)
        name: Field name
        default: Value returned when the field is absent

    Returns:
        The field value, or ``default``
    """
    if isinstance(row, Mapping):
        return row.get(name, default)
    return getattr(row, name, default)
