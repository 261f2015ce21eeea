from pathlib import Path
from typing import Dict, Union


def load_sql(path: Union[str, Path]) -> Dict[str, str]:
    """Split a .sql file into named statements.

    Each statement starts with a ``-- name: <key>`` line.
    """
    blocks = Path(path).read_text(encoding="utf-8").split("-- name: ")
    queries = {}
    for block in blocks:
        if not block.strip():
            continue
        name, _, body = block.partition("\n")
        queries[name.strip()] = body.strip()
    return queries
