import json
from pathlib import Path

from chatlock.core.errors import PersistenceError


def write_text_atomic(path, text):
    """Write text through a temp file so readers never see a half-written file."""
    path = Path(path)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(path)
    except OSError as e:
        raise PersistenceError(f"writing {path}: {e}") from e


def write_json_atomic(path, payload):
    write_text_atomic(path, json.dumps(payload, indent=2, ensure_ascii=False))
