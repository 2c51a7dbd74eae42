from pathlib import Path
from core.errors import WriteError
from core.logger import setup_logger

logger = setup_logger("Writer")


def output_path(output_dir: Path, name: str, extension: str) -> Path:
    return Path(output_dir) / f"{name}.{extension}"


def write_document(output_dir: Path, name: str, extension: str, document: str) -> Path:
    """Overwrites <output_dir>/<name>.<extension>; line endings are kept as rendered."""
    path = output_path(output_dir, name, extension)
    logger.info(f"💾 Writing {path.name}...")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(document)
    except OSError as e:
        raise WriteError(f"Couldn't write {path}: {e}") from e
    return path
