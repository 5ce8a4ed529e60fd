import json
import logging
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd
from pydantic import ValidationError

from .errors import CatalogError
from .models import Catalog, WordEntry

logger = logging.getLogger(__name__)


def resolve_catalog_path(path: Union[str, Path], fallback_dir: Optional[Path]) -> Path:
    """Return ``path`` if it exists, else the same file name under ``fallback_dir``."""
    path = Path(path)
    if path.is_file():
        return path
    if fallback_dir is not None:
        alt = Path(fallback_dir) / path.name
        if alt.is_file():
            logger.info(f"{path} not found, using {alt}")
            return alt
    raise CatalogError(f"could not open {path}: file not found")


def load_catalog(
    path: Union[str, Path], fallback_dir: Optional[Path] = None
) -> List[WordEntry]:
    """Load the word list used for every quiz in this process.

    JSON files hold ``{"version": ..., "data": [...]}``; CSV files hold one
    word per row with at least ``word`` (or ``term``) and ``article`` columns.
    """
    source = resolve_catalog_path(path, fallback_dir)

    if source.suffix.lower() == ".csv":
        words = _read_csv(source)
    else:
        words = _read_json(source)

    if not words:
        raise CatalogError(f"no words found in {source}")

    logger.info(f"Loaded {len(words)} words from {source}")
    return words


def _read_json(source: Path) -> List[WordEntry]:
    try:
        with source.open(encoding="utf-8") as fh:
            raw = json.load(fh)
    except OSError as e:
        raise CatalogError(f"could not read {source}: {e}") from e
    except ValueError as e:
        raise CatalogError(f"could not decode JSON at {source}: {e}") from e

    try:
        catalog = Catalog.model_validate(raw)
    except ValidationError as e:
        raise CatalogError(f"invalid word list in {source}: {e}") from e

    logger.debug(f"Catalog format version {catalog.version}")
    return catalog.data


def _read_csv(source: Path) -> List[WordEntry]:
    try:
        df = pd.read_csv(source, encoding="utf-8", dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        return []
    except (OSError, ValueError, pd.errors.ParserError) as e:
        raise CatalogError(f"could not read {source}: {e}") from e

    df.columns = [str(c).strip().lower() for c in df.columns]
    if "word" in df.columns and "term" not in df.columns:
        df = df.rename(columns={"word": "term"})
    if "english" in df.columns and "translation" not in df.columns:
        df = df.rename(columns={"english": "translation"})
    if "term" not in df.columns or "article" not in df.columns:
        raise CatalogError(f"{source} is missing the word/article columns")

    try:
        return [WordEntry.model_validate(row) for row in df.to_dict("records")]
    except ValidationError as e:
        raise CatalogError(f"invalid word list in {source}: {e}") from e
