#!/usr/bin/env python3
"""
Purpose:
    Discovers content files under a content root and turns each one into a
    raw record: YAML front matter for Markdown entries, the whole document
    for YAML/JSON data entries.

Layout:
    <content_root>/<collection>/**/<entry>.(md|mdx|markdown|yaml|yml|json)
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple, Union

import yaml

from contentschema.core.constants import (
    DEFAULT_TEXT_ENCODING,
    FRONT_MATTER_DELIMITER,
    SUPPORTED_CONTENT_EXT,
    SUPPORTED_DATA_EXT,
)
from contentschema.core.errors import ContentLoadError

logger = logging.getLogger(__name__)

SUPPORTED_ENTRY_EXT = SUPPORTED_CONTENT_EXT | SUPPORTED_DATA_EXT


@dataclass(frozen=True)
class ContentSource:
    """A discovered content file and the collection it belongs to."""
    collection: str
    path: Path
    root: Path

    @property
    def slug(self) -> str:
        """Path under the collection directory, without extension, lowercased."""
        rel = self.path.relative_to(self.root / self.collection)
        return rel.with_suffix("").as_posix().lower()


@dataclass(frozen=True)
class ContentEntry:
    """
    One loaded content file.
    - collection: collection name (first directory under the content root)
    - source: path to the file
    - slug: entry id derived from the path
    - data: raw record (front matter / data document), not yet validated
    - body: Markdown body after the front matter (empty for data entries)
    """
    collection: str
    source: Path
    slug: str
    data: Any
    body: str = ""


# --- Front matter --- #

def split_front_matter(text: str, source: Union[str, Path] = "<string>") -> Tuple[Any, str]:
    """
    Split a Markdown document into (front matter, body).

    The front matter is a YAML block opened by a `---` line on the first line
    and closed by the next `---` (or `...`) line. A document without it yields
    an empty mapping. An empty block yields an empty mapping too.

    Raises:
        ContentLoadError: if the block is unterminated or not valid YAML
    """
    text = text.lstrip("\ufeff")
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return {}, text

    for i, line in enumerate(lines[1:], start=1):
        if line.strip() in (FRONT_MATTER_DELIMITER, "..."):
            block = "".join(lines[1:i])
            body = "".join(lines[i + 1:])
            return _parse_yaml(block, source), body

    raise ContentLoadError(source, "front matter is not terminated by a '---' line")


def _parse_yaml(block: str, source: Union[str, Path]) -> Any:
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        first = str(e).splitlines()[0] if str(e) else type(e).__name__
        raise ContentLoadError(source, f"invalid YAML front matter ({first})") from e
    return {} if data is None else data


# --- Loading --- #

def load_entry(source: ContentSource) -> ContentEntry:
    """
    Read and parse one content file.

    Raises:
        ContentLoadError: unreadable file, malformed front matter or data document
    """
    p = source.path
    try:
        text = p.read_text(encoding=DEFAULT_TEXT_ENCODING)
    except (OSError, UnicodeDecodeError) as e:
        raise ContentLoadError(p, f"cannot read file ({e})") from e

    suffix = p.suffix.lower()
    if suffix in SUPPORTED_CONTENT_EXT:
        data, body = split_front_matter(text, source=p)
    elif suffix == ".json":
        try:
            data, body = json.loads(text), ""
        except json.JSONDecodeError as e:
            raise ContentLoadError(p, f"invalid JSON: {e.msg} (line {e.lineno}, col {e.colno})") from e
    else:
        data, body = _parse_yaml(text, p), ""

    return ContentEntry(collection=source.collection, source=p, slug=source.slug, data=data, body=body)


# --- Discovery --- #

def discover_sources(root: Union[str, Path], collections: Optional[Iterable[str]] = None) -> List[ContentSource]:
    """
    Find every content file under `root`, grouped by top-level directory.

    Args:
        root: content root (e.g. `src/content`)
        collections: restrict to these collection directories (case-insensitive)

    Returns:
        Sources sorted by path. Files directly under `root` belong to no
        collection and are skipped.
    """
    root = Path(root)
    if not root.is_dir():
        logger.warning("Content root %s does not exist", root)
        return []
    wanted = {c.strip().lower() for c in collections} if collections is not None else None

    sources: List[ContentSource] = []
    for coll_dir in sorted(p for p in root.iterdir() if p.is_dir()):
        name = coll_dir.name.lower()
        if wanted is not None and name not in wanted:
            continue
        for p in sorted(coll_dir.rglob("*")):
            if _is_entry_file(p):
                sources.append(ContentSource(collection=coll_dir.name, path=p, root=root))
    logger.debug("Discovered %d content file(s) under %s", len(sources), root)
    return sources


def sources_for_paths(paths: Iterable[Union[str, Path]], root: Union[str, Path]) -> List[ContentSource]:
    """
    Map explicit files/directories (as given on a command line) to sources.

    A directory is scanned recursively. The collection is the first path
    component under `root`.

    Raises:
        ContentLoadError: if a path is not inside `root`'s collections
    """
    root = Path(root).resolve()
    found: set[Path] = set()
    for raw in paths:
        p = Path(raw).resolve()
        if p.is_dir():
            found.update(f for f in p.rglob("*") if _is_entry_file(f))
        elif _is_entry_file(p):
            found.add(p)
        else:
            raise ContentLoadError(p, "not a content file or directory")

    sources: List[ContentSource] = []
    for p in sorted(found):
        try:
            rel = p.relative_to(root)
        except ValueError:
            raise ContentLoadError(p, f"is not under the content root {str(root)!r}") from None
        if len(rel.parts) < 2:
            raise ContentLoadError(p, "is not inside a collection directory")
        sources.append(ContentSource(collection=rel.parts[0], path=p, root=root))
    return sources


def _is_entry_file(p: Path) -> bool:
    # names starting with '_' or '.' are drafts/partials, as in the site layout
    return p.is_file() and p.suffix.lower() in SUPPORTED_ENTRY_EXT and not p.name.startswith(("_", "."))
