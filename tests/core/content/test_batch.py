#!/usr/bin/env python3
import datetime as dt

import pytest

from contentschema.core.content.batch import validate_entries, validate_sources
from contentschema.core.content.loader import ContentEntry, discover_sources
from contentschema.core.errors import ErrorKind

GOOD_POST = """
    ---
    title: Hello
    publishDate: 2024-01-01
    description: d
    author: a
    tags: [x]
    ---
    Body
"""

BAD_POST = """
    ---
    title: Broken
    description: d
    author: a
    tags: notalist
    language: fr
    ---
"""


@pytest.fixture
def content(write_entry):
    write_entry("blog", "good.md", GOOD_POST)
    write_entry("blog", "bad.md", BAD_POST)
    write_entry("blog", "broken.md", "---\ntitle: x\n")
    write_entry("news", "n.md", "---\ntitle: x\n---\n")
    return write_entry.root


def test_validate_sources_report(registry, content):
    report = validate_sources(registry, discover_sources(content))
    assert not report.ok
    assert report.total == 4
    assert [v.slug for v in report.entries] == ["good"]

    good = report.entries[0].record
    assert good["publishDate"] == dt.date(2024, 1, 1)
    assert good["language"] == "en"

    # sorted by source path
    assert [d.source_file for d in report.diagnostics] == sorted(d.source_file for d in report.diagnostics)
    by_name = {d.source_file.rsplit("/", 1)[-1]: d for d in report.diagnostics}

    bad = by_name["bad.md"]
    assert bad.collection == "blog"
    assert sorted(e.kind for e in bad.errors) == sorted([
        ErrorKind.MISSING_REQUIRED_FIELD,
        ErrorKind.TYPE_MISMATCH,
        ErrorKind.INVALID_ENUM_VALUE,
    ])

    assert by_name["broken.md"].errors[0].kind is ErrorKind.MALFORMED_ENTRY
    unknown = by_name["n.md"]
    assert unknown.collection == "news"
    assert unknown.errors[0].kind is ErrorKind.UNKNOWN_COLLECTION
    assert unknown.errors[0].field == "<root>"


def test_parallel_matches_serial(registry, content):
    sources = discover_sources(content)
    serial = validate_sources(registry, sources)
    parallel = validate_sources(registry, list(reversed(sources)), workers=4)
    assert parallel.to_dict() == serial.to_dict()
    assert [v.slug for v in parallel.entries] == [v.slug for v in serial.entries]


def test_report_to_dict(registry, content):
    payload = validate_sources(registry, discover_sources(content)).to_dict()
    assert payload["total"] == 4
    assert payload["valid"] == 1
    assert payload["invalid"] == 3
    assert {"sourceFile", "collection", "errors"} <= set(payload["diagnostics"][0])


def test_validate_entries_and_by_collection(registry, blog_post):
    entries = [
        ContentEntry("blog", "b.md", "b", dict(blog_post)),
        ContentEntry("blog", "a.md", "a", {**blog_post, "language": "id"}),
        ContentEntry("portfolio", "p.yaml", "p", {"title": "only"}),
    ]
    report = validate_entries(registry, entries)
    assert [v.slug for v in report.entries] == ["a", "b"]
    assert report.entries[0].record["language"] == "id"
    assert len(report.by_collection("BLOG")) == 2
    assert report.by_collection("portfolio") == []
    assert report.diagnostics[0].source_file == "p.yaml"
    assert report.diagnostics[0].collection == "portfolio"


def test_empty_input(registry):
    report = validate_sources(registry, [])
    assert report.ok
    assert report.total == 0
