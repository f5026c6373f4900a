#!/usr/bin/env python3
"""
Tests for reading and rewriting SVG tile metadata.
"""

import pytest

from tile_viewer.errors import MetadataParseError, MissingMetadataError
from tile_viewer.svg_metadata import (
	apply_keywords,
	extract_metadata,
	parse_document,
	read_metadata,
	rewrite_keywords,
	serialize_document,
	split_keywords,
)
from conftest import INKSCAPE_TILE, PLAIN_TILE


def test_extract_reads_every_field():
	meta = read_metadata(INKSCAPE_TILE)
	assert meta.title == "Stone floor"
	assert meta.viewbox == "0 0 64 64"
	assert meta.width == "64"
	assert meta.height == "64"
	assert meta.format == "image/svg+xml"
	assert meta.date == "2018-03-04"
	assert meta.description == "Grey flagstones"
	assert meta.creator == "Jane"
	assert meta.rights == "CC-BY"
	assert meta.publisher == "Tile Works"
	assert meta.keywords == "stone, floor"


def test_missing_metadata_gives_empty_fields():
	meta = read_metadata(PLAIN_TILE)
	assert meta.title == "Plain"
	assert meta.width == "10"
	assert meta.height == "20"
	assert meta.viewbox == "0 0 10 20"
	for key in ("format", "date", "description", "creator", "publisher", "rights", "keywords"):
		assert getattr(meta, key) == ""


def test_bare_svg_has_all_fields_empty():
	meta = read_metadata("<svg/>")
	assert all(value == "" for value in meta.to_dict().values())


def test_creator_title_is_read_through_parent():
	text = (
		'<svg xmlns="http://www.w3.org/2000/svg" xmlns:dc="http://purl.org/dc/elements/1.1/">'
		"<metadata><dc:creator><dc:title>Jane</dc:title></dc:creator></metadata></svg>"
	)
	meta = read_metadata(text)
	assert meta.creator == "Jane"
	assert meta.rights == ""
	assert meta.keywords == ""


def test_empty_elements_do_not_raise():
	text = (
		'<svg xmlns="http://www.w3.org/2000/svg" xmlns:dc="http://purl.org/dc/elements/1.1/">'
		"<title/><metadata><dc:date/><dc:rights/></metadata></svg>"
	)
	meta = read_metadata(text)
	assert meta.title == ""
	assert meta.date == ""
	assert meta.rights == ""


def test_keywords_from_seq_container():
	text = (
		'<svg xmlns="http://www.w3.org/2000/svg" xmlns:dc="http://purl.org/dc/elements/1.1/"'
		' xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#">'
		"<metadata><dc:subject><rdf:Seq><rdf:li>x</rdf:li><rdf:li>y</rdf:li></rdf:Seq>"
		"</dc:subject></metadata></svg>"
	)
	assert read_metadata(text).keywords == "x, y"


def test_subject_without_container_gives_no_keywords():
	text = (
		'<svg xmlns="http://www.w3.org/2000/svg" xmlns:dc="http://purl.org/dc/elements/1.1/">'
		"<metadata><dc:subject>loose text</dc:subject></metadata></svg>"
	)
	assert read_metadata(text).keywords == ""


def test_split_keywords_trims_and_keeps_empty_items():
	assert split_keywords("a, b ,c") == ["a", "b", "c"]
	assert split_keywords("a,,b") == ["a", "", "b"]
	assert split_keywords("") == [""]


@pytest.mark.parametrize(
	"keywords_csv",
	["a, b ,c", "single", "", "dup, dup", " spaced out , x", "a,,b"],
)
def test_rewrite_then_read_round_trip(keywords_csv):
	updated = rewrite_keywords(INKSCAPE_TILE, keywords_csv)
	expected = ", ".join(item.strip() for item in keywords_csv.split(","))
	assert read_metadata(updated).keywords == expected


def test_user_scenario_is_normalized():
	updated = rewrite_keywords(INKSCAPE_TILE, "a, b ,c")
	assert read_metadata(updated).keywords == "a, b, c"


def test_rewrite_is_idempotent():
	once = rewrite_keywords(INKSCAPE_TILE, "moss, wall")
	twice = rewrite_keywords(once, "moss, wall")
	assert read_metadata(twice).keywords == "moss, wall"
	assert twice.count("<dc:subject") == 1
	assert twice == once


def test_rewrite_keeps_the_rest_of_the_document():
	updated = rewrite_keywords(INKSCAPE_TILE, "moss")
	assert updated.startswith(
		'<?xml version="1.0" encoding="UTF-8" standalone="no"?>\n'
		"<!-- Created with Inkscape -->\n<svg"
	)
	assert updated.endswith("</svg>\n")
	assert '<rect x="0" y="0" width="64" height="64" fill="#888888" />' in updated
	assert "<title>Stone floor</title>" in updated
	before = read_metadata(INKSCAPE_TILE).to_dict()
	after = read_metadata(updated).to_dict()
	before.pop("keywords")
	after.pop("keywords")
	assert after == before


def test_rewrite_keeps_comments_inside_the_root():
	text = PLAIN_TILE.replace("<title>", "<!-- keep me --><title>")
	document = parse_document(text)
	assert "<!-- keep me -->" in serialize_document(document)


def test_new_subject_is_placed_in_work():
	document = parse_document(INKSCAPE_TILE)
	apply_keywords(document, "one, two")
	work = document.root.find(".//{http://creativecommons.org/ns#}Work")
	subject = work[-1]
	assert subject.tag == "{http://purl.org/dc/elements/1.1/}subject"
	items = subject.findall(
		"{http://www.w3.org/1999/02/22-rdf-syntax-ns#}Bag/"
		"{http://www.w3.org/1999/02/22-rdf-syntax-ns#}li"
	)
	assert [item.text for item in items] == ["one", "two"]


def test_missing_work_raises_without_touching_document():
	with pytest.raises(MissingMetadataError):
		rewrite_keywords(PLAIN_TILE, "a")
	text = '<svg xmlns="http://www.w3.org/2000/svg"><metadata /></svg>'
	document = parse_document(text)
	with pytest.raises(MissingMetadataError):
		apply_keywords(document, "a")
	assert serialize_document(document) == text


def test_missing_work_is_created_on_request():
	updated = rewrite_keywords(PLAIN_TILE, "new, tags", create_missing=True)
	meta = read_metadata(updated)
	assert meta.keywords == "new, tags"
	assert meta.title == "Plain"
	assert "<circle" in updated


def test_malformed_document_raises():
	with pytest.raises(MetadataParseError):
		parse_document("<svg><g></svg>")
	with pytest.raises(MetadataParseError):
		extract_metadata(parse_document("not xml at all"))


def test_internal_entities_are_expanded():
	text = (
		'<?xml version="1.0" encoding="utf-8"?>\n'
		'<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.1//EN"'
		' "http://www.w3.org/Graphics/SVG/1.1/DTD/svg11.dtd" [\n'
		'\t<!ENTITY ns_svg "http://www.w3.org/2000/svg">\n'
		']>\n'
		'<svg xmlns="&ns_svg;" width="12" height="8"><title>AI</title></svg>\n'
	)
	document = parse_document(text)
	meta = extract_metadata(document)
	assert meta.title == "AI"
	assert meta.width == "12"
	assert "<!ENTITY ns_svg" in document.prolog


def test_external_entities_are_rejected():
	text = (
		'<!DOCTYPE svg [<!ENTITY ext SYSTEM "file:///etc/passwd">]>'
		'<svg xmlns="http://www.w3.org/2000/svg"><title>&ext;</title></svg>'
	)
	with pytest.raises(MetadataParseError):
		parse_document(text)
