#!/usr/bin/env python3
"""
Read and rewrite the embedded metadata block of SVG tiles.

Tiles carry Dublin Core fields inside <metadata>/rdf:RDF/cc:Work, the layout
Inkscape writes. Only the dc:subject keyword subtree is ever rewritten; the
rest of the document is parsed into an ElementTree and written back as is.
"""

from __future__ import annotations

# Standard Library
from dataclasses import asdict, dataclass, field
import io
import logging
import re
import xml.etree.ElementTree as ET

# PIP3 modules
from defusedxml import DefusedXmlException
from defusedxml.ElementTree import DefusedXMLParser
from defusedxml.ElementTree import iterparse as safe_iterparse

# local repo modules
from .errors import MetadataParseError, MissingMetadataError

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
DC_NS = "http://purl.org/dc/elements/1.1/"
RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
CC_NS = "http://creativecommons.org/ns#"

SUBJECT_TAG = f"{{{DC_NS}}}subject"
BAG_TAG = f"{{{RDF_NS}}}Bag"
LI_TAG = f"{{{RDF_NS}}}li"
WORK_TAG = f"{{{CC_NS}}}Work"
RDF_TAG = f"{{{RDF_NS}}}RDF"
# Seq and Alt hold keywords in some exporters
CONTAINER_TAGS = {BAG_TAG, f"{{{RDF_NS}}}Seq", f"{{{RDF_NS}}}Alt"}

for _prefix, _uri in (("dc", DC_NS), ("rdf", RDF_NS), ("cc", CC_NS)):
	ET.register_namespace(_prefix, _uri)

# XML declaration, comments, processing instructions and doctype ahead of the root
_PROLOG_ITEM = re.compile(
	r"\s*(?:<\?.*?\?>|<!--.*?-->|<!DOCTYPE(?:[^\[>]|\[.*?\])*>)",
	re.DOTALL,
)

#============================================


@dataclass(slots=True)
class TileMetadata:
	"""
	Flat view of the descriptive fields of one tile.

	Every field is a string; absent values are empty strings.
	"""
	viewbox: str = ""
	width: str = ""
	height: str = ""
	title: str = ""
	format: str = ""
	date: str = ""
	description: str = ""
	creator: str = ""
	publisher: str = ""
	rights: str = ""
	keywords: str = ""

	#============================================
	def to_dict(self) -> dict[str, str]:
		return asdict(self)


#============================================


@dataclass(slots=True)
class SvgDocument:
	"""
	Parsed SVG document.

	Attributes:
		root: Root element of the tree.
		prolog: Raw text ahead of the root element.
		namespaces: (prefix, uri) pairs declared in the source.
		trailing_newline: Source text ended with a newline.
	"""
	root: ET.Element
	prolog: str = ""
	namespaces: list[tuple[str, str]] = field(default_factory=list)
	trailing_newline: bool = False


#============================================


def split_keywords(keywords_csv: str) -> list[str]:
	"""
	Split an edited keyword string into trimmed items.

	Empty items are kept so the stored list matches what was typed.

	Args:
		keywords_csv: Comma separated keywords.

	Returns:
		List of keywords.
	"""
	return [item.strip() for item in keywords_csv.split(",")]


#============================================


def join_keywords(keywords: list[str]) -> str:
	return ", ".join(keywords)


#============================================


def _split_prolog(text: str) -> str:
	position = 0
	while True:
		match = _PROLOG_ITEM.match(text, position)
		if match is None:
			break
		position = match.end()
	rest = text[position:]
	return text[: position + len(rest) - len(rest.lstrip())]


#============================================


def parse_document(text: str) -> SvgDocument:
	"""
	Parse SVG text into a document.

	Comments and processing instructions inside the root are kept. Internal
	entities are expanded; external entity references are rejected.

	Args:
		text: Raw SVG text.

	Returns:
		SvgDocument.

	Raises:
		MetadataParseError: The text is not well-formed XML.
	"""
	bom = "\ufeff" if text.startswith("\ufeff") else ""
	body = text[len(bom):]
	namespaces: list[tuple[str, str]] = []
	try:
		for _event, (prefix, uri) in safe_iterparse(
			io.StringIO(body),
			events=("start-ns",),
			forbid_entities=False,
			forbid_external=True,
		):
			if (prefix, uri) not in namespaces:
				namespaces.append((prefix, uri))
		parser = DefusedXMLParser(
			forbid_entities=False,
			forbid_external=True,
			target=ET.TreeBuilder(insert_comments=True, insert_pis=True)
		)
		parser.feed(body)
		root = parser.close()
	except (ET.ParseError, DefusedXmlException) as exc:
		raise MetadataParseError(f"Malformed SVG document: {exc}") from exc
	return SvgDocument(
		root=root,
		prolog=bom + _split_prolog(body),
		namespaces=namespaces,
		trailing_newline=text.endswith("\n"),
	)


#============================================


def serialize_document(document: SvgDocument) -> str:
	"""
	Write a document back to text using its own namespace prefixes.

	Args:
		document: Parsed document.

	Returns:
		SVG text.
	"""
	# the default namespace goes last so unprefixed elements stay unprefixed
	for prefix, uri in sorted(document.namespaces, key=lambda item: item[0] == ""):
		try:
			ET.register_namespace(prefix, uri)
		except ValueError:
			logger.debug("Namespace prefix %r is reserved, letting ElementTree pick one", prefix)
	text = document.prolog + ET.tostring(document.root, encoding="unicode")
	if document.trailing_newline and not text.endswith("\n"):
		text += "\n"
	return text


#============================================


def _local_name(tag: object) -> str:
	# comments and processing instructions carry a factory function as tag
	if not isinstance(tag, str):
		return ""
	return tag.rsplit("}", 1)[-1]


def _find_local(root: ET.Element, name: str) -> ET.Element | None:
	for elem in root.iter():
		if _local_name(elem.tag) == name:
			return elem
	return None


def _svg_element(root: ET.Element) -> ET.Element:
	if _local_name(root.tag) == "svg":
		return root
	found = _find_local(root, "svg")
	return found if found is not None else root


def _find_metadata(root: ET.Element) -> ET.Element | None:
	return _find_local(root, "metadata")


def _value(node: ET.Element, namespace: str, name: str) -> str:
	elem = node.find(f".//{{{namespace}}}{name}")
	if elem is None:
		return ""
	return elem.text or ""


def _child_value(node: ET.Element, namespace: str, parent: str, child: str) -> str:
	parent_elem = node.find(f".//{{{namespace}}}{parent}")
	if parent_elem is None:
		return ""
	return _value(parent_elem, namespace, child)


def _keyword_items(metadata: ET.Element) -> list[str]:
	subject = metadata.find(f".//{SUBJECT_TAG}")
	if subject is None:
		return []
	for elem in subject.iter():
		if elem.tag in CONTAINER_TAGS:
			return ["".join(item.itertext()) for item in elem.findall(LI_TAG)]
	return []


#============================================


def extract_metadata(document: SvgDocument) -> TileMetadata:
	"""
	Read the metadata record of a parsed tile.

	Missing elements give empty strings; a tile without <metadata> only
	reports its size attributes and title.

	Args:
		document: Parsed document.

	Returns:
		TileMetadata.
	"""
	svg = _svg_element(document.root)
	metadata = TileMetadata(
		viewbox=svg.get("viewBox", ""),
		width=svg.get("width", ""),
		height=svg.get("height", ""),
		title=_value(svg, SVG_NS, "title"),
	)
	meta_node = _find_metadata(document.root)
	if meta_node is None:
		return metadata
	metadata.format = _value(meta_node, DC_NS, "format")
	metadata.date = _value(meta_node, DC_NS, "date")
	metadata.description = _value(meta_node, DC_NS, "description")
	metadata.creator = _child_value(meta_node, DC_NS, "creator", "title")
	metadata.publisher = _child_value(meta_node, DC_NS, "publisher", "title")
	metadata.rights = _child_value(meta_node, DC_NS, "rights", "title")
	metadata.keywords = join_keywords(_keyword_items(meta_node))
	return metadata


#============================================


def _indent_subtree(elem: ET.Element, indent: str, unit: str = "  ") -> None:
	children = list(elem)
	if not children:
		return
	inner = indent + unit
	elem.text = inner
	for child in children:
		_indent_subtree(child, inner, unit)
		child.tail = inner
	children[-1].tail = indent


def _append_child(parent: ET.Element, child: ET.Element) -> None:
	# follow the parent's pretty-printing when it has any
	if len(parent) and parent.text is not None and not parent.text.strip():
		indent = parent.text
		_indent_subtree(child, indent)
		child.tail = parent[-1].tail
		parent[-1].tail = indent
	parent.append(child)


def _remove_child(parent: ET.Element, child: ET.Element) -> None:
	siblings = list(parent)
	position = siblings.index(child)
	if position == len(siblings) - 1 and position > 0:
		siblings[position - 1].tail = child.tail
	parent.remove(child)


def _create_work(root: ET.Element, metadata: ET.Element | None) -> ET.Element:
	if metadata is None:
		svg = _svg_element(root)
		namespace = svg.tag[1:].split("}", 1)[0] if svg.tag.startswith("{") else ""
		metadata = ET.Element(f"{{{namespace}}}metadata" if namespace else "metadata")
		if svg.text is not None and not svg.text.strip():
			metadata.tail = svg.text
		svg.insert(0, metadata)
		logger.info("Created <metadata> element")
	rdf = metadata.find(f".//{RDF_TAG}")
	if rdf is None:
		rdf = ET.SubElement(metadata, RDF_TAG)
	work = ET.SubElement(rdf, WORK_TAG, {f"{{{RDF_NS}}}about": ""})
	logger.info("Created cc:Work container")
	return work


#============================================


def apply_keywords(
	document: SvgDocument,
	keywords_csv: str,
	create_missing: bool = False,
) -> SvgDocument:
	"""
	Replace the keyword list of a tile.

	Existing dc:subject subtrees under <metadata> are removed and a fresh
	dc:subject/rdf:Bag/rdf:li subtree is appended to the cc:Work container.

	Args:
		document: Parsed document, modified in place.
		keywords_csv: Comma separated keywords.
		create_missing: Build <metadata>/rdf:RDF/cc:Work when absent.

	Returns:
		The same document.

	Raises:
		MissingMetadataError: No cc:Work container and create_missing is False.
	"""
	keywords = split_keywords(keywords_csv)
	metadata = _find_metadata(document.root)
	work = metadata.find(f".//{WORK_TAG}") if metadata is not None else None
	if work is None:
		if not create_missing:
			if metadata is None:
				raise MissingMetadataError("Document has no <metadata> element")
			raise MissingMetadataError("Document <metadata> has no cc:Work container")
		work = _create_work(document.root, metadata)
		metadata = _find_metadata(document.root)
	_declare_defaults(document)

	stale = [
		(parent, child)
		for parent in metadata.iter()
		for child in parent
		if child.tag == SUBJECT_TAG
	]
	for parent, child in stale:
		_remove_child(parent, child)

	subject = ET.Element(SUBJECT_TAG)
	bag = ET.SubElement(subject, BAG_TAG)
	for keyword in keywords:
		item = ET.SubElement(bag, LI_TAG)
		item.text = keyword
	_append_child(work, subject)
	return document


def _declare_defaults(document: SvgDocument) -> None:
	declared = {uri for _prefix, uri in document.namespaces}
	for prefix, uri in (("dc", DC_NS), ("rdf", RDF_NS), ("cc", CC_NS)):
		if uri not in declared:
			document.namespaces.append((prefix, uri))


#============================================


def read_metadata(text: str) -> TileMetadata:
	"""
	Parse SVG text and extract its metadata record.
	"""
	return extract_metadata(parse_document(text))


def rewrite_keywords(text: str, keywords_csv: str, create_missing: bool = False) -> str:
	"""
	Return SVG text with its keyword list replaced.
	"""
	document = parse_document(text)
	apply_keywords(document, keywords_csv, create_missing=create_missing)
	return serialize_document(document)
