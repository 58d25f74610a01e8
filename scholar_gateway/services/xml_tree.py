"""
XML to plain-object conversion used by both source normalizers.

`parse_xml` turns a document into nested dicts:
- child elements become keys, repeated children become a list
- attributes are merged into the element's dict with no prefix
- an element with only text becomes a string
- text alongside attributes is stored under `#text`; so is the joined text
  of an element with children, including text nested in inline markup

Because a single child collapses to a bare value, anything that may repeat
has to go through `as_list` before it is iterated.
"""

import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional

from ..utils.errors import ResponseShapeError

TEXT_KEY = "#text"

# Namespaces kept as a prefix on the key; the Atom default namespace is dropped
NAMESPACE_PREFIXES = {
    "http://www.w3.org/2005/Atom": "",
    "http://a9.com/-/spec/opensearch/1.1/": "opensearch",
    "http://arxiv.org/schemas/atom": "arxiv",
}


def _local_name(tag: str) -> str:
    if not tag.startswith("{"):
        return tag
    namespace, _, name = tag[1:].partition("}")
    prefix = NAMESPACE_PREFIXES.get(namespace, "")
    return f"{prefix}:{name}" if prefix else name


def _convert(element: ET.Element) -> Any:
    node: Dict[str, Any] = {}
    for key, value in element.attrib.items():
        node[_local_name(key)] = value

    children = list(element)
    for child in children:
        key = _local_name(child.tag)
        value = _convert(child)
        if key in node:
            if not isinstance(node[key], list):
                node[key] = [node[key]]
            node[key].append(value)
        else:
            node[key] = value

    if children:
        # Inline markup such as <ArticleTitle>A <i>B</i></ArticleTitle> or
        # <ArticleTitle><i>B</i></ArticleTitle> still reads as plain text
        text = "".join(element.itertext()).strip()
        if text:
            node[TEXT_KEY] = text
        return node

    text = element.text or ""
    if element.attrib:
        if text.strip():
            node[TEXT_KEY] = text
        return node
    return text


def parse_xml(text: str) -> Dict[str, Any]:
    """Parse an XML document into `{root_tag: converted_root}`"""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ResponseShapeError(f"Failed to parse XML response: {e}") from e
    return {_local_name(root.tag): _convert(root)}


def as_list(node: Any) -> List[Any]:
    """Always give back a list, whatever cardinality the XML had"""
    if node is None or node == "":
        return []
    if isinstance(node, list):
        return node
    return [node]


def text_of(node: Any, default: str = "") -> str:
    """Text content of a leaf string or of a dict node's `#text`"""
    if node is None:
        return default
    if isinstance(node, str):
        return node
    if isinstance(node, dict):
        return node.get(TEXT_KEY, default)
    if isinstance(node, list):
        return text_of(node[0], default) if node else default
    return str(node)


def child(node: Any, *path: str) -> Optional[Any]:
    """Walk dict keys, returning None as soon as a step is missing"""
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def require(node: Any, *path: str) -> Any:
    """Like `child`, but a missing step is a shape fault"""
    value = child(node, *path)
    if value is None:
        raise ResponseShapeError(f"Missing expected element: {'/'.join(path)}")
    return value
