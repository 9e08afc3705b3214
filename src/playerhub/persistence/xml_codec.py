from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import CodecError
from ..models import FIELDS, PlayerRecord, is_storable_nickname
from .base import FilePlayerCodec
from .paths import XML_FILENAME, default_storage_dir

ROOT_TAG = "players"
PLAYER_TAG = "player"

_BOOL_VALUES = {"true": True, "false": False}


def encode_players(records: List[PlayerRecord]) -> str:
    """Encode players as a <players> document with one <player> element per record."""
    root = ET.Element(ROOT_TAG)
    for record in records:
        if not is_storable_nickname(record.nickname):
            raise CodecError(f"Nickname of player {record.id} cannot be stored as XML text")
        node = ET.SubElement(root, PLAYER_TAG)
        ET.SubElement(node, "id").text = str(record.id)
        ET.SubElement(node, "nickname").text = record.nickname
        ET.SubElement(node, "points").text = str(record.points)
        ET.SubElement(node, "online").text = "true" if record.online else "false"
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"


def decode_players(text: str) -> List[PlayerRecord]:
    """Decode a <players> document. Duplicate ids are returned as-is."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise CodecError(f"Invalid XML: {e}") from e

    if root.tag != ROOT_TAG:
        raise CodecError(f"Expected <{ROOT_TAG}> root element, got <{root.tag}>")

    records: List[PlayerRecord] = []
    for node in root:
        if node.tag != PLAYER_TAG:
            raise CodecError(f"Unexpected element <{node.tag}> inside <{ROOT_TAG}>")
        records.append(PlayerRecord.from_dict(_read_fields(node)))
    return records


def _read_fields(node: ET.Element) -> Dict[str, object]:
    raw: Dict[str, str] = {}
    for child in node:
        if child.tag in FIELDS:
            raw[child.tag] = child.text or ""

    fields: Dict[str, object] = dict(raw)
    for name in ("id", "points"):
        if name in raw:
            try:
                fields[name] = int(raw[name].strip())
            except ValueError as e:
                raise CodecError(f"<{name}> must be an integer, got {raw[name]!r}") from e
    if "online" in raw:
        value = raw["online"].strip().lower()
        if value not in _BOOL_VALUES:
            raise CodecError(f"<online> must be true or false, got {raw['online']!r}")
        fields["online"] = _BOOL_VALUES[value]
    return fields


class XmlPlayerCodec(FilePlayerCodec):
    """Stores players as an XML document wrapped in a <players> container."""

    format_name = "XML"

    def __init__(self, path: Optional[str | Path] = None) -> None:
        super().__init__(path or default_storage_dir() / XML_FILENAME)

    def encode(self, records: List[PlayerRecord]) -> str:
        return encode_players(records)

    def decode(self, text: str) -> List[PlayerRecord]:
        return decode_players(text)
