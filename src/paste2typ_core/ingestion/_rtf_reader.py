"""Minimal RTF decoder producing a row/cell/paragraph/span node tree.

Covers the table subset emitted by office applications on the clipboard
(Word, Excel, WPS, LibreOffice): ``\\trowd``/``\\cellx`` row definitions,
``\\intbl`` paragraphs, ``\\cell``/``\\row`` terminators, cell borders,
paragraph alignment and superscript runs. Anything outside that subset is
either skipped (destinations) or rejected with :class:`RichTextVariantError`.
"""

from __future__ import annotations

import codecs
import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .._errors import RichTextVariantError, TableDecodeError

logger = logging.getLogger(__name__)


class NodeType(str, Enum):
    DOCUMENT = "document"
    TABLE_ROW = "table-row"
    TABLE_CELL = "table-cell"
    PARAGRAPH = "paragraph"
    SPAN = "span"
    TEXT = "text"


class RtfNode(BaseModel):
    """One node of the decoded document tree."""
    type: NodeType
    value: str = ""
    content: List["RtfNode"] = Field(default_factory=list)
    style: Dict[str, Any] = Field(default_factory=dict)


RtfNode.model_rebuild()


_TOKEN_RE = re.compile(
    r"(?P<open>\{)"
    r"|(?P<close>\})"
    r"|\\(?P<word>[a-zA-Z]+)(?P<param>-?\d+)? ?"
    r"|\\'(?P<hex>[0-9a-fA-F]{2})"
    r"|\\(?P<symbol>[^a-zA-Z'])"
    r"|(?P<newline>[\r\n]+)"
    r"|(?P<text>[^\\{}\r\n]+)"
)
_TOKEN_KINDS = ("open", "close", "word", "hex", "symbol", "newline", "text")

_SKIP_DESTINATIONS = {
    "fonttbl", "colortbl", "stylesheet", "info", "pict", "object", "objdata",
    "header", "headerl", "headerr", "headerf", "footer", "footerl", "footerr",
    "footerf", "footnote", "annotation", "listtable", "listoverridetable",
    "listtext", "pntext", "pntxta", "pntxtb", "rsidtbl", "generator",
    "themedata", "colorschememapping", "latentstyles", "datastore",
    "xmlnstbl", "fldinst", "filetbl", "revtbl", "pgdsctbl", "userprops",
    "docvar", "nonshppict", "shpinst", "template", "xe", "tc", "bkmkstart",
    "bkmkend", "mmathPr", "wgrffmtfilter",
}

_NESTED_TABLE_WORDS = {"nestcell", "nestrow", "nesttableprops"}

_ALIGN_WORDS = {"ql": "left", "qc": "center", "qr": "right", "qj": "justify"}
_BORDER_SIDES = {"clbrdrt": "top", "clbrdrb": "bottom", "clbrdrl": "left", "clbrdrr": "right"}
_PARAGRAPH_BORDER_WORDS = {"brdrt", "brdrb", "brdrl", "brdrr", "brdrbtw", "brdrbar", "box"}
_NO_BORDER_WORDS = {"brdrnone", "brdrnil", "brdrtbl"}

_CHAR_WORDS = {
    "tab": "\t", "line": "\n", "emdash": "—", "endash": "–",
    "lquote": "‘", "rquote": "’", "ldblquote": "“",
    "rdblquote": "”", "bullet": "•", "emspace": " ", "enspace": " ",
}

_SYMBOL_CHARS = {"\\": "\\", "{": "{", "}": "}", "~": " ", "_": "-"}


@dataclass
class _GroupState:
    skip: bool = False
    superscript: bool = False
    subscript: bool = False
    bold: bool = False
    italic: bool = False
    align: Optional[str] = None
    in_table: bool = False
    uc: int = 1

    def char_style(self) -> Dict[str, Any]:
        style = {}
        for key in ("superscript", "subscript", "bold", "italic"):
            if getattr(self, key):
                style[key] = True
        return style


class _TreeBuilder:
    """Consumes tokens and assembles the node tree."""

    def __init__(self) -> None:
        self.document = RtfNode(type=NodeType.DOCUMENT)
        self.stack: List[_GroupState] = []
        self.state = _GroupState()
        self.codec = "cp1252"
        self.hex_buffer = bytearray()
        self.pending_skip = 0
        self.high_surrogate: Optional[int] = None
        self.inlines: List[RtfNode] = []
        self.paragraphs: List[RtfNode] = []
        self.row_cells: List[RtfNode] = []
        self.cell_defs: List[Dict[str, Any]] = []
        self.pending_borders: Dict[str, Dict[str, Any]] = {}
        self.border_side: Optional[str] = None
        self.group_start = False

    # -- groups --

    def open_group(self) -> None:
        self.flush_hex()
        self.stack.append(self.state)
        self.state = replace(self.state)
        self.group_start = True

    def close_group(self) -> None:
        self.flush_hex()
        if not self.stack:
            logger.debug("Ignoring unmatched closing brace")
            return
        self.state = self.stack.pop()

    # -- text --

    def emit_text(self, text: str) -> None:
        if self.state.skip or not text:
            return
        if self.pending_skip:
            dropped = min(self.pending_skip, len(text))
            self.pending_skip -= dropped
            text = text[dropped:]
            if not text:
                return
        if self.high_surrogate is not None:
            self.high_surrogate = None
            text = "\ufffd" + text

        style = self.state.char_style()
        last = self.inlines[-1] if self.inlines else None
        if style:
            if last is not None and last.type == NodeType.SPAN and last.style == style:
                last.content[-1].value += text
            else:
                self.inlines.append(RtfNode(
                    type=NodeType.SPAN,
                    style=style,
                    content=[RtfNode(type=NodeType.TEXT, value=text)],
                ))
        elif last is not None and last.type == NodeType.TEXT:
            last.value += text
        else:
            self.inlines.append(RtfNode(type=NodeType.TEXT, value=text))

    def emit_code_point(self, code: int) -> None:
        if not 0 <= code <= 0x10FFFF:
            raise TableDecodeError(f"Unicode escape out of range: {code}")
        if 0xD800 <= code <= 0xDBFF:
            self.flush_surrogate()
            self.high_surrogate = code
        elif 0xDC00 <= code <= 0xDFFF:
            high = self.high_surrogate
            self.high_surrogate = None
            if high is None:
                self.emit_text("\ufffd")
            else:
                self.emit_text(chr(((high - 0xD800) << 10) + (code - 0xDC00) + 0x10000))
        else:
            self.emit_text(chr(code))

    def flush_surrogate(self) -> None:
        """Replace a high surrogate that never got its low half."""
        if self.high_surrogate is None:
            return
        self.high_surrogate = None
        self.pending_skip = 0
        self.emit_text("\ufffd")

    def add_hex(self, byte_hex: str) -> None:
        if self.state.skip:
            return
        if self.pending_skip:
            self.pending_skip -= 1
            return
        self.hex_buffer.append(int(byte_hex, 16))

    def flush_hex(self) -> None:
        if not self.hex_buffer:
            return
        data = bytes(self.hex_buffer)
        self.hex_buffer.clear()
        try:
            text = data.decode(self.codec, errors="replace")
        except LookupError:
            text = data.decode("cp1252", errors="replace")
        self.emit_text(text)

    # -- structure --

    def end_paragraph(self) -> None:
        self.flush_surrogate()
        style = {"align": self.state.align} if self.state.align else {}
        paragraph = RtfNode(type=NodeType.PARAGRAPH, content=self.inlines, style=style)
        self.inlines = []
        if self.state.in_table:
            self.paragraphs.append(paragraph)
        elif paragraph.content:
            self.document.content.append(paragraph)

    def end_cell(self) -> None:
        self.flush_surrogate()
        if self.inlines or not self.paragraphs:
            style = {"align": self.state.align} if self.state.align else {}
            self.paragraphs.append(
                RtfNode(type=NodeType.PARAGRAPH, content=self.inlines, style=style)
            )
            self.inlines = []
        self.row_cells.append(RtfNode(type=NodeType.TABLE_CELL, content=self.paragraphs))
        self.paragraphs = []

    def end_row(self) -> None:
        self.flush_surrogate()
        if self.inlines:
            logger.debug("Dropping text between last cell and row end")
            self.inlines = []
        cells = []
        for index, cell in enumerate(self.row_cells):
            definition = self.cell_defs[index] if index < len(self.cell_defs) else {}
            cells.append(cell.model_copy(update={"style": dict(definition)}))
        self.document.content.append(RtfNode(type=NodeType.TABLE_ROW, content=cells))
        self.row_cells = []
        self.paragraphs = []

    def end_cell_definition(self, right_edge: Optional[int]) -> None:
        borders = {
            side: spec for side, spec in self.pending_borders.items()
            if side in ("top", "bottom")
        }
        definition: Dict[str, Any] = {"right": right_edge}
        if borders:
            definition["borders"] = borders
        self.cell_defs.append(definition)
        self.pending_borders = {}
        self.border_side = None

    # -- control words --

    def control_word(self, word: str, param: Optional[int]) -> None:
        self.flush_hex()
        self.group_start = False

        if word == "bin":
            return  # caller skips the binary payload
        if word in _SKIP_DESTINATIONS:
            self.state.skip = True
            return
        if word == "ansicpg" and param:
            self.codec = f"cp{param}"
            try:
                codecs.lookup(self.codec)
            except LookupError:
                logger.debug("Unknown code page %s, using cp1252", param)
                self.codec = "cp1252"
            return
        if self.state.skip:
            return
        if word in _NESTED_TABLE_WORDS or (word == "itap" and (param or 0) > 1):
            raise RichTextVariantError("Nested tables are not supported")

        if word == "u" and param is not None:
            self.pending_skip = 0
            self.emit_code_point(param + 65536 if param < 0 else param)
            self.pending_skip = self.state.uc
            return
        if word == "uc":
            self.state.uc = param or 0
            return
        if word in _CHAR_WORDS:
            self.emit_text(_CHAR_WORDS[word])
            return

        on = param != 0
        if word in ("par", "sect", "page"):
            self.end_paragraph()
        elif word == "pard":
            self.state.align = None
            self.state.in_table = False
        elif word == "intbl":
            self.state.in_table = True
        elif word in _ALIGN_WORDS:
            self.state.align = _ALIGN_WORDS[word]
        elif word == "cell":
            self.end_cell()
        elif word == "row":
            self.end_row()
        elif word == "trowd":
            self.cell_defs = []
            self.pending_borders = {}
            self.border_side = None
        elif word in _BORDER_SIDES:
            self.border_side = _BORDER_SIDES[word]
            self.pending_borders[self.border_side] = {"style": "single"}
        elif word.startswith("trbrdr") or word in _PARAGRAPH_BORDER_WORDS:
            self.border_side = None
        elif word in _NO_BORDER_WORDS:
            if self.border_side:
                self.pending_borders.pop(self.border_side, None)
        elif word.startswith("brdr") and self.border_side in self.pending_borders:
            if word == "brdrw":
                self.pending_borders[self.border_side]["width"] = param
            elif word != "brdrcf":
                self.pending_borders[self.border_side]["style"] = word[4:]
        elif word == "cellx":
            self.end_cell_definition(param)
        elif word in ("super", "up"):
            self.state.superscript = on
            self.state.subscript = False
        elif word in ("sub", "dn"):
            self.state.subscript = on
            self.state.superscript = False
        elif word == "nosupersub":
            self.state.superscript = False
            self.state.subscript = False
        elif word == "plain":
            self.state.superscript = self.state.subscript = False
            self.state.bold = self.state.italic = False
        elif word == "b":
            self.state.bold = on
        elif word == "i":
            self.state.italic = on

    def control_symbol(self, symbol: str) -> None:
        self.flush_hex()
        at_group_start = self.group_start
        self.group_start = False
        if symbol == "*":
            if at_group_start:
                self.state.skip = True
            return
        if symbol in "\r\n":
            if not self.state.skip:
                self.end_paragraph()
            return
        if symbol in _SYMBOL_CHARS:
            self.emit_text(_SYMBOL_CHARS[symbol])


def read_rtf(text: str) -> RtfNode:
    """Decode an RTF document into a :class:`RtfNode` tree.

    Raises:
        RichTextVariantError: If the text is not RTF or uses unsupported
            constructs (nested tables).
        TableDecodeError: If groups are left unclosed or a ``\\uN`` escape
            is outside the Unicode range.
    """
    source = text.strip().rstrip("\x00")
    if not source.startswith("{\\rtf"):
        raise RichTextVariantError("Missing RTF header")

    builder = _TreeBuilder()
    pos = 0
    length = len(source)
    while pos < length:
        match = _TOKEN_RE.match(source, pos)
        if match is None:
            # lone trailing backslash
            pos += 1
            continue
        pos = match.end()
        kind = next(name for name in _TOKEN_KINDS if match.group(name) is not None)

        if kind == "open":
            builder.open_group()
        elif kind == "close":
            builder.close_group()
        elif kind == "word":
            word = match.group("word")
            raw_param = match.group("param")
            param = int(raw_param) if raw_param is not None else None
            builder.control_word(word, param)
            if word == "bin" and param:
                pos += param
        elif kind == "hex":
            builder.group_start = False
            builder.add_hex(match.group("hex"))
        elif kind == "symbol":
            builder.control_symbol(match.group("symbol"))
        elif kind == "text":
            builder.flush_hex()
            builder.group_start = False
            builder.emit_text(match.group("text"))
        # raw newlines carry no meaning in RTF

    builder.flush_hex()
    builder.flush_surrogate()
    if builder.stack:
        raise TableDecodeError(f"Unbalanced RTF groups ({len(builder.stack)} left open)")

    return builder.document
