"""
Reading and rewriting ``source`` attributes in HCL files.

Terraform declares module sources in ``module "name" { source = "..." }``
blocks and Terragrunt in a single ``terraform { source = "..." }`` block.
HclDocument finds those attributes and splices new values between their
quotes, leaving every other byte of the file untouched (comments, layout and
ordering included).

The file is validated with python-hcl2 before anything is located; locating
is done by a small scanner that understands just enough HCL to skip
comments, strings, template interpolations and heredocs.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import hcl2

logger = logging.getLogger(__name__)

# Terragrunt keeps its module source in a top level ``terraform`` block,
# Terraform in ``module`` blocks.
TERRAGRUNT_BLOCK_TYPE = "terraform"
TERRAFORM_BLOCK_TYPE = "module"
SOURCE_BLOCK_TYPES = (TERRAFORM_BLOCK_TYPE, TERRAGRUNT_BLOCK_TYPE)
SOURCE_ATTRIBUTE = "source"

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_-]*")
_OPERATOR_RE = re.compile(r"==|=>|!=|<=|>=")
_HEREDOC_RE = re.compile(r"<<-?([A-Za-z_][A-Za-z0-9_-]*)[ \t]*\r?\n")


class DocumentError(Exception):
    """Raised when a configuration file cannot be read or parsed."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


@dataclass(frozen=True)
class SourceBlock:
    """
    A block with a literal ``source`` attribute.

    ``start`` and ``end`` delimit the attribute value between its quotes in
    the original text. ``index`` is the position of the block among the top
    level blocks of the file.
    """

    index: int
    block_type: str
    label: Optional[str]
    value: str
    start: int
    end: int


@dataclass(frozen=True)
class _Token:
    kind: str
    start: int
    end: int
    interpolated: bool = False


class _Scanner:
    """Turns HCL text into the coarse tokens the block finder needs."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def error(self, message: str) -> ValueError:
        line = self.text.count("\n", 0, self.pos) + 1
        return ValueError(f"line {line}: {message}")

    def tokens(self) -> List[_Token]:
        tokens = []
        text = self.text
        while self.pos < len(text):
            char = text[self.pos]
            start = self.pos

            if char == "\n":
                self.pos += 1
                tokens.append(_Token("newline", start, self.pos))
            elif char in " \t\r":
                self.pos += 1
            elif char == "#" or text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.pos = len(text) if end == -1 else end
            elif text.startswith("/*", self.pos):
                end = text.find("*/", self.pos + 2)
                if end == -1:
                    raise self.error("unterminated comment")
                self.pos = end + 2
            elif char == '"':
                interpolated = self._skip_string()
                tokens.append(_Token("string", start, self.pos, interpolated))
            elif text.startswith("<<", self.pos) and _HEREDOC_RE.match(text, self.pos):
                self._skip_heredoc()
                tokens.append(_Token("other", start, self.pos))
            elif char in "{}[]()":
                self.pos += 1
                kind = {"{": "lbrace", "}": "rbrace"}.get(
                    char, "open" if char in "[(" else "close"
                )
                tokens.append(_Token(kind, start, self.pos))
            elif _OPERATOR_RE.match(text, self.pos):
                self.pos += 2
                tokens.append(_Token("other", start, self.pos))
            elif char == "=":
                self.pos += 1
                tokens.append(_Token("equals", start, self.pos))
            else:
                ident = _IDENT_RE.match(text, self.pos)
                if ident:
                    self.pos = ident.end()
                    tokens.append(_Token("ident", start, self.pos))
                else:
                    self.pos += 1
                    tokens.append(_Token("other", start, self.pos))
        return tokens

    def _skip_string(self) -> bool:
        """Move past a quoted string, returning whether it is a template."""
        text = self.text
        self.pos += 1
        interpolated = False
        while self.pos < len(text):
            char = text[self.pos]
            if char == "\\":
                self.pos += 2
            elif char == '"':
                self.pos += 1
                return interpolated
            elif char == "\n":
                break
            elif text.startswith(("$${", "%%{"), self.pos):
                self.pos += 3
            elif text.startswith(("${", "%{"), self.pos):
                interpolated = True
                self._skip_template()
            else:
                self.pos += 1
        raise self.error("unterminated string")

    def _skip_template(self) -> None:
        text = self.text
        self.pos += 2
        depth = 1
        while self.pos < len(text):
            char = text[self.pos]
            if char == '"':
                self._skip_string()
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    self.pos += 1
                    return
            self.pos += 1
        raise self.error("unterminated template interpolation")

    def _skip_heredoc(self) -> None:
        match = _HEREDOC_RE.match(self.text, self.pos)
        marker = match.group(1)
        self.pos = match.end()
        while self.pos < len(self.text):
            end = self.text.find("\n", self.pos)
            line_end = len(self.text) if end == -1 else end
            if self.text[self.pos : line_end].strip() == marker:
                self.pos = line_end
                return
            self.pos = line_end + 1
        raise self.error(f"unterminated heredoc '{marker}'")


class _BlockFinder:
    """Walks the token stream looking for top level ``source`` attributes."""

    def __init__(self, text: str, tokens: List[_Token]):
        self.text = text
        self.tokens = tokens
        self.pos = 0

    def value(self, token: _Token) -> str:
        return self.text[token.start : token.end]

    def peek(self) -> Optional[_Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def find(self) -> List[SourceBlock]:
        blocks = []
        index = 0
        while self.peek() is not None:
            token = self.tokens[self.pos]
            if token.kind != "ident":
                if token.kind == "rbrace":
                    raise ValueError("unbalanced '}'")
                self.pos += 1
                continue

            self.pos += 1
            next_token = self.peek()
            if next_token is not None and next_token.kind == "equals":
                self.pos += 1
                self._skip_expression()
                continue

            labels = self._read_labels()
            if labels is None:
                continue

            block_type = self.value(token)
            source = self._read_body(block_type in SOURCE_BLOCK_TYPES)
            if source is not None:
                label = labels[0] if len(labels) == 1 else None
                blocks.append(
                    SourceBlock(
                        index=index,
                        block_type=block_type,
                        label=label,
                        value=self.text[source.start + 1 : source.end - 1],
                        start=source.start + 1,
                        end=source.end - 1,
                    )
                )
            index += 1
        return blocks

    def _read_labels(self) -> Optional[List[str]]:
        labels = []
        while self.peek() is not None:
            token = self.tokens[self.pos]
            if token.kind == "lbrace":
                self.pos += 1
                return labels
            if token.kind == "string":
                labels.append(self.text[token.start + 1 : token.end - 1])
            elif token.kind == "ident":
                labels.append(self.value(token))
            else:
                return None
            self.pos += 1
        return None

    def _skip_expression(self) -> List[_Token]:
        """Consume an attribute expression, returning its tokens."""
        expression = []
        depth = 0
        while self.peek() is not None:
            token = self.tokens[self.pos]
            if depth == 0 and token.kind in ("newline", "rbrace"):
                break
            if token.kind in ("open", "lbrace"):
                depth += 1
            elif token.kind in ("close", "rbrace"):
                depth -= 1
            expression.append(token)
            self.pos += 1
        return expression

    def _skip_block(self) -> None:
        depth = 1
        while self.peek() is not None:
            token = self.tokens[self.pos]
            self.pos += 1
            if token.kind == "lbrace":
                depth += 1
            elif token.kind == "rbrace":
                depth -= 1
                if depth == 0:
                    return
        raise ValueError("unbalanced '{'")

    def _read_body(self, wants_source: bool) -> Optional[_Token]:
        """Consume a block body, returning its literal ``source`` token."""
        source = None
        while self.peek() is not None:
            token = self.tokens[self.pos]
            self.pos += 1
            if token.kind == "rbrace":
                return source
            if token.kind != "ident":
                continue

            next_token = self.peek()
            if next_token is not None and next_token.kind == "equals":
                self.pos += 1
                expression = self._skip_expression()
                if (
                    wants_source
                    and self.value(token) == SOURCE_ATTRIBUTE
                    and len(expression) == 1
                    and expression[0].kind == "string"
                    and not expression[0].interpolated
                ):
                    source = expression[0]
                continue

            if self._read_labels() is not None:
                self._skip_block()
        raise ValueError("unbalanced '{'")


def find_source_blocks(text: str) -> List[SourceBlock]:
    """
    Find the literal ``source`` attributes of module/terraform blocks.

    Raises:
        ValueError: If the text is not well formed enough to scan
    """
    tokens = _Scanner(text).tokens()
    return _BlockFinder(text, tokens).find()


class HclDocument:
    """
    An HCL file whose block ``source`` attributes can be read and replaced.

    Usage:
        document = HclDocument.load(Path("main.tf"))
        for block in document.source_blocks():
            document.replace_source(block, new_value)
        document.save()
    """

    def __init__(self, path: Path, text: str):
        """
        Validate *text* as HCL and locate its ``source`` attributes.

        Raises:
            DocumentError: If the text is not valid HCL
        """
        self.path = Path(path)
        self.text = text
        self._replacements: Dict[int, Tuple[SourceBlock, str]] = {}

        try:
            hcl2.loads(text)
        except Exception as e:
            raise DocumentError(self.path, f"invalid HCL: {e}") from e
        try:
            self._blocks = find_source_blocks(text)
        except ValueError as e:
            raise DocumentError(self.path, str(e)) from e

    @classmethod
    def load(cls, path: Path) -> "HclDocument":
        """
        Read and validate an HCL file.

        Raises:
            DocumentError: If the file cannot be read or is not valid HCL
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentError(path, str(e)) from e
        return cls(path, text)

    def source_blocks(self) -> List[SourceBlock]:
        """Blocks with a literal ``source`` attribute, in document order."""
        return list(self._blocks)

    def module_name(self, block: SourceBlock) -> str:
        """
        Display name of the module declared by *block*.

        Terraform files may declare several modules, so the block label is
        appended; a Terragrunt file declares a single one.
        """
        if block.label:
            return f"{self.path} [{block.label}]"
        return str(self.path)

    def replace_source(self, block: SourceBlock, value: str) -> None:
        """Replace the value of *block*'s ``source`` attribute in memory."""
        if value == block.value:
            self._replacements.pop(block.start, None)
            return
        self._replacements[block.start] = (block, value)

    @property
    def changed(self) -> bool:
        return bool(self._replacements)

    def render(self) -> str:
        """The document text with every replacement applied."""
        parts = []
        cursor = 0
        for start in sorted(self._replacements):
            block, value = self._replacements[start]
            parts.append(self.text[cursor : block.start])
            parts.append(value)
            cursor = block.end
        parts.append(self.text[cursor:])
        return "".join(parts)

    def save(self) -> bool:
        """
        Write the document back if anything was replaced.

        Returns:
            True if the file was written
        """
        if not self.changed:
            return False

        logger.debug(f"Writing {len(self._replacements)} change(s) to {self.path}")
        with open(self.path, "w", encoding="utf-8", newline="") as f:
            f.write(self.render())
        return True
