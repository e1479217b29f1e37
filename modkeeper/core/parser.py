"""``go.mod`` parser.

Reads a Go module manifest the way the ``go`` command lays it out:

- ``module example.com/app``
- ``go 1.22`` (and ``toolchain go1.22.3``)
- single-line requirements: ``require golang.org/x/text v0.14.0``
- parenthesized blocks::

      require (
          github.com/spf13/cobra v1.8.0
          golang.org/x/sys v0.15.0 // indirect
      )

- ``//`` comments, including the ``// indirect`` marker
- ``replace``, ``exclude``, ``retract``, ``godebug``, ``tool`` and
  ``ignore`` directives, single-line or block, which are recognized and
  skipped

Typical usage::

    parser = GoModParser()
    gomod = parser.parse_file("go.mod")

    for req in gomod.direct_requirements:
        print(req.path, req.version)
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Tuple, Union

from modkeeper.constants import INDIRECT_MARKER
from modkeeper.exceptions import ParseError
from modkeeper.models.module import GoModFile, ModuleRequirement
from modkeeper.utils import get_logger, safe_read_file

#: Directives that carry nothing modkeeper reports on.
IGNORED_DIRECTIVES = frozenset(
    {"replace", "exclude", "retract", "toolchain", "godebug", "tool", "ignore"}
)

#: Directives that may open a ``( ... )`` block.
BLOCK_DIRECTIVES = frozenset({"require"}) | IGNORED_DIRECTIVES

_TOKEN_RE = re.compile(r'"(?:[^"\\]|\\.)*"|`[^`]*`|\S+')


class GoModParser:
    """Parser for ``go.mod`` files.

    The parser is stateless between calls; each :meth:`parse_string` call
    returns a fresh :class:`GoModFile`.

    Example::

        >>> parser = GoModParser()
        >>> gomod = parser.parse_string("module m\\nrequire a.b/c v1.0.0\\n")
        >>> [(r.path, r.version) for r in gomod.requirements]
        [('a.b/c', 'v1.0.0')]
    """

    def __init__(self) -> None:
        self.logger = get_logger("parser")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse_file(self, file_path: Union[str, Path]) -> GoModFile:
        """Parse a ``go.mod`` file from disk.

        Args:
            file_path: Path to the manifest.

        Returns:
            The parsed manifest, with ``source_path`` set.

        Raises:
            FileOperationError: The file does not exist or cannot be read.
            ParseError: The file contains invalid syntax.
        """
        path = Path(file_path)
        self.logger.debug("Parsing file: %s", path)

        content = safe_read_file(path)
        gomod = self.parse_string(content, source_file_path=str(path))
        gomod.source_path = str(path)

        self.logger.debug(
            "Parsed %d requirement(s) from %s (%d direct)",
            len(gomod.requirements),
            path.name,
            len(gomod.direct_requirements),
        )
        return gomod

    def parse_string(
        self,
        content: str,
        source_file_path: Optional[str] = None,
    ) -> GoModFile:
        """Parse ``go.mod`` content.

        Args:
            content: Manifest text.
            source_file_path: Used in error messages only.

        Returns:
            The parsed manifest.

        Raises:
            ParseError: A malformed line or an unterminated block.
        """
        gomod = GoModFile()
        block: Optional[str] = None
        block_start = 0

        for line_number, line_text in enumerate(content.splitlines(), start=1):
            code, comment = _split_comment(line_text)
            tokens = _tokenize(code)
            if not tokens:
                continue

            if block is not None:
                if tokens == [")"]:
                    block = None
                    continue
                if block == "require":
                    gomod.requirements.append(
                        self._parse_requirement(
                            tokens, comment, line_number, line_text, source_file_path
                        )
                    )
                continue

            directive, args = tokens[0], tokens[1:]

            if args == ["("] or directive.endswith("("):
                name = directive.rstrip("(")
                if name not in BLOCK_DIRECTIVES:
                    raise ParseError(
                        f"Unexpected block directive: {name}",
                        line_number=line_number,
                        line_content=line_text,
                        file_path=source_file_path,
                    )
                block, block_start = name, line_number
                continue

            if directive == "module":
                gomod.module = self._single_argument(
                    directive, args, line_number, line_text, source_file_path
                )
            elif directive == "go":
                gomod.go_version = self._single_argument(
                    directive, args, line_number, line_text, source_file_path
                )
            elif directive == "require":
                gomod.requirements.append(
                    self._parse_requirement(
                        args, comment, line_number, line_text, source_file_path
                    )
                )
            elif directive in IGNORED_DIRECTIVES:
                self.logger.debug("Skipping %s directive on line %d", directive, line_number)
            else:
                self.logger.warning(
                    "Unknown directive %r on line %d; ignoring", directive, line_number
                )

        if block is not None:
            raise ParseError(
                f"Unterminated {block} block",
                line_number=block_start,
                file_path=source_file_path,
            )

        return gomod

    # ------------------------------------------------------------------
    # Helpers (private)
    # ------------------------------------------------------------------

    def _parse_requirement(
        self,
        tokens: List[str],
        comment: str,
        line_number: int,
        line_text: str,
        source_file_path: Optional[str],
    ) -> ModuleRequirement:
        if len(tokens) != 2:
            raise ParseError(
                "Requirement must be '<module path> <version>'",
                line_number=line_number,
                line_content=line_text,
                file_path=source_file_path,
            )

        path, version = (_unquote(token) for token in tokens)
        return ModuleRequirement(
            path=path,
            version=version,
            indirect=_is_indirect(comment),
            line_number=line_number,
            raw_line=line_text,
        )

    @staticmethod
    def _single_argument(
        directive: str,
        args: List[str],
        line_number: int,
        line_text: str,
        source_file_path: Optional[str],
    ) -> str:
        if len(args) != 1:
            raise ParseError(
                f"'{directive}' directive takes exactly one argument",
                line_number=line_number,
                line_content=line_text,
                file_path=source_file_path,
            )
        return _unquote(args[0])


def _split_comment(line: str) -> Tuple[str, str]:
    """Split a line into code and the text after ``//`` outside quotes."""
    quote: Optional[str] = None
    index = 0

    while index < len(line):
        char = line[index]
        if quote is not None:
            if char == "\\" and quote == '"':
                index += 2
                continue
            if char == quote:
                quote = None
        elif char in ('"', "`"):
            quote = char
        elif line.startswith("//", index):
            return line[:index], line[index + 2 :].strip()
        index += 1

    return line, ""


def _tokenize(code: str) -> List[str]:
    return _TOKEN_RE.findall(code)


def _unquote(token: str) -> str:
    if len(token) >= 2 and token[0] == token[-1] and token[0] in ('"', "`"):
        return token[1:-1]
    return token


def _is_indirect(comment: str) -> bool:
    """``// indirect`` or ``// indirect; other text`` marks a transitive entry."""
    if not comment:
        return False
    return comment == INDIRECT_MARKER or comment.startswith(INDIRECT_MARKER + ";")
