"""Line-oriented declaration extraction for free-format RPGLE.

Each trimmed line is cut at the first ``;`` and split on whitespace. The first
token selects a handler; lines that are not declarations are either comments
(fed to the documentation tracker while a ``///`` block is open), parameter
lines of an open procedure interface, or ignored.

Executable statements are not modelled and malformed input never raises: a
declaration that is not completed is simply not emitted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from models.declarations import Declaration, Position, SymbolModel
from models.triggers import TEMPLATE_KEYWORD, triggers_one_line
from parse.docs import DocumentationSnapshot, DocumentationTracker

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    _Handler = Callable[[list[str], list[str], Position], None]

DOC_BLOCK_MARKER = "///"
COMMENT_MARKER = "//"
ANONYMOUS_PARAMETER = "*N"

ProcedureForm = Literal["prototype", "definition"]


# ---------------------------------------------------------------------------
# Open declaration drafts
# ---------------------------------------------------------------------------


@dataclass
class _Draft:
    name: str
    keywords: list[str]
    display_keywords: list[str]
    docs: DocumentationSnapshot
    position: Position

    def _declaration(self, kind: str, **extra: object) -> Declaration:
        return Declaration(
            kind=kind,  # type: ignore[arg-type]
            name=self.name,
            keywords=tuple(self.keywords),
            display_keywords=tuple(self.display_keywords),
            title=self.docs.title,
            description=self.docs.description,
            tags=self.docs.tags,
            position=self.position,
            **extra,
        )


@dataclass
class _StructureDraft(_Draft):
    def finish(self) -> Declaration:
        return self._declaration("structure")


@dataclass
class _SubroutineDraft(_Draft):
    def finish(self) -> Declaration:
        return self._declaration("subroutine")


@dataclass
class _ProcedureDraft(_Draft):
    form: ProcedureForm = "prototype"
    reading_parameters: bool = False
    parameters: list[Declaration] = field(default_factory=list)

    def add_parameter(
        self, tokens: list[str], display: list[str], position: Position
    ) -> None:
        if tokens[0].startswith("DCL-"):
            tokens, display = tokens[1:], display[1:]
        if not tokens:
            return

        ordinal = len(self.parameters)
        if tokens[0] == ANONYMOUS_PARAMETER:
            name = f"parm{ordinal + 1}"
        else:
            name = display[0]

        self.parameters.append(
            Declaration(
                kind="subitem",
                name=name,
                keywords=tuple(tokens[1:]),
                display_keywords=tuple(display[1:]),
                description=self.docs.param_description(ordinal),
                position=position,
            )
        )

    def finish(self) -> Declaration:
        return self._declaration("procedure", sub_items=tuple(self.parameters))


OpenDeclaration = _StructureDraft | _ProcedureDraft | _SubroutineDraft | None


# ---------------------------------------------------------------------------
# Procedure collection
# ---------------------------------------------------------------------------


def takes_precedence(incoming: ProcedureForm, existing: ProcedureForm) -> bool:
    """Return True when an incoming procedure record replaces an existing one.

    A body definition replaces a prototype or an earlier definition of the same
    name; a prototype never replaces anything.
    """
    del existing
    return incoming == "definition"


class ProcedureIndex:
    """Ordered procedure collection with a name -> slot index."""

    def __init__(self) -> None:
        self._items: list[Declaration] = []
        self._forms: list[ProcedureForm] = []
        self._slots: dict[str, int] = {}

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.upper() in self._slots

    def __len__(self) -> int:
        return len(self._items)

    def get(self, name: str) -> Declaration | None:
        slot = self._slots.get(name.upper())
        return None if slot is None else self._items[slot]

    def add(self, declaration: Declaration, form: ProcedureForm) -> bool:
        """Insert a finished procedure, merging by name. Returns True if stored."""
        key = declaration.name.upper()
        slot = self._slots.get(key)
        if slot is None:
            self._slots[key] = len(self._items)
            self._items.append(declaration)
            self._forms.append(form)
            return True

        if not takes_precedence(form, self._forms[slot]):
            return False

        self._items[slot] = declaration
        self._forms[slot] = form
        return True

    def items(self) -> tuple[Declaration, ...]:
        return tuple(self._items)


# ---------------------------------------------------------------------------
# Assembler
# ---------------------------------------------------------------------------


def tokenize(line: str) -> tuple[list[str], list[str]]:
    """Split a trimmed line into upper-cased and display tokens.

    Anything after the first ``;`` is dropped.
    """
    statement = line.split(";", 1)[0]
    display = statement.split()
    return [token.upper() for token in display], display


@dataclass
class DeclarationAssembler:
    """State machine that turns source lines into declaration collections."""

    docs: DocumentationTracker = field(default_factory=DocumentationTracker)
    current: OpenDeclaration = None
    suspended: _ProcedureDraft | None = None

    constants: list[Declaration] = field(default_factory=list)
    variables: list[Declaration] = field(default_factory=list)
    structures: list[Declaration] = field(default_factory=list)
    procedures: ProcedureIndex = field(default_factory=ProcedureIndex)
    subroutines: list[Declaration] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._handlers: dict[str, _Handler] = {
            DOC_BLOCK_MARKER: self._on_doc_block,
            "DCL-C": self._on_constant,
            "DCL-S": self._on_variable,
            "DCL-DS": self._on_structure,
            "END-DS": self._on_end_structure,
            "DCL-PR": self._on_prototype,
            "END-PR": self._on_end_procedure,
            "DCL-PROC": self._on_procedure,
            "DCL-PI": self._on_interface,
            "END-PI": self._on_end_interface,
            "END-PROC": self._on_end_procedure,
            "BEGSR": self._on_subroutine,
            "ENDSR": self._on_end_subroutine,
        }

    # -- helpers ----------------------------------------------------------

    def _open(
        self,
        draft_type: type[_Draft],
        tokens: list[str],
        display: list[str],
        position: Position,
        **extra: object,
    ) -> None:
        self.current = draft_type(  # type: ignore[assignment]
            name=display[1],
            keywords=tokens[2:],
            display_keywords=display[2:],
            docs=self.docs.snapshot(),
            position=position,
            **extra,  # type: ignore[arg-type]
        )

    def _consume_docs(self) -> None:
        self.docs.reset()

    def _finalize(self) -> None:
        draft = self.current
        if isinstance(draft, _StructureDraft):
            self.structures.append(draft.finish())
        elif isinstance(draft, _ProcedureDraft):
            self.procedures.add(draft.finish(), draft.form)
        elif isinstance(draft, _SubroutineDraft):
            self.subroutines.append(draft.finish())
        self.current = None
        self._consume_docs()

    def _single_line(
        self, kind: str, tokens: list[str], display: list[str], position: Position
    ) -> Declaration:
        docs = self.docs.snapshot()
        return Declaration(
            kind=kind,  # type: ignore[arg-type]
            name=display[1],
            keywords=tuple(tokens[2:]),
            display_keywords=tuple(display[2:]),
            title=docs.title,
            description=docs.description,
            tags=docs.tags,
            position=position,
        )

    # -- handlers ---------------------------------------------------------

    def _on_doc_block(
        self, tokens: list[str], display: list[str], position: Position
    ) -> None:
        self.docs.toggle()

    def _on_constant(
        self, tokens: list[str], display: list[str], position: Position
    ) -> None:
        if self.current is not None or len(tokens) < 2:
            return
        self.constants.append(
            self._single_line("constant", tokens, display, position)
        )
        self._consume_docs()

    def _on_variable(
        self, tokens: list[str], display: list[str], position: Position
    ) -> None:
        if self.current is not None or len(tokens) < 2:
            return
        if TEMPLATE_KEYWORD not in tokens[2:]:
            self.variables.append(
                self._single_line("variable", tokens, display, position)
            )
        self._consume_docs()

    def _on_structure(
        self, tokens: list[str], display: list[str], position: Position
    ) -> None:
        if self.current is not None or len(tokens) < 2:
            return
        if TEMPLATE_KEYWORD in tokens[2:]:
            self._consume_docs()
            return

        self._open(_StructureDraft, tokens, display, position)
        if triggers_one_line("DCL-DS", tokens[2:]):
            self._finalize()

    def _on_end_structure(
        self, tokens: list[str], display: list[str], position: Position
    ) -> None:
        if isinstance(self.current, _StructureDraft):
            self._finalize()

    def _on_prototype(
        self, tokens: list[str], display: list[str], position: Position
    ) -> None:
        if self.current is not None or len(tokens) < 2 or tokens[1] in self.procedures:
            return

        self._open(
            _ProcedureDraft,
            tokens,
            display,
            position,
            form="prototype",
            reading_parameters=True,
        )
        if triggers_one_line("DCL-PR", tokens[2:]):
            self._finalize()

    def _on_procedure(
        self, tokens: list[str], display: list[str], position: Position
    ) -> None:
        if len(tokens) < 2:
            return
        self.suspended = None
        self._open(_ProcedureDraft, tokens, display, position, form="definition")

    def _on_interface(
        self, tokens: list[str], display: list[str], position: Position
    ) -> None:
        draft = self.current
        if not isinstance(draft, _ProcedureDraft):
            return
        one_line = triggers_one_line("DCL-PI", tokens[2:])
        # The return type replaces the procedure keywords, even when empty.
        kept = [
            (token, shown)
            for token, shown in zip(tokens[2:], display[2:], strict=True)
            if token != "END-PI"
        ]
        draft.keywords = [token for token, _ in kept]
        draft.display_keywords = [shown for _, shown in kept]
        draft.reading_parameters = not one_line

    def _on_end_interface(
        self, tokens: list[str], display: list[str], position: Position
    ) -> None:
        if isinstance(self.current, _ProcedureDraft):
            self.current.reading_parameters = False

    def _on_end_procedure(
        self, tokens: list[str], display: list[str], position: Position
    ) -> None:
        if isinstance(self.current, _ProcedureDraft):
            self._finalize()

    def _on_subroutine(
        self, tokens: list[str], display: list[str], position: Position
    ) -> None:
        if len(tokens) < 2:
            return
        if any(sub.matches(tokens[1]) for sub in self.subroutines):
            return

        if isinstance(self.current, _ProcedureDraft):
            self.suspended = self.current
        self._open(_SubroutineDraft, tokens[:2], display[:2], position)

    def _on_end_subroutine(
        self, tokens: list[str], display: list[str], position: Position
    ) -> None:
        if not isinstance(self.current, _SubroutineDraft):
            return
        self._finalize()
        if self.suspended is not None:
            self.current, self.suspended = self.suspended, None

    def _on_other(
        self, line: str, tokens: list[str], display: list[str], position: Position
    ) -> None:
        if line.startswith(COMMENT_MARKER):
            if self.docs.active:
                self.docs.feed(line[len(COMMENT_MARKER) :])
            return

        draft = self.current
        # Compiler directives inside an interface are not parameters.
        if (
            isinstance(draft, _ProcedureDraft)
            and draft.reading_parameters
            and not tokens[0].startswith("/")
        ):
            draft.add_parameter(tokens, display, position)

    # -- public -----------------------------------------------------------

    def feed_line(self, path: str, line_number: int, raw_line: str) -> None:
        line = raw_line.strip()
        if not line:
            return

        tokens, display = tokenize(line)
        if not tokens:
            return

        position = Position(path=path, line=line_number)
        handler = self._handlers.get(tokens[0])
        if handler is not None:
            handler(tokens, display, position)
        else:
            self._on_other(line, tokens, display, position)

    def feed_file(self, path: str, lines: Iterable[str]) -> None:
        """Feed every line of one file.

        Open declarations and documentation never span files: whatever is
        still open when the previous file ended is dropped.
        """
        self.current = None
        self.suspended = None
        self.docs.active = False
        self.docs.reset()
        for line_number, line in enumerate(lines):
            self.feed_line(path, line_number, line)

    def finish(self) -> SymbolModel:
        """Return the finished model; unterminated declarations are dropped."""
        return SymbolModel(
            constants=tuple(self.constants),
            variables=tuple(self.variables),
            structures=tuple(self.structures),
            procedures=self.procedures.items(),
            subroutines=tuple(self.subroutines),
        )


def assemble(files: Mapping[str, Iterable[str]]) -> SymbolModel:
    """Build a symbol model from an ordered mapping of file path -> lines."""
    assembler = DeclarationAssembler()
    for path, lines in files.items():
        assembler.feed_file(path, lines)
    return assembler.finish()


__all__ = [
    "DeclarationAssembler",
    "ProcedureIndex",
    "assemble",
    "takes_precedence",
    "tokenize",
]
