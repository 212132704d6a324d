"""Documentation block tracking for ``///`` delimited comment blocks."""

from __future__ import annotations

from dataclasses import dataclass, field

from models.declarations import Tag

TAG_MARKER = "@"


@dataclass
class _TagDraft:
    tag: str
    content: str


@dataclass(frozen=True)
class DocumentationSnapshot:
    """Documentation attached to one declaration."""

    title: str | None = None
    description: str = ""
    tags: tuple[Tag, ...] = ()

    def param_description(self, ordinal: int) -> str:
        """Description from the ``ordinal``-th (zero-based) ``@param`` tag.

        Tags are written ``@param name description``; the leading name is
        dropped when a description follows it. Matching is positional, so the
        name itself is never compared with the parameter.
        """
        params = [tag for tag in self.tags if tag.tag == "param"]
        if ordinal >= len(params):
            return ""
        name, _, description = params[ordinal].content.partition(" ")
        return description.strip() or name


@dataclass
class DocumentationTracker:
    """Accumulates title, description and tags from documentation comments.

    The first untagged line of a block is the title, further untagged lines
    form the description. Once a tag is open, untagged lines continue it.
    """

    active: bool = False
    title: str | None = None
    description: list[str] = field(default_factory=list)
    _tags: list[_TagDraft] = field(default_factory=list)

    def toggle(self) -> None:
        self.active = not self.active
        if self.active:
            self.reset()

    def reset(self) -> None:
        self.title = None
        self.description = []
        self._tags = []

    def feed(self, comment: str) -> None:
        """Consume a comment line with its ``//`` marker removed."""
        content = comment.strip()
        if not content:
            return

        if content.startswith(TAG_MARKER):
            name, _, rest = content[len(TAG_MARKER) :].partition(" ")
            self._tags.append(_TagDraft(tag=name, content=rest.strip()))
        elif self._tags:
            self._tags[-1].content = f"{self._tags[-1].content} {content}".strip()
        elif self.title is None:
            self.title = content
        else:
            self.description.append(content)

    def snapshot(self) -> DocumentationSnapshot:
        return DocumentationSnapshot(
            title=self.title,
            description=" ".join(self.description),
            tags=tuple(
                Tag(tag=draft.tag, content=draft.content) for draft in self._tags
            ),
        )


__all__ = ["DocumentationSnapshot", "DocumentationTracker", "TAG_MARKER"]
