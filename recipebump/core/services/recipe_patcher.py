"""
Recipe patcher — rewrite version, URLs and checksums in the raw text.

Edits are confined to the spans the parser reported, so comments,
quoting, key order and unrelated fields survive byte for byte.  Inside a
span the old value is replaced literally:

    version span       old version   → new version
    url span i         old version   → new version (no-op for templated URLs)
    checksum span i    old checksum i → new checksum i

Checksums are matched per package position, so two packages sharing the
same old checksum are each updated with their own new value.

Nothing is written to the recipe itself here.  ``stage()`` writes the
patched text next to it; the caller validates the staged file and then
commits (atomic rename) or lets the staging be discarded.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path

from recipebump.core.errors import PatchError
from recipebump.core.models.plan import UpdatePlan
from recipebump.core.services.recipe_parser import RecipeDocument, RecipeParser, Span
from recipebump.core.services.recipe_store import parse_file

logger = logging.getLogger(__name__)


def _edit(
    text: str, span: Span, old: str, new: str, *, required: bool, what: str
) -> tuple[Span, str] | None:
    current = span.slice(text)
    if old not in current:
        if required:
            raise PatchError(f"{what}: expected {old!r} in {current!r}")
        return None
    return span, current.replace(old, new)


def render_patch(document: RecipeDocument, plan: UpdatePlan) -> str:
    """Apply ``plan`` to the document text and return the new text.

    Raises:
        PatchError: If the plan does not fit the document (package count
            differs, or an old value is no longer where it was parsed).
    """
    text = document.text
    if len(plan.packages) != len(document.checksum_spans):
        raise PatchError(
            f"plan has {len(plan.packages)} packages, recipe has {len(document.checksum_spans)}"
        )

    edits: list[tuple[Span, str]] = []
    edit = _edit(
        text, document.version_span, plan.old_version, plan.new_version,
        required=True, what="version",
    )
    edits.append(edit)

    for index, (url_span, checksum_span, update) in enumerate(
        zip(document.url_spans, document.checksum_spans, plan.packages), start=1
    ):
        edit = _edit(
            text, url_span, plan.old_version, plan.new_version,
            required=False, what=f"package #{index} url",
        )
        if edit is not None:
            edits.append(edit)
        edits.append(
            _edit(
                text, checksum_span, update.old_checksum, update.new_checksum,
                required=True, what=f"package #{index} sha256",
            )
        )

    # Right to left so earlier offsets stay valid
    for span, replacement in sorted(edits, key=lambda e: e[0].start, reverse=True):
        text = text[:span.start] + replacement + text[span.end:]
    return text


class StagedPatch:
    """A patched recipe written beside its target, not yet in place.

    Use as a context manager: the staged file is removed on exit unless
    ``commit()`` moved it over the target.
    """

    def __init__(self, target: Path, staged: Path, text: str) -> None:
        self.target = target
        self.path = staged
        self.text = text
        self.committed = False

    def commit(self) -> None:
        """Atomically replace the target with the staged file."""
        os.replace(self.path, self.target)
        self.committed = True
        logger.debug("Committed %s", self.target)

    def discard(self) -> None:
        if not self.committed:
            self.path.unlink(missing_ok=True)

    def __enter__(self) -> StagedPatch:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.discard()


class RecipePatcher:
    """Stage patched recipe files next to the originals."""

    def __init__(self, parser: RecipeParser | None = None) -> None:
        self._parser = parser

    def render(self, path: Path, plan: UpdatePlan) -> str:
        """Return the patched text of ``path`` without writing anything."""
        return render_patch(parse_file(path, self._parser), plan)

    def stage(self, path: Path, plan: UpdatePlan) -> StagedPatch:
        """Write the patched text of ``path`` to a sibling temp file.

        The temp file gets the original's permission bits, so committing
        it keeps the mode unchanged.

        Raises:
            LoadError: If the recipe no longer parses.
            PatchError: If the plan does not fit the file.
            OSError: If the temp file cannot be written.
        """
        patched = self.render(path, plan)
        mode = stat.S_IMODE(path.stat().st_mode)

        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}_", suffix=".tmp")
        tmp = Path(tmp_path)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(patched.encode("utf-8"))
            os.chmod(tmp, mode)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise

        logger.debug("Staged %s as %s", path.name, tmp.name)
        return StagedPatch(path, tmp, patched)
