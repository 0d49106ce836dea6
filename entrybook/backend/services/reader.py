"""
Entry Reader.

Read-side helpers for entries: decryption of stored fields, display
shortcuts and body rendering. Every call decrypts from the stored
ciphertext; plaintext is never cached on the entry.
"""

from collections.abc import Mapping

from entrybook.backend.core.crypto import FieldCipher
from entrybook.backend.core.utils import truncate
from entrybook.backend.models.entry import Entry
from entrybook.backend.rendering.checklist import ChecklistMode, ChecklistRenderer
from entrybook.backend.services.classifier import split_tags

TRUNCATED_BODY_LENGTH = 100
TRUNCATED_LIST_TITLE_LENGTH = 20
TRUNCATED_DISP_TITLE_LENGTH = 35


class EntryReader:
    """Decrypts and presents entry fields."""

    def __init__(self, cipher: FieldCipher, renderer: ChecklistRenderer | None = None) -> None:
        self._cipher = cipher
        self._renderer = renderer or ChecklistRenderer()

    def decrypted_title(self, entry: Entry) -> str:
        return self._cipher.decrypt(entry.title)

    def decrypted_body(self, entry: Entry) -> str:
        return self._cipher.decrypt(entry.body)

    def decrypted_tags(self, entry: Entry) -> str:
        return self._cipher.decrypt(entry.tags)

    def tag_list(self, entry: Entry) -> list[str]:
        return split_tags(self.decrypted_tags(entry))

    def tag_count(self, entry: Entry) -> int:
        return len(self.tag_list(entry))

    def has_tags(self, entry: Entry) -> bool:
        return bool(self.decrypted_tags(entry))

    def truncated_body(self, entry: Entry) -> str:
        return self.decrypted_body(entry)[:TRUNCATED_BODY_LENGTH]

    def list_title(self, entry: Entry) -> str:
        """Title shortened for entry lists."""
        return truncate(self.decrypted_title(entry), TRUNCATED_LIST_TITLE_LENGTH)

    def display_title(self, entry: Entry) -> str:
        """Title shortened for headers, parenthesized when archived."""
        title = truncate(self.decrypted_title(entry), TRUNCATED_DISP_TITLE_LENGTH)
        return f"({title})" if entry.archived else title

    def rendered_body(
        self,
        entry: Entry,
        mode: ChecklistMode = ChecklistMode.AUTO,
        data: Mapping[str, str] | None = None,
    ) -> str:
        """Render the decrypted body to HTML, see ChecklistRenderer.render."""
        return self._renderer.render(self.decrypted_body(entry), mode, entry.category, data)
