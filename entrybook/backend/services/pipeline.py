"""
Entry Save Pipeline.

Prepares an entry for persistence by running a fixed sequence of steps:

    1. assign_identifier  - give new entries a public identifier
    2. assign_category    - infer the category from tags, then require one
    3. sanitize_tags      - normalize staged tags to "a, b, c"
    4. fill_title         - synthesize a title when it is blank
    5. encrypt_fields     - encrypt changed fields, clear staged plaintext

A step halts the save by raising (ValidationError, ConflictError, or
DecryptionError when stored fields must be read and cannot be verified).
"""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass

from entrybook.backend.core.crypto import FieldCipher
from entrybook.backend.core.exceptions import ValidationError
from entrybook.backend.core.logging import get_logger
from entrybook.backend.models.entry import ENCRYPTED_FIELDS, Category, Entry
from entrybook.backend.services.classifier import (
    DEFAULT_MATCH_TOKENS,
    classify,
    sanitize_tags,
    split_tags,
)
from entrybook.backend.services.identifiers import IdentifierGenerator
from entrybook.backend.services.titles import TitleSynthesizer

logger = get_logger(__name__)


@dataclass(frozen=True)
class SaveContext:
    """Options for a single pipeline run."""

    reencrypt_all: bool = False


SaveStep = Callable[[Entry, SaveContext], Awaitable[None]]


class EntrySavePipeline:
    """Runs the save steps for an entry in their fixed order."""

    def __init__(
        self,
        identifiers: IdentifierGenerator,
        titles: TitleSynthesizer,
        cipher: FieldCipher,
        match_tokens: Mapping[Category, Sequence[str]] = DEFAULT_MATCH_TOKENS,
    ) -> None:
        self._identifiers = identifiers
        self._titles = titles
        self._cipher = cipher
        self._match_tokens = match_tokens

    @property
    def steps(self) -> tuple[SaveStep, ...]:
        return (
            self.assign_identifier,
            self.assign_category,
            self.sanitize_tags,
            self.fill_title,
            self.encrypt_fields,
        )

    async def run(self, entry: Entry, reencrypt_all: bool = False) -> Entry:
        """
        Prepare an entry for persistence.

        Args:
            entry: Entry with staged plaintext
            reencrypt_all: Encrypt title, body and tags even if unchanged

        Returns:
            The same entry, holding only ciphertext
        """
        context = SaveContext(reencrypt_all=reencrypt_all)
        changed = sorted(entry.changed_fields)
        for step in self.steps:
            await step(entry, context)
        logger.debug(
            "Entry prepared for save",
            extra={"entry_id": entry.entry_id, "changed_fields": changed},
        )
        return entry

    def _plaintext(self, entry: Entry, field: str) -> str:
        staged = entry.staged(field)
        if staged is not None:
            return staged
        return self._cipher.decrypt(getattr(entry, field))

    async def assign_identifier(self, entry: Entry, context: SaveContext) -> None:
        if entry.entry_id is None:
            entry.entry_id = await self._identifiers.generate(entry.user_id)

    async def assign_category(self, entry: Entry, context: SaveContext) -> None:
        tags_changed = "tags" in entry.changed_fields and not entry.category_assigned
        if entry.category is Category.UNCATEGORIZED or tags_changed:
            tags = split_tags(self._plaintext(entry, "tags"))
            entry.category = classify(tags, self._match_tokens)

        if entry.category is Category.UNCATEGORIZED:
            raise ValidationError(
                "Entry type must be set",
                details={"entry_type": "must be set"},
            )

    async def sanitize_tags(self, entry: Entry, context: SaveContext) -> None:
        staged = entry.staged("tags")
        if staged is not None:
            entry.stage("tags", sanitize_tags(staged))

    async def fill_title(self, entry: Entry, context: SaveContext) -> None:
        staged = entry.staged("title")
        blank = not staged.strip() if staged is not None else not entry.title
        if blank:
            entry.stage("title", await self._titles.synthesize(entry.category, entry.user_id))

        if not entry.staged("title") and not entry.title:
            raise ValidationError(
                "Entry title must not be empty",
                details={"title": "must not be empty"},
            )

    async def encrypt_fields(self, entry: Entry, context: SaveContext) -> None:
        fields = ENCRYPTED_FIELDS if context.reencrypt_all else sorted(entry.changed_fields)
        ciphertexts = {field: self._cipher.encrypt(self._plaintext(entry, field)) for field in fields}
        for field, ciphertext in ciphertexts.items():
            setattr(entry, field, ciphertext)
        entry.clear_staged()
