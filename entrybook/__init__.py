"""
Entrybook.

Personal notes, todos and read-later bookmarks with encryption at rest.

- backend/core/: Configuration, logging, exceptions, field encryption, database
- backend/models/: Entry and ReadEntry models
- backend/repositories/: Owner-scoped data access
- backend/services/: Save pipeline, classification, identifiers, titles, reads
- backend/rendering/: Markdown and checklist rendering
- backend/schemas/: Pydantic schemas for raw and decrypted entry fields
"""
