from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any, Mapping

from ...common.validators import normalize_string_list, optional_text
from ...core.enums import ExitStep
from ...core.exceptions import ValidationError
from ..model import DocumentsUpdate, Resignation
from .base import ExitStepHandler


class DocumentsStep(ExitStepHandler):
    """Exit documents: stores URLs returned by the upload endpoint."""

    step = ExitStep.DOCUMENTS

    def parse(self, payload: Mapping[str, Any]) -> DocumentsUpdate:
        files = payload.get("files")
        if files is None:
            files = payload
        if not isinstance(files, Mapping):
            raise ValidationError("files must be an object")

        # Values may be base64 data: URLs from the upload endpoint.
        update = DocumentsUpdate(
            experience_letter=optional_text(files.get("experienceLetter"), "experienceLetter", max_len=None),
            relieving_letter=optional_text(files.get("relievingLetter"), "relievingLetter", max_len=None),
            other_documents=tuple(normalize_string_list(files.get("otherDocuments"))),
        )
        if not (update.experience_letter or update.relieving_letter or update.other_documents):
            raise ValidationError("At least one document is required")
        return update

    def changes(self, update: DocumentsUpdate, *, current: Resignation, actor_id: int, now: datetime) -> dict[str, Any]:
        docs = current.exit_documents
        others = list(docs.other_documents)
        others.extend(d for d in update.other_documents if d not in others)

        merged = replace(
            docs,
            experience_letter=update.experience_letter or docs.experience_letter,
            relieving_letter=update.relieving_letter or docs.relieving_letter,
            other_documents=tuple(others),
            uploaded_at=now,
        )
        return {"exit_documents": merged}
