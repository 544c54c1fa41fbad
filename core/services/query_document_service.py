from __future__ import annotations

import hashlib


class QueryDocumentService:
    """
    Prepares query documents for the wire and derives their persisted-query identifier.

    Rules:
    - Every literal "fragment" gets a "\\n" prefix. Some code generators emit
      fragments glued to the previous definition; servers registering the text
      expect this spacing, so it is applied byte-for-byte.
    - identifier = lowercase hex sha256 of the normalized UTF-8 document, i.e.
      of the exact text the server receives on the full-document request.
    """

    FRAGMENT_TOKEN = "fragment"

    @staticmethod
    def normalize(query_document: str) -> str:
        token = QueryDocumentService.FRAGMENT_TOKEN
        return (query_document or "").replace(token, "\n" + token)

    @staticmethod
    def compute_identifier(query_document: str) -> str:
        normalized = QueryDocumentService.normalize(query_document)
        return hashlib.sha256(normalized.encode("utf-8")).hexdigest()
