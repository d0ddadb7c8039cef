#!/usr/bin/env python3
"""
Firestore blob store for Google App Engine deployment.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from google.cloud import firestore


class FirestoreBlobStore:
    """Stores text blobs as Firestore documents."""

    def __init__(self, collection: str = "sleep_leaderboard", client: Optional[firestore.Client] = None):
        """Initialize the Firestore blob store."""
        self.db = client or firestore.Client()
        self.collection = collection
        self.logger = logging.getLogger(__name__)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        pass

    def _document(self, key: str):
        doc_id = key.replace("/", "__")
        return self.db.collection(self.collection).document(doc_id)

    def read_text(self, key: str) -> Optional[str]:
        """Return the blob content, or None if the document does not exist."""
        doc_ref = self._document(key)
        doc = doc_ref.get()
        if not doc.exists:
            return None
        data = doc.to_dict() or {}
        if data.get("appended"):
            lines = doc_ref.collection("lines").order_by("seq").stream()
            return "".join(line.to_dict().get("text", "") for line in lines)
        return data.get("content", "")

    def write_text(self, key: str, text: str) -> None:
        """Overwrite the blob document."""
        self._document(key).set({
            "key": key,
            "content": text,
            "appended": False,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        })
        self.logger.info(f"Wrote {key} to Firestore collection {self.collection}")

    def append_text(self, key: str, text: str) -> None:
        """Append a line document to the blob's lines sub-collection."""
        doc_ref = self._document(key)

        @firestore.transactional
        def _append(transaction) -> int:
            doc = doc_ref.get(transaction=transaction)
            seq = (doc.to_dict() or {}).get("line_count", 0) if doc.exists else 0
            transaction.set(doc_ref.collection("lines").document(f"{seq:08d}"), {"seq": seq, "text": text})
            transaction.set(doc_ref, {
                "key": key,
                "appended": True,
                "line_count": seq + 1,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }, merge=True)
            return seq

        seq = _append(self.db.transaction())
        self.logger.info(f"Appended line {seq} to {key} in Firestore collection {self.collection}")
