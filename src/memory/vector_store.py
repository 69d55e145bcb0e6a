"""
FAQ vector collection backed by ChromaDB.

A FAQ record carries two embeddings (question and response). ChromaDB
stores one embedding per item, so the collection is kept as one Chroma
collection per vector field, sharing ids and metadata. Search runs against
a single named field and returns cosine similarity (1 - cosine distance).

The client is in-memory (EphemeralClient): the FAQ is rebuilt from the
seed file on every start.
"""

import logging
from typing import Dict, List, Optional, Tuple

import chromadb
from chromadb.api import ClientAPI
from chromadb.api.models.Collection import Collection
from chromadb.config import Settings as ChromaSettings

from src.errors import VectorStoreError
from src.memory.models import FaqRecord, FaqResult


logger = logging.getLogger(__name__)

QUESTION_VECTOR = "question_vector"
RESPONSE_VECTOR = "response_vector"
VECTOR_FIELDS = (QUESTION_VECTOR, RESPONSE_VECTOR)

# Chroma collection name suffix per vector field
_FIELD_SUFFIX = {
    QUESTION_VECTOR: "questions",
    RESPONSE_VECTOR: "responses",
}


def create_client() -> ClientAPI:
    """Create an in-memory Chroma client with telemetry disabled."""
    return chromadb.EphemeralClient(
        settings=ChromaSettings(anonymized_telemetry=False),
    )


class FaqCollection:
    """
    Vector collection of FAQ records with two searchable vector fields.

    Attributes:
        name: Logical collection name
        dimensions: Required vector length, or None to accept any length
    """

    def __init__(
        self,
        client: ClientAPI,
        name: str = "faq",
        dimensions: Optional[int] = None,
    ):
        self.client = client
        self.name = name
        self.dimensions = dimensions
        self._collections: Dict[str, Collection] = {}

    def _chroma_name(self, field: str) -> str:
        return f"{self.name}-{_FIELD_SUFFIX[field]}"

    def exists(self) -> bool:
        """Whether every per-field collection exists in the store."""
        names = {c.name for c in self.client.list_collections()}
        return all(self._chroma_name(field) in names for field in VECTOR_FIELDS)

    def create(self) -> None:
        """Create (or open) the per-field collections using cosine space."""
        for field in VECTOR_FIELDS:
            # Embeddings are always supplied, Chroma must not load its own model
            self._collections[field] = self.client.get_or_create_collection(
                name=self._chroma_name(field),
                metadata={"hnsw:space": "cosine"},
                embedding_function=None,
            )
        logger.debug("Collection '%s' ready", self.name)

    def delete(self) -> None:
        """Drop the per-field collections if they exist."""
        names = {c.name for c in self.client.list_collections()}
        for field in VECTOR_FIELDS:
            chroma_name = self._chroma_name(field)
            if chroma_name in names:
                self.client.delete_collection(chroma_name)
        self._collections.clear()

    def count(self) -> int:
        """Number of records stored."""
        if not self.exists():
            return 0
        return self._collection(QUESTION_VECTOR).count()

    def upsert(self, record: FaqRecord) -> None:
        """
        Insert or replace a record in every vector field.

        Raises:
            VectorStoreError: If a vector is empty or has the wrong length
        """
        vectors = {
            QUESTION_VECTOR: record.question_vector,
            RESPONSE_VECTOR: record.response_vector,
        }
        for field, vector in vectors.items():
            self._check_vector(field, vector)

        metadata = {"id": record.id, "question": record.question, "response": record.response}
        for field, vector in vectors.items():
            self._collection(field).upsert(
                ids=[str(record.id)],
                embeddings=[vector],
                documents=[record.question],
                metadatas=[metadata],
            )

    def search(
        self,
        field: str,
        vector: List[float],
        top: int,
        skip: int = 0,
    ) -> List[Tuple[FaqResult, float]]:
        """
        Nearest-neighbour search over one vector field.

        Args:
            field: QUESTION_VECTOR or RESPONSE_VECTOR
            vector: Query embedding
            top: Maximum number of results
            skip: Number of leading results to drop

        Returns:
            List of (result, similarity) ordered by descending similarity

        Raises:
            VectorStoreError: If the field is unknown
        """
        if field not in VECTOR_FIELDS:
            raise VectorStoreError(f"Unknown vector field '{field}'", component="vector_store")

        collection = self._collection(field)
        n_results = min(top + skip, collection.count())
        if n_results <= 0:
            return []

        results = collection.query(
            query_embeddings=[vector],
            n_results=n_results,
            include=["metadatas", "distances"],
        )

        metadatas = results["metadatas"][0] if results["metadatas"] else []
        distances = results["distances"][0] if results["distances"] else []

        scored = [
            (FaqResult(question=meta["question"], response=meta["response"]), 1.0 - distance)
            for meta, distance in zip(metadatas, distances)
        ]
        return scored[skip:skip + top]

    def _collection(self, field: str) -> Collection:
        if field not in self._collections:
            self._collections[field] = self.client.get_collection(self._chroma_name(field))
        return self._collections[field]

    def _check_vector(self, field: str, vector: List[float]) -> None:
        if not vector:
            raise VectorStoreError(f"Empty {field}", component="vector_store")
        if self.dimensions is not None and len(vector) != self.dimensions:
            raise VectorStoreError(
                f"{field} has {len(vector)} dimensions, expected {self.dimensions}",
                component="vector_store",
            )
