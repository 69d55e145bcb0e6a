"""
FAQ data model.

FaqEntry is what the seed file holds, FaqRecord is what the vector store
holds, and FaqResult is what callers get back from a search.
"""

from typing import List
from pydantic import BaseModel, ConfigDict, Field


class FaqEntry(BaseModel):
    """A question/answer pair from the seed file."""

    question: str = Field(min_length=1)
    response: str = Field(min_length=1)


class FaqResult(BaseModel):
    """Read-only projection of a stored FAQ record."""

    model_config = ConfigDict(frozen=True)

    question: str
    response: str


class FaqRecord(BaseModel):
    """
    A stored FAQ entry with its two embeddings.

    Attributes:
        id: 1-based position of the entry in the seed file
        question: Question text
        response: Answer text
        question_vector: Embedding of the question
        response_vector: Embedding of the answer
    """

    model_config = ConfigDict(frozen=True)

    id: int
    question: str
    response: str
    question_vector: List[float]
    response_vector: List[float]
