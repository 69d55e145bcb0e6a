"""
Semantic FAQ retrieval.

The FAQ matcher answers a free-text question with the stored FAQ entries
most likely to address it. Matching runs in two passes over the same query
embedding:

1. Against the stored question embeddings (top 3, score > 0.3). A user's
   question phrased like a stored question is a strong signal.
2. Against the stored answer embeddings (top 5, score > 0.5). A question
   that resembles an answer is a weaker signal, so the bar is higher.

Results are pass 1 then pass 2, deduplicated by question text.

The backing collection is seeded from the static FAQ file on first use.
"""

import enum
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List

from langchain_core.embeddings import Embeddings

from src.memory.models import FaqEntry, FaqRecord, FaqResult
from src.memory.seed import load_faq_entries
from src.memory.vector_store import FaqCollection, QUESTION_VECTOR, RESPONSE_VECTOR


logger = logging.getLogger(__name__)


class SeedState(enum.Enum):
    EMPTY = "empty"
    SEEDING = "seeding"
    READY = "ready"


class FaqMatcher:
    """
    Two-pass semantic matcher over a seeded FAQ collection.

    Seeding is guarded by a lock and a small state machine
    (EMPTY -> SEEDING -> READY), so concurrent callers wait for the first
    one instead of creating the collection twice.
    """

    def __init__(
        self,
        collection: FaqCollection,
        embeddings: Embeddings,
        seed_path: Path,
        question_threshold: float = 0.3,
        question_top_k: int = 3,
        response_threshold: float = 0.5,
        response_top_k: int = 5,
        seed_workers: int = 4,
    ):
        self.collection = collection
        self.embeddings = embeddings
        self.seed_path = Path(seed_path)
        self.question_threshold = question_threshold
        self.question_top_k = question_top_k
        self.response_threshold = response_threshold
        self.response_top_k = response_top_k
        self.seed_workers = seed_workers

        self._lock = threading.Lock()
        self._state = SeedState.EMPTY

    @property
    def state(self) -> SeedState:
        return self._state

    def ensure_seeded(self) -> None:
        """
        Make sure the collection exists and holds the FAQ.

        If the collection already exists nothing is written. Otherwise it is
        created and every seed entry is embedded and upserted; entries are
        processed concurrently and all must finish before the matcher is
        ready. On failure the partial collection is dropped so the next
        call starts over.

        Raises:
            SeedDataError: If the seed file is missing or malformed
        """
        with self._lock:
            if self._state is SeedState.READY:
                return

            self._state = SeedState.SEEDING
            try:
                if self.collection.exists():
                    logger.info("FAQ collection '%s' already exists", self.collection.name)
                else:
                    self._seed()
            except Exception:
                self._state = SeedState.EMPTY
                raise

            self._state = SeedState.READY

    def _seed(self) -> None:
        logger.info("Loading FAQ seed file %s", self.seed_path)
        entries = load_faq_entries(self.seed_path)

        logger.info("Creating FAQ collection '%s'", self.collection.name)
        self.collection.create()

        logger.info("Embedding and storing %d FAQ entries...", len(entries))
        try:
            with ThreadPoolExecutor(max_workers=max(1, self.seed_workers)) as pool:
                futures = [
                    pool.submit(self._store_entry, record_id, entry)
                    for record_id, entry in enumerate(entries, start=1)
                ]
                for future in futures:
                    future.result()
        except Exception:
            logger.warning("Seeding failed, dropping partial FAQ collection")
            self.collection.delete()
            raise

        logger.info("FAQ collection ready!")

    def _store_entry(self, record_id: int, entry: FaqEntry) -> None:
        record = FaqRecord(
            id=record_id,
            question=entry.question,
            response=entry.response,
            question_vector=self.embeddings.embed_query(entry.question),
            response_vector=self.embeddings.embed_query(entry.response),
        )
        self.collection.upsert(record)

    def find_faq(self, question: str) -> List[FaqResult]:
        """
        Find the FAQ entries most relevant to a question.

        Args:
            question: The user's question

        Returns:
            List[FaqResult]: Matches, question-pass hits first, then
            answer-pass hits; never two entries with the same question.
            Empty when nothing clears the thresholds or the question is blank.
        """
        logger.info('Searching FAQ entries similar to "%s"...', question)

        results: List[FaqResult] = []
        if not question or not question.strip():
            return results

        self.ensure_seeded()

        query_vector = self.embeddings.embed_query(question)
        seen = set()

        hits = self.collection.search(QUESTION_VECTOR, query_vector, top=self.question_top_k, skip=0)
        for faq, score in hits:
            if score > self.question_threshold and faq.question not in seen:
                logger.info("Similar question found: %s (%.3f)", faq.question, score)
                seen.add(faq.question)
                results.append(faq)

        hits = self.collection.search(RESPONSE_VECTOR, query_vector, top=self.response_top_k, skip=0)
        for faq, score in hits:
            if score > self.response_threshold and faq.question not in seen:
                logger.info("Answer similar to the question found: %s (%.3f)", faq.question, score)
                seen.add(faq.question)
                results.append(faq)

        logger.info("%d FAQ entries found", len(results))
        return results
