"""
Cross-references detected PII against the compliance policy library.
"""

from typing import Iterable, List, Union

from ..exceptions import PolicyLookupException
from ..models.pii import PIIKind
from ..models.policy import PolicyMatch
from ..storage.interface import DocumentStoreInterface, SearchHit

POLICY_INDEX = "compliance-policies"

POLICY_QUERIES = ("personal data disclosure", "pii protection")
DATA_PROTECTION_CATEGORIES = ("DATA_PROTECTION", "PHI_DISCLOSURE", "DATA_SECURITY")
MAX_POLICY_MATCHES = 5


class PolicyMatcher:
    """
    Looks up policy clauses relevant to a document's PII.

    Every call issues one search; there is no caching and no retry.
    """

    def __init__(self, store: DocumentStoreInterface, index: str = POLICY_INDEX):
        self.store = store
        self.index = index

    def find_matching_policies(self, kinds: Iterable[Union[PIIKind, str]]) -> List[PolicyMatch]:
        """
        Find the top ranked policies for the kinds found in a document.

        Args:
            kinds: Distinct PII kinds of the document

        Returns:
            Up to five matches, best first; empty without querying the store
            when no kinds were found

        Raises:
            PolicyLookupException: If the store search fails
        """
        if not list(kinds):
            return []

        try:
            hits = self.store.search(
                self.index,
                queries=POLICY_QUERIES,
                field="content",
                terms={"category": DATA_PROTECTION_CATEGORIES},
                size=MAX_POLICY_MATCHES
            )
        except Exception as e:
            raise PolicyLookupException(f"Policy search failed: {str(e)}") from e

        return [self._to_match(hit) for hit in hits[:MAX_POLICY_MATCHES]]

    @staticmethod
    def _to_match(hit: SearchHit) -> PolicyMatch:
        return PolicyMatch(
            id=hit.id,
            title=hit.source.get("title", ""),
            framework=hit.source.get("framework", ""),
            article=hit.source.get("article", ""),
            relevance_score=hit.score
        )
