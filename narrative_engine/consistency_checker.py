import logging
from typing import Dict, List, Optional

from config import settings
from .models import ConsistencyIssue
from .text_processing.nlp_toolkit import NLPToolkit, get_toolkit
from .text_processing.text_stats import calculate_sentence_similarity


class ConsistencyChecker:
    """
    Flags person names that appear under several similar spellings.

    Distinct person mentions are compared pairwise by term-set Jaccard
    similarity. Pairs above ``settings.NAME_SIMILARITY_THRESHOLD`` are merged
    with a union-find, so variant groups are transitive: if A~B and B~C then
    A, B and C form one issue even when A and C are dissimilar.
    """

    def __init__(self, toolkit: Optional[NLPToolkit] = None, threshold: Optional[float] = None):
        self.logger = logging.getLogger(__name__)
        self.toolkit = toolkit or get_toolkit()
        self.threshold = settings.NAME_SIMILARITY_THRESHOLD if threshold is None else threshold

    def detect_consistency_issues(self, text: Optional[str]) -> List[ConsistencyIssue]:
        mentions = self.toolkit.people(text or '')
        if not mentions:
            return []

        # Distinct names in first-seen order
        names: List[str] = list(dict.fromkeys(mention.text for mention in mentions))
        parent = list(range(len(names)))

        def find(index: int) -> int:
            while parent[index] != index:
                parent[index] = parent[parent[index]]
                index = parent[index]
            return index

        for i in range(len(names)):
            for j in range(i + 1, len(names)):
                similarity = calculate_sentence_similarity(names[i], names[j], self.toolkit)
                if similarity > self.threshold:
                    root_i, root_j = find(i), find(j)
                    if root_i != root_j:
                        # Keep the earlier name as the cluster root
                        parent[max(root_i, root_j)] = min(root_i, root_j)

        clusters: Dict[int, List[str]] = {}
        for index, name in enumerate(names):
            clusters.setdefault(find(index), []).append(name)

        issues = []
        for root, variations in clusters.items():
            if len(variations) < 2:
                continue
            locations = sorted(mention.start for mention in mentions if mention.text in variations)
            issues.append(ConsistencyIssue(
                type='character_name',
                term=names[root].lower(),
                variations=variations,
                locations=locations,
            ))

        self.logger.info(f"Consistency check: {len(names)} distinct names, {len(issues)} variant groups")
        return issues


def detect_consistency_issues(text: Optional[str], toolkit: Optional[NLPToolkit] = None) -> List[ConsistencyIssue]:
    return ConsistencyChecker(toolkit).detect_consistency_issues(text)
