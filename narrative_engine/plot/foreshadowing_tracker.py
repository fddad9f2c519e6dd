import logging
from typing import List, Optional, Sequence

from ..lexicons import (
    CONNECTION_STRENGTH_WEIGHT,
    FORESHADOWING_CATEGORIES,
    PAYOFF_IMPACT_WEIGHT,
    SETUP_INTENSITY_WEIGHT,
    ForeshadowingCategory,
)
from ..models import (
    ForeshadowingAnalysis,
    ForeshadowingConnection,
    ForeshadowingPayoff,
    ForeshadowingSetup,
)
from ..text_processing.nlp_toolkit import NLPToolkit, get_toolkit


class ForeshadowingTracker:
    """
    Links foreshadowing setups to later payoffs.

    Each sentence is checked against the setup vocabulary and, independently,
    the payoff vocabulary of every category, so one sentence can be both a
    setup and a payoff. A setup connects to every payoff that appears strictly
    after it and shares at least one keyword by substring containment in
    either direction. Setups without any connection are reported as orphaned.
    """

    def __init__(self, toolkit: Optional[NLPToolkit] = None,
                 categories: Sequence[ForeshadowingCategory] = FORESHADOWING_CATEGORIES):
        self.logger = logging.getLogger(__name__)
        self.toolkit = toolkit or get_toolkit()
        self.categories = categories

    def track_foreshadowing(self, text: Optional[str]) -> ForeshadowingAnalysis:
        setups: List[ForeshadowingSetup] = []
        payoffs: List[ForeshadowingPayoff] = []

        for sentence in self.toolkit.sentences(text or ''):
            for category in self.categories:
                setup_keywords = [k for k in category.setup_keywords if k in sentence.text]
                if setup_keywords:
                    setups.append(ForeshadowingSetup(
                        position=sentence.start,
                        text=sentence.text,
                        keywords=setup_keywords,
                        intensity=min(10, len(setup_keywords) * SETUP_INTENSITY_WEIGHT),
                        type=category.name,
                    ))

                payoff_keywords = [k for k in category.payoff_keywords if k in sentence.text]
                if payoff_keywords:
                    payoffs.append(ForeshadowingPayoff(
                        position=sentence.start,
                        text=sentence.text,
                        keywords=payoff_keywords,
                        impact=min(10, len(payoff_keywords) * PAYOFF_IMPACT_WEIGHT),
                    ))

        connections = self.connect(setups, payoffs)
        connected = {connection.setup_id for connection in connections}
        orphaned_setups = [setup for index, setup in enumerate(setups) if index not in connected]

        self.logger.debug(
            f"Foreshadowing: {len(setups)} setups, {len(payoffs)} payoffs, "
            f"{len(connections)} connections, {len(orphaned_setups)} orphaned"
        )
        return ForeshadowingAnalysis(
            setups=setups,
            payoffs=payoffs,
            orphaned_setups=orphaned_setups,
            connections=connections,
        )

    @staticmethod
    def connect(setups: List[ForeshadowingSetup], payoffs: List[ForeshadowingPayoff]) -> List[ForeshadowingConnection]:
        connections = []
        for setup_id, setup in enumerate(setups):
            for payoff_id, payoff in enumerate(payoffs):
                if payoff.position <= setup.position:
                    continue
                common = [
                    keyword for keyword in setup.keywords
                    if any(keyword in other or other in keyword for other in payoff.keywords)
                ]
                if common:
                    connections.append(ForeshadowingConnection(
                        setup_id=setup_id,
                        payoff_id=payoff_id,
                        distance=payoff.position - setup.position,
                        strength=len(common) * CONNECTION_STRENGTH_WEIGHT,
                    ))
        return connections


def track_foreshadowing(text: Optional[str], toolkit: Optional[NLPToolkit] = None) -> ForeshadowingAnalysis:
    return ForeshadowingTracker(toolkit).track_foreshadowing(text)
