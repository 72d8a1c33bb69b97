"""The blind ladder: escalating tiers of a random-mode round."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BlindTier:
    """
    One stage of a random-mode round.

    Attributes:
        name: Short machine name ("small", "big", "boss").
        label: Display label ("Small Blind", ...).
        card_count: Cards dealt for this tier.
        threshold: Fraction correct needed to pass (0-1, inclusive).
        point_multiplier: Score multiplier applied to correct answers.
    """

    name: str
    label: str
    card_count: int
    threshold: float
    point_multiplier: float


BLINDS: tuple[BlindTier, ...] = (
    BlindTier(name="small", label="Small Blind", card_count=10, threshold=0.70, point_multiplier=1),
    BlindTier(name="big", label="Big Blind", card_count=20, threshold=0.75, point_multiplier=1.5),
    BlindTier(name="boss", label="Boss Blind", card_count=30, threshold=0.80, point_multiplier=2),
)
