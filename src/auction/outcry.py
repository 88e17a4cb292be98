from __future__ import annotations

from textwrap import dedent
from typing import Optional

from pydantic import Field

from schema import StrictBaseModel


class OutcryRule(StrictBaseModel):
    from_multiplier: float
    to_multiplier: float
    increment: int = Field(gt=0)


class OutcryConfig(StrictBaseModel):
    rules: list[OutcryRule] = Field(
        default_factory=list,
        description=dedent(
            """
            Increment brackets keyed on current bid / base price. The first
            rule whose [from, to) range holds the multiplier wins. With no
            rules every raise adds the base price.
            """
        ),
    )
    timer_seconds: Optional[int] = Field(
        default=None,
        gt=0,
        description="Seconds a raise holds before bidding on the round stops; None means no timer.",
    )


def load_config(raw: dict | None) -> OutcryConfig:
    """
    Auctions without a stored config step by the base price and have no timer.
    """
    if not raw:
        return OutcryConfig()
    return OutcryConfig.model_validate(raw)


def calculate_increment(current_bid: int, base_price: int, config: OutcryConfig) -> int:
    if base_price <= 0:
        return 1

    multiplier = current_bid / base_price
    for rule in config.rules:
        if rule.from_multiplier <= multiplier < rule.to_multiplier:
            return rule.increment

    if config.rules:
        return config.rules[-1].increment
    return base_price


def calculate_next_bid(current_bid: int, base_price: int, config: OutcryConfig) -> int:
    return current_bid + calculate_increment(current_bid, base_price, config)


def opening_bid(base_price: int) -> int:
    """ The first raise of a round; never below one coin """
    return max(base_price, 1)
