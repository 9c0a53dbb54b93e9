from pydantic import BaseModel, ConfigDict, Field


class OddsData(BaseModel):
    """A single bookmaker price for one outcome, in American odds."""

    model_config = ConfigDict(frozen=True)  # Make instances immutable

    bookmaker: str = Field(..., description="Bookmaker id offering this price.")
    price: int = Field(
        ...,
        description="American odds: +N profit per 100 staked, -N stake per 100 profit.",
    )
    # Derived during transformation/merge, never trusted across sources
    is_best: bool = False
