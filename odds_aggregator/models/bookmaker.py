from pydantic import BaseModel, ConfigDict


class Bookmaker(BaseModel):
    """Reference data for a bookmaker whose prices can appear in an outcome."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    logo: str
