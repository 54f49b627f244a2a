from pydantic import BaseModel, Field
from typing import Optional

class Client(BaseModel):
    id: str = Field(
        ...,
        examples=["1"],
        description="Stable client identifier"
    )
    name: str = Field(
        ...,
        examples=["TechStart Inc"],
        description="Display name of the client"
    )
    email: str = Field(
        ...,
        examples=["billing@techstart.io"],
        description="Billing contact email"
    )
    address: Optional[str] = Field(
        default=None,
        description="Postal address"
    )
    logo: Optional[str] = Field(
        default=None,
        description="Logo URL or asset reference"
    )
