"""
Input data models.

A TicketRecord is opaque to the engine beyond cache-key derivation and being
handed to the prompt builder.
"""

from pydantic import BaseModel, ConfigDict, Field


class TicketRecord(BaseModel):
    """One support ticket to classify (immutable, hashable)."""

    model_config = ConfigDict(frozen=True)

    issue_key: str = Field(..., min_length=1, description="Ticket identifier (e.g. 'SUP-1042')")
    summary: str = Field(default="", description="Ticket subject line")
    description: str = Field(default="", description="Ticket body text")
    reporter: str = Field(default="", description="Submitter identity")
