"""Context snapshot schema for JSON/YAML context files.

A context file describes what the player carries and can reach, so the
CLI can parse commands against a realistic scene.
"""

from pydantic import BaseModel, Field

from trailparse.parser.intent_types import ParseContext


class ContextSnapshot(BaseModel):
    """Template for a parse context."""

    inventory: list[str] = Field(
        default_factory=list,
        description="Names of carried items",
    )
    nearby: list[str] = Field(
        default_factory=list,
        description="Names of entities in reach",
    )
    known_directions: list[str] = Field(
        default_factory=list,
        description="Direction vocabulary for the current location",
    )
    last_entity: str = Field(
        default="",
        description="Entity most recently referred to (for 'it', 'that')",
    )

    def to_context(self) -> ParseContext:
        """Convert to the immutable ParseContext the parser consumes."""
        return ParseContext(
            inventory=tuple(self.inventory),
            nearby=tuple(self.nearby),
            known_directions=tuple(self.known_directions),
            last_entity=self.last_entity,
        )
