"""Interface for structured-output generation calls."""

from typing import Protocol


class StructuredClient(Protocol):
    """Interface for LLM calls that return schema-constrained JSON."""

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Return structured data matching the schema."""
