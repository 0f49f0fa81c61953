"""
CSV transfer response schemas.
"""

from pydantic import BaseModel, Field


class CsvImportResult(BaseModel):
    """Outcome of a CSV import. Rows listed in ``errors`` were skipped."""

    imported: int = Field(0, ge=0, description="Rows saved successfully")
    errors: list[str] = Field(
        default_factory=list,
        description="One 'Row N: message' entry per rejected row",
    )

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
