from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BulkJobRequest(BaseModel):
    """
    Rows are spreadsheet records keyed by column header ("S.No", "Project Name", ...)
    or by camelCase field name ("sNo", "projectName", ...); both map the same way.
    """

    model_config = ConfigDict(populate_by_name=True)

    drive_folder_url: str | None = Field(None, alias="driveFolderUrl")
    rows: list[dict[str, Any]]


class ChunkOut(BaseModel):
    index: int
    sequence_numbers: list[int]
    inserted: int
    error: str | None = None


class ChunkErrorOut(BaseModel):
    chunk: int
    error: str


class RowErrorOut(BaseModel):
    sequence_number: int
    error: str


class BatchResultOut(BaseModel):
    total: int = Field(..., ge=0)
    prepared: int = Field(..., ge=0)
    inserted_count: int = Field(..., ge=0)
    errored_count: int = Field(..., ge=0)
    image_match_count: int = Field(..., ge=0)
    no_image_count: int = Field(..., ge=0)
    skipped: list[int]
    inserted_sequence_numbers: list[int]
    errored_sequence_numbers: list[int]
    chunks: list[ChunkOut]
    errors: list[ChunkErrorOut]
    build_errors: list[RowErrorOut] = []
    fatal_error: str | None = None


class UpdateOutcomeOut(BaseModel):
    sequence_number: int
    status: str
    error: str | None = None
    property_id: int | None = None


class ReconciliationSummaryOut(BaseModel):
    total: int = Field(..., ge=0)
    updated_count: int = Field(..., ge=0)
    not_found_count: int = Field(..., ge=0)
    errored_count: int = Field(..., ge=0)
    no_image_count: int = Field(..., ge=0)
    skipped: list[int]
    outcomes: list[UpdateOutcomeOut]
    errors: list[RowErrorOut]
    fatal_error: str | None = None


class PhaseErrorOut(BaseModel):
    phase: str
    error: str


class SeedResultOut(BaseModel):
    seeded: bool
    counts: dict[str, int]
    errors: list[PhaseErrorOut]


class SeedNeededOut(BaseModel):
    needed: bool
