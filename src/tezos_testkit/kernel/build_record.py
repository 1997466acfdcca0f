"""Build record model: persisted compiler output for one contract."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class BuildRecord(BaseModel):
    """Contents of <outputDirectory>/<name>.json.

    `michelson` holds the JSON-Michelson code as a string; it may be missing or
    empty when a compilation was interrupted. A record is only meaningful next
    to the source it names in `source_path`.
    """

    source_path: str = Field(alias="sourcePath")
    hash: str
    michelson: Optional[str] = None
    contract_name: Optional[str] = Field(default=None, alias="contractName")
    compiler: Optional[str] = None
    compiler_version: Optional[str] = Field(default=None, alias="compilerVersion")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")  # ISO 8601

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def has_code(self) -> bool:
        return bool(self.michelson and self.michelson.strip())

    def to_json_dict(self) -> Dict[str, Any]:
        """On-disk representation (camelCase keys, unset optionals dropped)."""
        return self.model_dump(by_alias=True, exclude_none=True)
