"""Bank branch and abbreviation schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

# CSV header -> document key
CSV_COLUMNS: dict[str, str] = {
    "BANK": "name",
    "IFSC": "IFSC",
    "MICR": "MICR",
    "BRANCH": "branch",
    "ADDRESS": "address",
    "CONTACT": "contact",
    "CITY": "city",
    "DISTRICT": "district",
    "STATE": "state",
    "ABBREVIATION": "abbreviation",
}


class BankRecord(BaseModel):
    """One physical bank branch, as ingested and as returned in search hits.

    Serialized with the document keys used in the index (``IFSC`` and
    ``MICR`` upper case, everything else lower case).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str = Field("", description="Bank name")
    ifsc: str = Field("", alias="IFSC", description="Indian Financial System Code")
    micr: str = Field("", alias="MICR", description="Magnetic Ink Character Recognition code")
    branch: str = ""
    address: str = ""
    contact: str = ""
    city: str = ""
    district: str = ""
    state: str = ""
    abbreviation: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def coerce_to_str(cls, v) -> str:
        """Engines and spreadsheets hand back numbers and nulls for code columns."""
        if v is None:
            return ""
        if isinstance(v, float) and v.is_integer():
            v = int(v)
        return str(v).strip()

    def to_document(self) -> dict[str, str]:
        """Document body for the search index."""
        return self.model_dump(by_alias=True)


class AbbreviationEntry(BaseModel):
    """A bank abbreviation and the canonical bank name it stands for."""

    model_config = ConfigDict(frozen=True)

    abbreviation: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    @field_validator("abbreviation", "name", mode="before")
    @classmethod
    def strip_value(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v
