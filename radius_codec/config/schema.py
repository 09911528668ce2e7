"""Pydantic schema for codec configuration validation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import LOG_LEVELS, PASSWORD_CHAINING_MODES


class CodecSectionSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")
    strict_length: bool = Field(
        default=True, description="Validate header Length against received bytes"
    )
    reject_zero_type: bool = Field(
        default=False, description="Treat attribute type 0 as a decode error"
    )
    password_chaining: str = Field(default="single")
    max_packet_length: int = Field(default=4096, ge=20, le=65535)

    @field_validator("password_chaining")
    @classmethod
    def _validate_chaining(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in PASSWORD_CHAINING_MODES:
            raise ValueError(
                f"password_chaining must be one of {', '.join(PASSWORD_CHAINING_MODES)}"
            )
        return v


class DictionarySectionSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")
    path: str | None = Field(default=None, description="FreeRADIUS dictionary file")

    @field_validator("path")
    @classmethod
    def _empty_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()


class LoggingSectionSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")
    level: str = Field(default="INFO")

    @field_validator("level")
    @classmethod
    def _validate_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"level must be one of {', '.join(LOG_LEVELS)}")
        return v


class CodecConfigSchema(BaseModel):
    codec: CodecSectionSchema
    dictionary: DictionarySectionSchema = Field(
        default_factory=DictionarySectionSchema
    )
    logging: LoggingSectionSchema = Field(default_factory=LoggingSectionSchema)
