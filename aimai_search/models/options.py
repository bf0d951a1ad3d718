"""Engine configuration."""

from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.normalizer import NormalizationOptions


class SearchOptions(BaseModel):
    """Search engine options; immutable once the engine is constructed."""

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    threshold: float = Field(default=0.6, ge=0.0, le=1.0, description="Minimum score to keep a record")
    limit: Optional[int] = Field(default=None, ge=0, description="Maximum number of results, None for unbounded")
    include_score: bool = Field(default=True, description="Whether results carry their score")
    include_matches: bool = Field(default=False, description="Reserved; match details are not produced")
    use_kana_normalization: bool = Field(default=True)
    use_romaji_search: bool = Field(default=True)
    normalize_long_vowel: bool = Field(default=True)
    expand_iteration_mark: bool = Field(default=True)
    keys: Tuple[str, ...] = Field(default=(), description="Field selectors used to extract text from objects")
    reading_provider: Optional[Any] = Field(default=None, exclude=True)

    @field_validator("keys")
    @classmethod
    def validate_keys(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        """Reject blank field selectors."""
        keys = tuple(key.strip() for key in v)
        if any(not key for key in keys):
            raise ValueError("Field selectors cannot be empty")
        return keys

    @property
    def normalization(self) -> NormalizationOptions:
        return NormalizationOptions(
            use_kana_normalization=self.use_kana_normalization,
            normalize_long_vowel=self.normalize_long_vowel,
            expand_iteration_mark=self.expand_iteration_mark,
        )
