"""Base model for per-operation option bags."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from code_engine_sdk.core.exceptions import CodeEngineValidationError


class OperationOptions(BaseModel):
    """Input parameters of one service operation.

    Every field defaults to ``None`` so that "unset" stays distinguishable from
    an empty value. Required fields are listed in ``required_fields`` and are
    checked by :func:`validate_options` when the operation is invoked, not at
    construction time.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    required_fields: ClassVar[tuple[str, ...]] = ()

    headers: dict[str, str] | None = Field(
        default=None, description="Extra headers merged into the outgoing request"
    )

    def missing_fields(self) -> list[str]:
        """Names of required fields that are unset or empty."""
        missing = []
        for name in self.required_fields:
            value = getattr(self, name)
            if value is None or value == "":
                missing.append(name)
        return missing


def validate_options(options: OperationOptions | None, name: str) -> None:
    """Check presence of an options value and of its required fields.

    Args:
        options: The options passed to an operation.
        name: Parameter name used in error messages.

    Raises:
        CodeEngineValidationError: If ``options`` is None or a required field
            is unset or empty.
    """
    if options is None:
        raise CodeEngineValidationError(f"{name} cannot be None")
    missing = options.missing_fields()
    if missing:
        raise CodeEngineValidationError(
            f"{name} is missing required fields: {', '.join(missing)}",
            details=type(options).__name__,
        )
