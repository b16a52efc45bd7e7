"""Validation of raw log test case configs."""

import codecs
import re

from .schema import CaseConfig, ValidationError, ValidationResult


def validate_case_config(config: CaseConfig) -> ValidationResult:
    """Validate a parsed CaseConfig.

    Checks:
    - multiline first line pattern is present and compiles
    - encoding is a known text codec
    - fields keys are strings

    Args:
        config: Parsed config to validate.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[ValidationError] = []
    warnings: list[ValidationError] = []

    if config.multiline is not None:
        pattern = config.multiline.first_line_pattern
        if not pattern:
            errors.append(ValidationError(
                path="multiline.first_line_pattern",
                message="'first_line_pattern' is required when 'multiline' is set.",
            ))
        else:
            try:
                re.compile(pattern)
            except re.error as e:
                errors.append(ValidationError(
                    path="multiline.first_line_pattern",
                    message=f"Invalid pattern '{pattern}': {e}",
                ))

    try:
        codec = codecs.lookup(config.encoding)
    except LookupError:
        errors.append(ValidationError(
            path="encoding",
            message=f"Unknown encoding '{config.encoding}'.",
        ))
    else:
        # bytes-to-bytes codecs such as hex or rot13 cannot decode a log file
        if not getattr(codec, "_is_text_encoding", True):
            errors.append(ValidationError(
                path="encoding",
                message=f"'{config.encoding}' is not a text encoding.",
            ))

    for key in config.fields:
        if not isinstance(key, str):
            errors.append(ValidationError(
                path=f"fields.{key}",
                message=f"Field names must be strings, got {type(key).__name__}.",
            ))

    if "message" in config.fields:
        warnings.append(ValidationError(
            path="fields.message",
            message="'message' in fields replaces the raw log entry.",
            severity="warning",
        ))

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )
