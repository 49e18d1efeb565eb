# Validation package init
"""
Blog API — Request Validation
==============================

What:  Declarative, per-endpoint input rules and the pure `validate()` runner.
Who:   The dispatcher's validation stage (blogapi/pipeline.py) runs a ruleset
       before any controller code executes.
"""

from blogapi.validation.rules import (
    BODY,
    PARAMS,
    QUERY,
    IsEmail,
    IsString,
    MaxBytes,
    MinLength,
    PositiveInt,
    Required,
    Rule,
    ValidationResult,
    validate,
)

__all__ = [
    "BODY",
    "PARAMS",
    "QUERY",
    "IsEmail",
    "IsString",
    "MaxBytes",
    "MinLength",
    "PositiveInt",
    "Required",
    "Rule",
    "ValidationResult",
    "validate",
]
