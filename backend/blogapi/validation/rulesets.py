"""
Per-endpoint rulesets.

Order matters: errors are reported in the order the rules are declared here.
"""

from blogapi.validation.rules import (
    PARAMS,
    QUERY,
    IsEmail,
    IsString,
    MaxBytes,
    MinLength,
    PositiveInt,
    Required,
)

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_BYTES = 72

ID_PARAM = [
    PositiveInt("id", location=PARAMS),
]

USER_CREATE = [
    Required("name"),
    IsString("name"),
    Required("email"),
    IsString("email"),
    IsEmail("email"),
    Required("password"),
    IsString("password"),
    MinLength("password", PASSWORD_MIN_LENGTH),
    MaxBytes("password", PASSWORD_MAX_BYTES),
]

# Every field optional; supplied ones must still be well-formed
USER_UPDATE = ID_PARAM + [
    IsString("name"),
    IsString("email"),
    IsEmail("email"),
    IsString("password"),
    MinLength("password", PASSWORD_MIN_LENGTH),
    MaxBytes("password", PASSWORD_MAX_BYTES),
]

USER_LOGIN = [
    Required("email"),
    IsString("email"),
    IsEmail("email"),
    Required("password"),
    IsString("password"),
    MaxBytes("password", PASSWORD_MAX_BYTES),
]

POST_CREATE = [
    Required("title"),
    IsString("title"),
    Required("content"),
    IsString("content"),
]

POST_UPDATE = ID_PARAM + [
    IsString("title"),
    IsString("content"),
]

COMMENT_CREATE = [
    Required("post_id"),
    PositiveInt("post_id"),
    Required("content"),
    IsString("content"),
]

COMMENT_UPDATE = ID_PARAM + [
    Required("content"),
    IsString("content"),
]

LIKE_CREATE = [
    Required("post_id"),
    PositiveInt("post_id"),
]

# Optional list filters
POST_LIST = [
    PositiveInt("user_id", location=QUERY),
]

COMMENT_LIST = [
    PositiveInt("post_id", location=QUERY),
]

LIKE_LIST = COMMENT_LIST
