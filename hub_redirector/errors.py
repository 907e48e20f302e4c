# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Outcomes of the core operations that are not a plain success."""

from fastapi import status


class RedirectorError(Exception):
    """Base error carrying the HTTP status and the message shown to the caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal Server Error", status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(RedirectorError):
    """Invite, key or URL rejected. User-correctable."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(RedirectorError):
    status_code = status.HTTP_404_NOT_FOUND


class StorageError(RedirectorError):
    """Query, insert or transaction failure. Detail is logged, never returned."""

    def __init__(self, detail: str):
        super().__init__()
        self.detail = detail


class RandomSourceError(RedirectorError):
    """The OS entropy source could not be used."""

    def __init__(self, detail: str):
        super().__init__()
        self.detail = detail


class NotImplementedOperation(RedirectorError):
    status_code = status.HTTP_501_NOT_IMPLEMENTED

    def __init__(self, message: str = "Not Implemented"):
        super().__init__(message)


def invalid_invite() -> ValidationError:
    return ValidationError("Invalid Invite Code", status.HTTP_403_FORBIDDEN)


def invalid_key() -> ValidationError:
    return ValidationError("Invalid Key", status.HTTP_403_FORBIDDEN)


def invalid_url() -> ValidationError:
    return ValidationError("Invalid Url", status.HTTP_400_BAD_REQUEST)
