"""Uniform response envelope: {success, data, message}."""

from typing import Generic, TypeVar

from pydantic import BaseModel

from crudkit.core.constants import MESSAGE_SUCCESS

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Every outward result. data is null on any failure."""

    success: bool
    data: T | None = None
    message: str

    @classmethod
    def ok(cls, data: T | None, message: str = MESSAGE_SUCCESS) -> "ApiResponse[T]":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, message: str) -> "ApiResponse[T]":
        return cls(success=False, data=None, message=message)
