import pytest
from pydantic import BaseModel, Field

from wayfarer.application.boundary import parse_input, service_boundary
from wayfarer.domain.repositories.errors import RepositoryError
from wayfarer.domain.result import (
    ErrorCode,
    Ok,
    UnwrapError,
    conflict,
    err,
    not_found,
    permission_required,
    validation_error,
)


class _Payload(BaseModel):
    name: str = Field(..., min_length=1)


def test_ok_unwraps_value():
    result = Ok(42)

    assert result.is_ok()
    assert not result.is_err()
    assert result.unwrap() == 42
    with pytest.raises(UnwrapError):
        result.unwrap_err()


def test_err_unwraps_error():
    result = err(ErrorCode.CONFLICT, "taken")

    assert result.is_err()
    assert result.unwrap_err().code == ErrorCode.CONFLICT
    assert str(result.unwrap_err()) == "CONFLICT: taken"
    with pytest.raises(UnwrapError):
        result.unwrap()


def test_shorthand_constructors():
    assert validation_error("bad").unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert conflict("dup").unwrap_err().code == ErrorCode.CONFLICT
    assert permission_required().unwrap_err().message == "Permission required"
    assert not_found("Region", "r1").unwrap_err().message == "Region 'r1' not found"
    assert not_found("Session").unwrap_err().message == "Session not found"


def test_parse_input_accepts_model_or_mapping():
    payload = _Payload(name="x")

    assert parse_input(_Payload, payload) is payload
    assert parse_input(_Payload, {"name": "y"}).name == "y"


async def test_boundary_turns_validation_error_into_err():
    @service_boundary("parse payload")
    async def operation(data):
        return Ok(parse_input(_Payload, data))

    result = await operation({"name": ""})

    assert result.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert result.unwrap_err().message.startswith("name: ")


async def test_boundary_keeps_business_repository_codes():
    @service_boundary("remove thing", ErrorCode.QUERY_FAILED)
    async def operation():
        raise RepositoryError.not_found("Thing", "t1")

    result = await operation()

    assert result.unwrap_err().code == ErrorCode.NOT_FOUND


async def test_boundary_maps_infrastructure_failures_to_failure_code():
    @service_boundary("save thing", ErrorCode.QUERY_FAILED)
    async def write():
        raise RepositoryError.query_failed("connection reset")

    @service_boundary("load thing")
    async def read():
        raise RepositoryError.query_failed("connection reset")

    write_error = (await write()).unwrap_err()
    read_error = (await read()).unwrap_err()

    assert write_error.code == ErrorCode.QUERY_FAILED
    assert write_error.message == "Failed to save thing"
    assert read_error.code == ErrorCode.FETCH_FAILED


async def test_boundary_maps_unexpected_exceptions_to_internal_error():
    @service_boundary("divide")
    async def operation():
        return Ok(1 / 0)

    result = await operation()

    assert result.unwrap_err().code == ErrorCode.INTERNAL_ERROR
    assert isinstance(result.unwrap_err().cause, ZeroDivisionError)
