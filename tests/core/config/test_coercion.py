from datetime import timedelta

import pytest

from confapp.core.config.coercion import (
    check_type,
    coerce,
    format_value,
    to_serializable,
    zero_value,
)
from confapp.core.config.errors import ConfigTypeError
from confapp.core.config.registry import Field, FieldType


def test_coerce_bool():
    field = Field(name="flag", type=FieldType.BOOL, default=False)
    assert coerce("true", field) is True
    assert coerce("0", field) is False
    assert coerce("maybe", field) == "maybe"


def test_coerce_int():
    field = Field(name="workers", type=FieldType.INT)
    assert coerce("12", field) == 12
    assert coerce(3.0, field) == 3
    assert coerce("twelve", field) == "twelve"
    assert coerce(True, field) is True


def test_coerce_float():
    field = Field(name="ratio", type=FieldType.FLOAT)
    assert coerce("0.25", field) == 0.25
    assert coerce(2, field) == 2.0


def test_coerce_duration():
    field = Field(name="period", type=FieldType.DURATION)
    assert coerce("15m", field) == timedelta(minutes=15)
    assert coerce(10, field) == timedelta(seconds=10)
    assert coerce("10", field) == timedelta(seconds=10)
    assert coerce("not-a-duration", field) == "not-a-duration"
    assert coerce(True, field) is True


def test_coerce_string():
    field = Field(name="name")
    assert coerce(5, field) == "5"
    assert coerce(False, field) == "false"
    assert coerce(None, field) is None


def test_check_type():
    field = Field(name="workers", type=FieldType.INT)
    assert check_type(5, field) == 5
    with pytest.raises(ConfigTypeError):
        check_type("5", field)


def test_zero_values():
    assert zero_value(FieldType.STRING) == ""
    assert zero_value(FieldType.BOOL) is False
    assert zero_value(FieldType.DURATION) == timedelta(0)


def test_serialization_and_display():
    assert to_serializable(timedelta(minutes=15)) == "15m0s"
    assert to_serializable(3) == 3
    assert format_value(None) == ""
    assert format_value(True) == "true"
    assert format_value(timedelta(hours=1)) == "1h0m0s"
    assert format_value(("debug", "info")) == "[debug, info]"
