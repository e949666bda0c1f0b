from enum import StrEnum
from typing import Any, TypeVar

T = TypeVar("T")


def assert_some(result: T | None) -> T:
    assert result is not None
    return result


class EnumAutoStr(StrEnum):
    @staticmethod
    def _generate_next_value_(name: str, start: int, count: int, last_values: list[Any]) -> str:
        return name
