from typing import Iterable, Type, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class ORMMapper:
    @staticmethod
    def one(item, schema: Type[T]) -> T:
        return schema.model_validate(item)

    @staticmethod
    def dump(item, schema: Type[T]) -> dict:
        return ORMMapper.one(item, schema).model_dump(mode="json", by_alias=True)

    @staticmethod
    def dump_many(items: Iterable, schema: Type[T]) -> list[dict]:
        return [ORMMapper.dump(item, schema) for item in items]
