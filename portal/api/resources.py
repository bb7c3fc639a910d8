# portal/api/resources.py
from typing import Generic, List, Optional, Type, TypeVar

from portal.api.client import ApiClient
from portal.schemas.base import ApiModel

ModelType = TypeVar("ModelType", bound=ApiModel)


class BaseResource(Generic[ModelType]):
    """A backend collection that supports list / create / delete."""

    def __init__(self, model: Type[ModelType], path: str, *, public_path: Optional[str] = None):
        self.model = model
        self.path = path
        self.public_path = public_path

    def parse(self, data: dict) -> ModelType:
        return self.model.model_validate(data)

    def parse_many(self, data: Optional[list]) -> List[ModelType]:
        return [self.parse(item) for item in data or []]

    async def list(self, client: ApiClient) -> List[ModelType]:
        return self.parse_many(await client.get(self.path))

    async def list_public(self, client: ApiClient) -> List[ModelType]:
        """Unauthenticated listing used by the landing view."""
        if not self.public_path:
            raise ValueError(f"{self.model.__name__} has no public listing")
        return self.parse_many(await client.get(self.public_path, skip_auth=True))

    async def create(self, client: ApiClient, *, obj_in: ApiModel) -> Optional[dict]:
        return await client.post(self.path, json=obj_in.to_payload())

    async def delete(self, client: ApiClient, id: str) -> None:
        await client.delete(f"{self.path}/{id}")
