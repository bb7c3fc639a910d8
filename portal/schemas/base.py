from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Records exchanged with the backend: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def split_user_ref(data: Any, field: str = "userId") -> Any:
    """Backends either embed the user document or send its bare id; accept both."""
    if not isinstance(data, dict):
        return data
    ref = data.get(field)
    if isinstance(ref, dict):
        data = dict(data)
        data[field] = ref.get("_id") or ref.get("id")
        data.setdefault("user", ref)
    return data
