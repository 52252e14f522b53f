"""
Shared pydantic base for gateway models.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class GatewayModel(BaseModel):
    """
    Base model serialized with camelCase keys.

    Python code uses snake_case attribute names; JSON payloads exchanged with
    the dashboard use camelCase. Both spellings are accepted on input.
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        protected_namespaces = ()

    def to_json_dict(self):
        """Dump with camelCase keys, dropping unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
