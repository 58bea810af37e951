# oauth_clients/application/dtos/base_dto.py

"""
Base class for the package's DTOs.

This module defines CustomBaseModel, which extends Pydantic's BaseModel
with the configuration shared by every DTO: reading from ORM attributes
and ignoring fields the store adds on its own (timestamps and the like).
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class CustomBaseModel(BaseModel):
    """
    Base model for every DTO of the package.
    """

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    def model_dump(self, *args, **kwargs) -> Dict[str, Any]:
        """
        Override Pydantic's model_dump to drop fields whose value is None.
        """
        kwargs.setdefault("exclude_none", True)
        return super().model_dump(*args, **kwargs)
