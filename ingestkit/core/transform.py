"""
Transformation stage contract.

A stage is a pydantic model (its fields are its configuration) exposing an
async `acall(nodes, **kwargs)`. `to_dict()` is the stage identity used for
cache fingerprints: class name plus every field value.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence

from pydantic import BaseModel, ConfigDict

from ingestkit.core.schema import BaseNode


class TransformComponent(BaseModel, ABC):
    """
    Abstract base class for all transformation stages.

    Example:
        >>> class Upper(TransformComponent):
        >>>     async def acall(self, nodes, **kwargs):
        >>>         return [n.model_copy(update={"text": n.text.upper()}) for n in nodes]
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @classmethod
    def class_name(cls) -> str:
        return cls.__name__

    @abstractmethod
    async def acall(self, nodes: Sequence[BaseNode], **kwargs: Any) -> List[BaseNode]:
        """Transform a node sequence into a new node sequence."""
        raise NotImplementedError

    async def __call__(self, nodes: Sequence[BaseNode], **kwargs: Any) -> List[BaseNode]:
        return await self.acall(nodes, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Stage identity: configuration fields plus class name."""
        data = self.model_dump()
        data["class_name"] = self.class_name()
        return data
