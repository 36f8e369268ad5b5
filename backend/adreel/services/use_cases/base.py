"""
Base use case class.

Each use case encapsulates a single business operation and knows nothing
about HTTP. Routes translate requests into use case inputs and domain errors
into status codes, so the same use case can run from a route, a CLI or a test.

Example:
    >>> class RunCampaignUseCase(UseCase[CampaignRequest, Dict[str, Any]]):
    ...     async def execute(self, request: CampaignRequest) -> Dict[str, Any]:
    ...         ...
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


class UseCase(ABC, Generic[RequestT, ResponseT]):
    """
    Base use case abstract class.

    Type Parameters:
        RequestT: Type of the input request object
        ResponseT: Type of the output response object
    """

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        """
        Execute the use case and return a response.

        Raises:
            Domain exceptions from ``adreel.core.exceptions``. HTTP exceptions
            are the route's responsibility.
        """
        pass
