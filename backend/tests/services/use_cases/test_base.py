"""
Tests for adreel.services.use_cases.base
"""

import pytest
from adreel.services.use_cases.base import UseCase


class TestUseCase:
    """Test the UseCase abstract base class."""

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            UseCase()

    @pytest.mark.asyncio
    async def test_execute_called(self):
        class MyUseCase(UseCase[str, int]):
            async def execute(self, request: str) -> int:
                return len(request)

        assert await MyUseCase().execute("hello") == 5
