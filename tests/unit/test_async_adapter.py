# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import pytest
import inspect
import logging
import threading
import iot_e2e_glue.async_adapter as async_adapter

logging.basicConfig(level=logging.INFO)
pytestmark = pytest.mark.asyncio


@pytest.fixture
def dummy_value():
    return 123


@pytest.fixture
def mock_function(mocker, dummy_value):
    mock_fn = mocker.MagicMock(return_value=dummy_value)
    mock_fn.__doc__ = "docstring"
    return mock_fn


@pytest.mark.describe("emulate_async()")
class TestEmulateAsync(object):
    @pytest.mark.it("Returns a coroutine function when given a function")
    async def test_returns_coroutine(self, mock_function):
        async_fn = async_adapter.emulate_async(mock_function)
        assert inspect.iscoroutinefunction(async_fn)

    @pytest.mark.it(
        "Returns a coroutine function that returns the result of the input function when called"
    )
    async def test_coroutine_returns_input_function_result(
        self, mocker, mock_function, dummy_value
    ):
        async_fn = async_adapter.emulate_async(mock_function)
        result = await async_fn(dummy_value, key=dummy_value)
        assert mock_function.call_count == 1
        assert mock_function.call_args == mocker.call(dummy_value, key=dummy_value)
        assert result == mock_function.return_value

    @pytest.mark.it("Runs the input function on a thread other than the event loop thread")
    async def test_runs_on_other_thread(self):
        loop_thread = threading.current_thread()

        @async_adapter.emulate_async
        def get_thread():
            return threading.current_thread()

        assert await get_thread() is not loop_thread

    @pytest.mark.it("Raises the exception raised by the input function")
    async def test_raises_input_function_exception(self, mock_function, unexpected_exception):
        mock_function.side_effect = unexpected_exception
        async_fn = async_adapter.emulate_async(mock_function)
        with pytest.raises(type(unexpected_exception)):
            await async_fn()

    @pytest.mark.it("Copies the input function docstring to resulting coroutine function")
    async def test_coroutine_has_input_function_docstring(self, mock_function):
        async_fn = async_adapter.emulate_async(mock_function)
        assert async_fn.__doc__ == mock_function.__doc__
