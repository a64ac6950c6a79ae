# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains tools for calling the blocking Service SDK from coroutines."""

import asyncio
import functools
import logging

logger = logging.getLogger(__name__)


def emulate_async(fn):
    """Wrap a blocking function in a coroutine function that runs it on the default executor
    of the running loop.

    :param fn: The blocking function, e.g. a bound IoTHubRegistryManager method.
    :returns: A coroutine function taking the same arguments as fn and returning its result.
    """

    @functools.wraps(fn)
    async def run_in_executor(*args, **kwargs):
        logger.debug("Running {} on executor".format(getattr(fn, "__name__", fn)))
        call = functools.partial(fn, *args, **kwargs)
        return await asyncio.get_running_loop().run_in_executor(None, call)

    return run_in_executor
