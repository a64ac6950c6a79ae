# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import pytest

"""
NOTE: tests that need some kind of non-specific, arbitrary exception should use the
following fixture. The exception is a subclass of Exception that is not defined anywhere else,
guaranteeing that it will be unexpected and unhandled except by broad all-encompassing
handling, and that tests checking it is raised cannot spuriously pass.
"""


@pytest.fixture
def unexpected_exception():
    class UnexpectedException(Exception):
        pass

    e = UnexpectedException()
    return e
