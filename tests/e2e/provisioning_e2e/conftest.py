# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
import pytest
import logging
import test_config
from iot_e2e_glue.provisioning import ProvisioningServiceClient

logging.basicConfig(
    format="%(asctime)s %(levelname)-8s %(module)s:%(funcName)s:%(message)s",
    level=logging.WARNING,
    datefmt="%Y-%m-%d %H:%M:%S",
)
logging.getLogger("e2e").setLevel(level=logging.DEBUG)
logging.getLogger("iot_e2e_glue").setLevel(level=logging.DEBUG)

logger = logging.getLogger(__name__)
logger.setLevel(level=logging.INFO)


@pytest.hookimpl(tryfirst=True)
def pytest_runtest_setup(item):
    """
    This hook runs for every test (after parametrizing), as part of the test setup.

    We use this to skip the live tests when there is no service to run them against.
    """
    if not test_config.PROVISIONING_SERVICE_CONNECTION_STRING:
        pytest.skip("IOT_PROVISIONING_SERVICE_CONNECTION_STRING is not set")


@pytest.fixture(scope="module")
def service_client():
    client = ProvisioningServiceClient.create_from_connection_string(
        test_config.PROVISIONING_SERVICE_CONNECTION_STRING
    )
    yield client
    client.close()
