# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
import pytest
import base64
import copy
import logging
import uuid
import cert_helper
import test_config
from iot_e2e_glue.exceptions import ProvisioningServiceError
from iot_e2e_glue.provisioning import models

logger = logging.getLogger("e2e.{}".format(__name__))

TPM_ENDORSEMENT_KEY = (
    "AToAAQALAAMAsgAgg3GXZ0SEs/gakMyNRqXXJP1S124GUgtk8qHaGzMUaaoABgCAAEMAEAgAAAAAAAEAtKEADl/sNRgm"
    "YAjP6gXmbccRaJoTnVixisUaek0OwAzFGN70xt9ZOYp6fhIwfcft3fdVKOrKpXYcTe72CGNkGJGlQz5ti9n2pQ0uJhcX"
    "8aefh4Onm7lVlUCQAVp1K0r6zI8vkEXWsBIvwvxk0eMJbFaq146kbTkJHIGczb89RkFH2TX+CgXeZOG9oXQzUNwktmTU"
    "acspamune5Wywc/ce8HsDFYchyUHogFhrZ/LPnzyTDXO8sSC5z5dvsUBtUME3iRYDyKgZOfBtmRMqQewD+4iH+ZEJjts"
    "yJiWR8hFhyKROnOuqXfNFwjd5IcNU4wtlKO0cLyXmTOfQK6Da1pr5Q=="
)


def random_id():
    return test_config.ENROLLMENT_ID_PREFIX + str(uuid.uuid4())


def random_key():
    return base64.b64encode(str(uuid.uuid4()).encode("utf-8")).decode("utf-8")


def tpm_individual_enrollment():
    return models.individual_enrollment(
        random_id(),
        models.tpm_attestation(TPM_ENDORSEMENT_KEY),
        capabilities={"iotEdge": True},
        reprovision_policy=models.reprovision_policy(True, True),
        allocation_policy=models.ALLOCATION_POLICY_CUSTOM,
        custom_allocation_definition=models.custom_allocation_definition(
            "https://web.hook", "2019-03-31"
        ),
    )


def symmetric_key_individual_enrollment():
    return models.individual_enrollment(
        random_id(),
        models.symmetric_key_attestation(random_key(), random_key()),
        reprovision_policy=models.reprovision_policy(False, False),
        allocation_policy=models.ALLOCATION_POLICY_HASHED,
    )


def x509_enrollment_group():
    return models.enrollment_group(
        random_id(),
        models.x509_signing_certificate_attestation(cert_helper.create_ca_cert("test cert")),
        reprovision_policy=models.reprovision_policy(True, False),
        allocation_policy=models.ALLOCATION_POLICY_GEO_LATENCY,
    )


def symmetric_key_enrollment_group():
    return models.enrollment_group(
        random_id(),
        models.symmetric_key_attestation(random_key(), random_key()),
        reprovision_policy=models.reprovision_policy(False, True),
        allocation_policy=models.ALLOCATION_POLICY_STATIC,
    )


class EnrollmentOperations(object):
    """The client operations for one kind of enrollment record"""

    def __init__(self, client, id_property, individual):
        self.id_property = id_property
        if individual:
            self.create_or_update = client.create_or_update_individual_enrollment
            self.get = client.get_individual_enrollment
            self.delete = client.delete_individual_enrollment
            self.get_attestation_mechanism = client.get_individual_enrollment_attestation_mechanism
        else:
            self.create_or_update = client.create_or_update_enrollment_group
            self.get = client.get_enrollment_group
            self.delete = client.delete_enrollment_group
            self.get_attestation_mechanism = client.get_enrollment_group_attestation_mechanism


@pytest.fixture(
    params=[
        pytest.param((tpm_individual_enrollment, True), id="IndividualEnrollment with TPM"),
        pytest.param(
            (symmetric_key_individual_enrollment, True),
            id="IndividualEnrollment with symmetric keys",
        ),
        pytest.param((x509_enrollment_group, False), id="EnrollmentGroup with x509"),
        pytest.param(
            (symmetric_key_enrollment_group, False), id="EnrollmentGroup with symmetric keys"
        ),
    ]
)
def enrollment_config(request):
    make_enrollment, individual = request.param
    return make_enrollment(), individual


@pytest.fixture
def operations(service_client, enrollment_config):
    _, individual = enrollment_config
    id_property = "registrationId" if individual else "enrollmentGroupId"
    return EnrollmentOperations(service_client, id_property, individual)


@pytest.fixture
def enrollment(enrollment_config):
    record, _ = enrollment_config
    return record


@pytest.fixture
def created_enrollment(operations, enrollment):
    created = operations.create_or_update(enrollment)
    logger.info("Created enrollment {}".format(created[operations.id_property]))

    yield created

    try:
        current = operations.get(created[operations.id_property])
    except ProvisioningServiceError as e:
        if e.status_code != 404:
            raise
        logger.info("Enrollment {} already deleted".format(created[operations.id_property]))
    else:
        operations.delete(current)
        logger.info("Deleted enrollment {}".format(created[operations.id_property]))


@pytest.mark.describe("ProvisioningServiceClient - CRUD operations")
class TestServiceCreateDelete(object):
    @pytest.mark.it("Creates an enrollment that can be read back")
    def test_create(self, operations, enrollment, created_enrollment):
        enrollment_id = enrollment[operations.id_property]
        assert created_enrollment[operations.id_property] == enrollment_id
        assert created_enrollment["etag"]

        retrieved = operations.get(enrollment_id)

        assert retrieved[operations.id_property] == enrollment_id
        assert retrieved["attestation"]["type"] == enrollment["attestation"]["type"]

    @pytest.mark.it("Updates the provisioning status of an enrollment")
    def test_update(self, operations, created_enrollment):
        to_update = copy.deepcopy(created_enrollment)
        to_update["provisioningStatus"] = models.PROVISIONING_STATUS_DISABLED

        updated = operations.create_or_update(to_update)

        assert updated["provisioningStatus"] == models.PROVISIONING_STATUS_DISABLED
        retrieved = operations.get(created_enrollment[operations.id_property])
        assert retrieved["provisioningStatus"] == models.PROVISIONING_STATUS_DISABLED

    @pytest.mark.it("Deletes an enrollment by id and etag, after which it cannot be read")
    def test_delete(self, operations, created_enrollment):
        enrollment_id = created_enrollment[operations.id_property]

        operations.delete(enrollment_id, etag=created_enrollment["etag"])

        with pytest.raises(ProvisioningServiceError) as e_info:
            operations.get(enrollment_id)
        assert e_info.value.status_code == 404

    @pytest.mark.it("Returns the attestation mechanism of an enrollment")
    def test_attestation_mechanism(self, operations, enrollment, created_enrollment):
        attestation_mechanism = operations.get_attestation_mechanism(
            created_enrollment[operations.id_property]
        )
        assert attestation_mechanism["type"] == enrollment["attestation"]["type"]
