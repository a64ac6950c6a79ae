# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Convenience builders for enrollment records in the Device Provisioning Service wire format"""

ATTESTATION_TYPE_TPM = "tpm"
ATTESTATION_TYPE_SYMMETRIC_KEY = "symmetricKey"
ATTESTATION_TYPE_X509 = "x509"

PROVISIONING_STATUS_ENABLED = "enabled"
PROVISIONING_STATUS_DISABLED = "disabled"

ALLOCATION_POLICY_HASHED = "hashed"
ALLOCATION_POLICY_GEO_LATENCY = "geoLatency"
ALLOCATION_POLICY_STATIC = "static"
ALLOCATION_POLICY_CUSTOM = "custom"


def tpm_attestation(endorsement_key):
    return {"type": ATTESTATION_TYPE_TPM, "tpm": {"endorsementKey": endorsement_key}}


def symmetric_key_attestation(primary_key, secondary_key):
    return {
        "type": ATTESTATION_TYPE_SYMMETRIC_KEY,
        "symmetricKey": {"primaryKey": primary_key, "secondaryKey": secondary_key},
    }


def x509_signing_certificate_attestation(primary_certificate, secondary_certificate=None):
    """Attestation for an enrollment group whose devices chain up to the given CA certificate(s)

    :param str primary_certificate: PEM encoded certificate
    :param str secondary_certificate: PEM encoded certificate (optional)
    """
    signing_certificates = {"primary": {"certificate": primary_certificate}}
    if secondary_certificate:
        signing_certificates["secondary"] = {"certificate": secondary_certificate}
    return {
        "type": ATTESTATION_TYPE_X509,
        "x509": {"signingCertificates": signing_certificates},
    }


def reprovision_policy(update_hub_assignment, migrate_device_data):
    return {
        "updateHubAssignment": update_hub_assignment,
        "migrateDeviceData": migrate_device_data,
    }


def custom_allocation_definition(webhook_url, api_version):
    return {"webhookUrl": webhook_url, "apiVersion": api_version}


def _enrollment_fields(
    attestation,
    provisioning_status,
    reprovision_policy,
    allocation_policy,
    capabilities,
    custom_allocation_definition,
):
    record = {"attestation": attestation, "provisioningStatus": provisioning_status}
    if reprovision_policy is not None:
        record["reprovisionPolicy"] = reprovision_policy
    if allocation_policy is not None:
        record["allocationPolicy"] = allocation_policy
    if capabilities is not None:
        record["capabilities"] = capabilities
    if custom_allocation_definition is not None:
        record["customAllocationDefinition"] = custom_allocation_definition
    return record


def individual_enrollment(
    registration_id,
    attestation,
    provisioning_status=PROVISIONING_STATUS_ENABLED,
    reprovision_policy=None,
    allocation_policy=None,
    capabilities=None,
    custom_allocation_definition=None,
):
    """Build an Individual Enrollment record

    :param str registration_id: Registration id of the enrollment
    :param dict attestation: One of the attestation records built by this module
    :returns: The record, ready to pass to
        :meth:`ProvisioningServiceClient.create_or_update_individual_enrollment`
    """
    record = {"registrationId": registration_id}
    record.update(
        _enrollment_fields(
            attestation,
            provisioning_status,
            reprovision_policy,
            allocation_policy,
            capabilities,
            custom_allocation_definition,
        )
    )
    return record


def enrollment_group(
    enrollment_group_id,
    attestation,
    provisioning_status=PROVISIONING_STATUS_ENABLED,
    reprovision_policy=None,
    allocation_policy=None,
    capabilities=None,
    custom_allocation_definition=None,
):
    """Build an Enrollment Group record"""
    record = {"enrollmentGroupId": enrollment_group_id}
    record.update(
        _enrollment_fields(
            attestation,
            provisioning_status,
            reprovision_policy,
            allocation_policy,
            capabilities,
            custom_allocation_definition,
        )
    )
    return record
