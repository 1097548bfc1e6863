from campaign_standard.core.exceptions import CampaignStandardError, SdkInitializationError


def test_campaign_standard_error_exposes_code_and_details():
    error = CampaignStandardError(
        "ERROR_GET_PROFILE",
        message="404 - Not Found ({})",
        sdk_details={"profilePKey": "@p"},
    )

    assert str(error) == "[ERROR_GET_PROFILE] 404 - Not Found ({})"
    assert error.code == "ERROR_GET_PROFILE"
    assert error.sdk_details == {"profilePKey": "@p"}


def test_sdk_details_default_to_empty_mapping():
    assert CampaignStandardError("ERROR_GET_WORKFLOW").sdk_details == {}


def test_sdk_initialization_error_lists_missing_arguments():
    error = SdkInitializationError(["apiKey"])

    assert isinstance(error, CampaignStandardError)
    assert error.code == "ERROR_SDK_INITIALIZATION"
    assert error.message == "SDK initialization error(s). Missing arguments: apiKey"
