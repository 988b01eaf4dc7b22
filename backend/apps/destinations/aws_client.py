"""
AWS client factories for SES email and End User Messaging SMS.

Credentials come from the environment (AWS_ACCESS_KEY_ID,
AWS_SECRET_ACCESS_KEY) or the IAM role when running on AWS.
"""

from functools import lru_cache
from typing import Any

import boto3
from botocore.exceptions import ClientError
from django.conf import settings


@lru_cache(maxsize=1)
def get_ses_client() -> Any:
    """SES v1 client, reused across sends."""
    return boto3.client("ses", region_name=settings.AWS_SES_REGION)


@lru_cache(maxsize=1)
def get_sms_client() -> Any:
    """AWS SMS client (pinpoint-sms-voice-v2), reused across sends."""
    return boto3.client("pinpoint-sms-voice-v2", region_name=settings.AWS_SMS_REGION)


def client_error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "Unknown")


def client_error_message(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Message", str(error))
