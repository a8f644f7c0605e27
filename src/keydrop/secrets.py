import json
import os
from typing import Mapping, Optional

import boto3

from keydrop.logger import get_logger

logger = get_logger("secrets")


def _get_secret_name_and_region(environ: Mapping[str, str]) -> tuple[Optional[str], str]:
    """
    Resolve the secret name and AWS region from environment variables.

    KEYDROP_SECRET_NAME is optional; without it every setting comes from the
    environment. AWS_REGION defaults to us-east-1 inside Lambda if not set.
    """
    secret_name = environ.get("KEYDROP_SECRET_NAME") or None
    region_name = environ.get("AWS_REGION", "us-east-1")
    return secret_name, region_name


def get_keydrop_secrets(environ: Optional[Mapping[str, str]] = None) -> dict:
    """
    Fetch webhook credentials/config from AWS Secrets Manager.

    Expects the secret value to be a JSON object whose keys are the setting
    names (case-insensitive), e.g.:

        {
          "PAYPAL_CLIENT_ID": "...",
          "paypal_client_secret": "...",
          "TWILIO_ACCOUNT_SID": "..."
        }

    Returns an empty dict when no secret is configured. Keys are upper-cased.
    """
    environ = os.environ if environ is None else environ
    secret_name, region_name = _get_secret_name_and_region(environ)
    if not secret_name:
        return {}

    logger.info(
        "Fetching webhook secrets from Secrets Manager",
        extra={"secret_name": secret_name, "region": region_name},
    )

    client = boto3.client("secretsmanager", region_name=region_name)

    resp = client.get_secret_value(SecretId=secret_name)
    secret_str = resp.get("SecretString")

    if not secret_str:
        msg = f"Secret '{secret_name}' has no SecretString payload"
        logger.error(msg)
        raise RuntimeError(msg)

    try:
        data = json.loads(secret_str)
    except json.JSONDecodeError as e:
        logger.error(
            "SecretString is not valid JSON",
            extra={"secret_name": secret_name, "error": str(e)},
        )
        raise

    if not isinstance(data, dict):
        msg = f"Secret '{secret_name}' must hold a JSON object"
        logger.error(msg)
        raise RuntimeError(msg)

    return {str(k).upper(): v for k, v in data.items()}
