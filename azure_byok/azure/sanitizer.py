"""
Request body sanitization for Azure o-series models.

Azure rejects sampling parameters on reasoning models with errors such as
"Unsupported value: 'temperature' does not support 0.1". The offending keys
are removed from the outgoing body just before it is sent.
"""

import logging
from typing import Any

from azure_byok.azure.urls import is_reasoning_model
from azure_byok.config.settings import AzureSettings

logger = logging.getLogger(__name__)

DEFAULT_TOP_P = 1


def sanitize_body(
    body: dict[str, Any] | None,
    model_id: str,
    settings: AzureSettings | None = None,
) -> None:
    """Strip parameters a reasoning model rejects, in place.

    - temperature is always removed (only the default is accepted)
    - top_p is removed unless it is exactly the default of 1

    No-op for other models and for missing bodies or fields.
    """
    if not body or not is_reasoning_model(model_id, settings):
        return

    if "temperature" in body:
        logger.info(
            f"Azure o-series model {model_id}: Removing temperature parameter "
            f"({body['temperature']}) - o-series models only support default temperature=1",
            extra={"model_id": model_id},
        )
        del body["temperature"]

    top_p = body.get("top_p")
    if top_p is not None and top_p != DEFAULT_TOP_P:
        logger.info(
            f"Azure o-series model {model_id}: Removing top_p parameter "
            f"({top_p}) - o-series models only support default top_p=1",
            extra={"model_id": model_id},
        )
        del body["top_p"]
