"""
Credential codec: ``salt:digestHex[:metadataJSON]``.

The two-field form is the legacy layout (no metadata, one iteration).
Metadata that is not valid JSON, or is JSON but not an object, is treated as
absent; metadata that parses but names an unknown algorithm or a bad
iteration count is rejected.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from pydantic import ValidationError as SchemaError

from config.settings import Settings, config
from core.algorithms import resolve_algorithm
from utils.errors import MalformedCredentialError
from utils.schemas import CredentialMetadata, CredentialRecord
from utils.validators import (
    DELIMITER,
    validate_digest_hex,
    validate_iterations,
    validate_salt,
)

logger = logging.getLogger(__name__)


def encode(record: CredentialRecord, settings: Settings | None = None) -> str:
    """Serialise ``record`` to its single-line stored form."""
    validate_salt(record.salt, settings)
    validate_digest_hex(record.digest)

    if record.metadata is None:
        return f"{record.salt}{DELIMITER}{record.digest}"

    validate_iterations(record.metadata.iterations, settings)
    meta = record.metadata.model_dump(mode="json", by_alias=True, exclude_none=True)
    meta_json = json.dumps(meta, separators=(",", ":"))
    return DELIMITER.join((record.salt, record.digest, meta_json))


def decode(text: Any, settings: Settings | None = None) -> CredentialRecord:
    """
    Parse a stored credential.

    Raises
    ------
    MalformedCredentialError – not a string, or fewer than two fields
    ValidationError          – salt / digest / metadata field out of bounds
    """
    if not isinstance(text, str):
        raise MalformedCredentialError("Stored credential must be a string")

    parts = text.split(DELIMITER)
    if len(parts) < 2:
        raise MalformedCredentialError(
            "Invalid stored credential format - must contain salt and digest "
            "separated by a colon"
        )

    salt, digest = parts[0], parts[1]
    validate_salt(salt, settings)
    validate_digest_hex(digest)

    metadata: Optional[CredentialMetadata] = None
    if len(parts) > 2:
        metadata = _parse_metadata(DELIMITER.join(parts[2:]), settings or config)

    return CredentialRecord(salt=salt, digest=digest, metadata=metadata)


def _parse_metadata(raw: str, settings: Settings) -> Optional[CredentialMetadata]:
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Credential metadata is not valid JSON; using legacy defaults")
        return None
    if not isinstance(data, dict):
        logger.warning("Credential metadata is not a JSON object; using legacy defaults")
        return None

    if "algorithm" in data:
        data["algorithm"] = resolve_algorithm(data["algorithm"])
    if "iterations" in data:
        validate_iterations(data["iterations"], settings)

    try:
        return CredentialMetadata.model_validate(data)
    except SchemaError as exc:
        raise MalformedCredentialError(
            f"Credential metadata has invalid fields: {exc.error_count()} error(s)",
            field="metadata",
        ) from exc
