"""Schema catalog backed by a compiler output directory.

Artifacts are looked up as `<root>/<file_name>/<contract_name>.json`
(Foundry's `out/` layout), and events are matched by canonical signature.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from shadowlogs.abi_events import get_event_schema, get_events_from_abi, make_event_registry_from_abi
from shadowlogs.core.exceptions import ArtifactError, SchemaError
from shadowlogs.decoding.registry_builder import canonical_signature
from shadowlogs.decoding.specs import EventRegistry, EventSchema


class LocalArtifactStore:
    """Read contract ABIs from a local artifacts directory."""

    def __init__(self, root: Path | str = Path("contracts/out")) -> None:
        self.root = Path(root)

    def artifact_path(self, file_name: str, contract_name: str) -> Path:
        return self.root / file_name / f"{contract_name}.json"

    def get_artifact(self, file_name: str, contract_name: str) -> dict[str, Any]:
        path = self.artifact_path(file_name, contract_name)
        try:
            return json.loads(path.read_text())
        except FileNotFoundError as e:
            raise ArtifactError(f"Artifact not found: {path}") from e
        except json.JSONDecodeError as e:
            raise ArtifactError(f"Artifact is not valid JSON: {path}: {e}") from e

    def get_event(self, file_name: str, contract_name: str, signature: str) -> EventSchema:
        """Return the schema of the event matching `signature` (canonical or human-readable)."""
        try:
            wanted = canonical_signature(signature)
        except SchemaError as e:
            raise ArtifactError(f"Invalid event signature {signature!r}: {e}") from e

        artifact = self.get_artifact(file_name, contract_name)
        for event in get_events_from_abi(artifact):
            schema = get_event_schema(event)
            if schema.signature == wanted:
                return schema
        raise ArtifactError(
            f"Event signature not found in {file_name}:{contract_name} ABI: {signature}"
        )

    def get_registry(self, file_name: str, contract_name: str) -> EventRegistry:
        """Return a selector-keyed registry of every event in the contract ABI."""
        return make_event_registry_from_abi(self.get_artifact(file_name, contract_name))
