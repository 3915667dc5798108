"""Local shadow contract store.

Shadow contracts are persisted as a JSON list in `<path>/shadow.json`; the
file is created empty on first access.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import List

from pydantic import TypeAdapter, ValidationError

from shadowlogs.core.exceptions import ShadowStoreError
from shadowlogs.core.models import ShadowContract

_CONTRACTS = TypeAdapter(list[ShadowContract])


class LocalShadowStore:
    """File-backed repository of shadow contracts."""

    def __init__(self, path: Path | str) -> None:
        self.file_path = Path(path) / "shadow.json"

    def _read(self) -> List[ShadowContract]:
        if not self.file_path.exists():
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            self.file_path.write_text("[]")
        try:
            return _CONTRACTS.validate_json(self.file_path.read_text())
        except ValidationError as e:
            raise ShadowStoreError(f"Invalid shadow store {self.file_path}: {e}") from e

    def _write(self, contracts: List[ShadowContract]) -> None:
        """Write atomically (tmp + replace)."""
        payload = [c.model_dump(by_alias=True) for c in contracts]
        tmp = self.file_path.with_suffix(".tmp")
        tmp.write_text(json.dumps(payload, indent=2))
        os.replace(tmp, self.file_path)

    def get_by_address(self, address: str) -> ShadowContract:
        for contract in self._read():
            if contract.address.lower() == address.lower():
                return contract
        raise ShadowStoreError(f"Contract not found: {address}")

    def get_by_name(self, file_name: str, contract_name: str) -> ShadowContract:
        for contract in self._read():
            if contract.file_name == file_name and contract.contract_name == contract_name:
                return contract
        raise ShadowStoreError(f"Contract not found: {file_name}:{contract_name}")

    def list(self) -> List[ShadowContract]:
        return self._read()

    def upsert(self, contract: ShadowContract) -> None:
        """Insert a contract, or replace the one with the same address."""
        contracts = self._read()
        for i, existing in enumerate(contracts):
            if existing.address.lower() == contract.address.lower():
                contracts[i] = contract
                break
        else:
            contracts.append(contract)
        self._write(contracts)

    def remove(self, address: str) -> None:
        contracts = self._read()
        kept = [c for c in contracts if c.address.lower() != address.lower()]
        if len(kept) == len(contracts):
            raise ShadowStoreError(f"Contract not found: {address}")
        self._write(kept)
