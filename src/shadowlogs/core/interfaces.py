from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from pathlib import Path
from typing import List, Protocol, runtime_checkable

from shadowlogs.core.models import EventLog, ShadowContract
from shadowlogs.decoding.decoder import DecodedLog
from shadowlogs.decoding.specs import EventSchema


# ---------------------------------------------------------------------------
# ILogSubscription
# ---------------------------------------------------------------------------

@runtime_checkable
class ILogSubscription(Protocol):
    """
    Source of raw logs, pushed one at a time.

    Domain expectations:
    - Delivery is at-least-once; no ordering or de-duplication guarantees.
    - It yields EventLog objects already mapped into internal domain models.
    - It hides the underlying transport (polling RPC, websocket, replay file).
    """

    def subscribe(
        self,
        *,
        address: str,
        topic0s: Sequence[str],
    ) -> AsyncIterator[EventLog]:
        """
        Yield logs emitted by `address` whose topic0 is one of `topic0s`.

        Implementations:
        - `LogPoller` (eth_getLogs polling over HTTP)
        - In-memory or synthetic source for testing
        """
        ...


# ---------------------------------------------------------------------------
# IEventSchemaProvider
# ---------------------------------------------------------------------------

@runtime_checkable
class IEventSchemaProvider(Protocol):
    """
    Schema catalog keyed by contract identity and event signature.

    How the ABI is obtained (compiler artifacts, block explorer, database)
    is an infrastructure concern.
    """

    def get_event(self, file_name: str, contract_name: str, signature: str) -> EventSchema:
        """
        Return the EventSchema for `signature` in the given contract's ABI.

        Implementations:
        - `LocalArtifactStore` (compiler output directory)
        """
        ...


# ---------------------------------------------------------------------------
# IShadowContractRepository
# ---------------------------------------------------------------------------

@runtime_checkable
class IShadowContractRepository(Protocol):
    """
    Store of shadow contracts deployed on the local fork.

    Implementations:
    - `LocalShadowStore` (`shadow.json` in the project directory)
    """

    def get_by_address(self, address: str) -> ShadowContract:
        ...

    def get_by_name(self, file_name: str, contract_name: str) -> ShadowContract:
        ...

    def list(self) -> List[ShadowContract]:
        ...

    def upsert(self, contract: ShadowContract) -> None:
        ...

    def remove(self, address: str) -> None:
        ...


# ---------------------------------------------------------------------------
# IDecodedLogSink
# ---------------------------------------------------------------------------

@runtime_checkable
class IDecodedLogSink(Protocol):
    """
    Abstract sink for decoded logs.

    Domain expectations:
    - It accepts decoded logs one at a time.
    - It may buffer and flush on `close()`.
    """

    def add(self, decoded: DecodedLog) -> List[Path]:
        """
        Add one decoded log.

        Returns
        -------
        List[Path]
            Files written or rewritten because of this log (may be empty).
        """
        ...

    def close(self) -> Path | None:
        """
        Flush and finalize any remaining buffered rows.

        Returns
        -------
        Path | None
            Identifier of the last written file, or None if nothing was written.
        """
        ...
