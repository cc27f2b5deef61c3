"""
Sync session: the control layer between the UI and the sync core.

One session per open document. It owns the sync context and wires the
extractor, generator, reconciliation engine, scheduler and startup
recovery to the host's scene, the UI notifier and the client store.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable
from typing import Any, Protocol

from .config import TokenSyncConfig
from .context import SyncContext
from .errors import UnknownCommandError
from .extract import Extractor
from .generate import DocumentationGenerator
from .ir.document import DocumentChange
from .messages import (
    AllDataMessage,
    CloseCommand,
    FullData,
    GenerateDocsCommand,
    GenerateVariableDocsCommand,
    LiveSyncStatusMessage,
    Notifier,
    ResizeCommand,
    StorageCommand,
    StorageReplyMessage,
    SyncCommand,
    parse_command,
)
from .reconcile import ReconciliationEngine
from .recovery import RecoveryReport, StartupRecovery
from .render import OutlineRenderer, Renderer
from .scene import Scene
from .scheduler import SyncScheduler
from .source import SourceDocument
from .storage import STORAGE_ROUTES, KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)


class HostUI(Protocol):
    """The window hosting the UI."""

    def resize(self, width: int, height: int) -> None: ...

    def close(self) -> None: ...


class HeadlessUI:
    """HostUI for running without a window; remembers what it was asked."""

    def __init__(self) -> None:
        self.size: tuple[int, int] | None = None
        self.closed = False

    def resize(self, width: int, height: int) -> None:
        self.size = (width, height)

    def close(self) -> None:
        self.closed = True


class SyncSession:
    def __init__(
        self,
        source: SourceDocument,
        scene: Scene,
        notifier: Notifier,
        *,
        renderer: Renderer | None = None,
        store: KeyValueStore | None = None,
        host: HostUI | None = None,
        config: TokenSyncConfig | None = None,
    ) -> None:
        self.config = config or TokenSyncConfig()
        self.context = SyncContext()
        self.notifier = notifier
        self.store = store or MemoryStore()
        self.host = host or HeadlessUI()

        self.extractor = Extractor(source)
        renderer = renderer or OutlineRenderer(scene)
        self.generator = DocumentationGenerator(self.context, scene, renderer, notifier)
        self.engine = ReconciliationEngine(
            self.context, source, scene, renderer, notifier, extractor=self.extractor
        )
        self.scheduler = SyncScheduler(
            self.context,
            self.engine,
            debounce_seconds=self.config.sync.debounce_seconds,
            poll_interval_seconds=self.config.sync.poll_interval_seconds,
        )
        self.recovery = StartupRecovery(self.context, scene, self.extractor)

    def send_all_data(self) -> None:
        payload = FullData(
            styles=self.extractor.extract_styles(),
            variables=self.extractor.extract_variables(),
        )
        self.notifier.post(AllDataMessage(payload=payload))

    async def start(self) -> RecoveryReport:
        """Send the full data payload, then re-attach to existing documentation."""
        self.send_all_data()
        report = self.recovery.run()
        if report.frames:
            self.notifier.post(LiveSyncStatusMessage(active=True))
        if report.variable_rows:
            self.scheduler.start_polling()
        return report

    def on_document_change(self, changes: Iterable[DocumentChange]) -> bool:
        return self.scheduler.handle_document_change(changes)

    async def handle_message(self, raw: dict[str, Any]) -> None:
        """Dispatch one inbound UI message. Unknown messages are logged and ignored."""
        try:
            command = parse_command(raw)
        except UnknownCommandError as e:
            logger.warning("Ignoring UI message: %s", e.message)
            return

        match command:
            case SyncCommand():
                self.send_all_data()
            case CloseCommand():
                await self.shutdown()
                self.host.close()
            case GenerateDocsCommand():
                await self.generator.generate_style_docs(command.payload.groups)
            case GenerateVariableDocsCommand():
                payload = command.payload
                await self.generator.generate_variable_docs(
                    payload.modes,
                    payload.groups,
                    payload.collection_name or self.config.docs.collection_name,
                )
                self.scheduler.start_polling()
            case ResizeCommand():
                self.host.resize(command.width, command.height)
            case StorageCommand():
                await self._handle_storage(command)

    async def _handle_storage(self, command: StorageCommand) -> None:
        route = STORAGE_ROUTES[command.type]
        reply: StorageReplyMessage | None = None
        match route.action:
            case "get":
                value = await self.store.get(route.key)
                if value is None:
                    value = copy.copy(route.default)
                if route.reply:
                    reply = StorageReplyMessage(type=route.reply, payload=value)
            case "set":
                await self.store.set(route.key, command.payload)
                if route.reply:
                    reply = StorageReplyMessage(type=route.reply, include_payload=False)
            case "delete":
                await self.store.delete(route.key)
                if route.reply:
                    reply = StorageReplyMessage(type=route.reply, include_payload=False)
        if reply is not None:
            self.notifier.post(reply)

    async def shutdown(self) -> None:
        """Stop both sync loops and drop all sync state."""
        await self.scheduler.shutdown()
        self.context.teardown()
        logger.info("Session closed")
