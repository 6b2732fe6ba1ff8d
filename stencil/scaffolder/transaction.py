"""All-or-nothing application of a staged tree.

A :class:`Transaction` records an undo operation for every directory it
creates and every file it writes.  It is finalised exactly once:

* ``commit()`` discards the undo log; closing a committed transaction does
  nothing.
* ``cancel()`` keeps the undo log; closing a cancelled transaction replays it
  in reverse (most recent mutation first).
* Closing a transaction that is still active cancels it first.

Use it as a context manager so that any exception unwinding through the
``with`` block rolls back everything already written::

    with Transaction() as trx:
        apply_vfs(vfs, destination, trx)
        trx.commit()
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from stencil.errors import FileOperation, FileOperationError, TransactionError
from stencil.scaffolder.vfs import VirtualFileSystem
from stencil.utils import print_created

logger = logging.getLogger(__name__)


class TransactionState(str, Enum):
    """Finalisation state of a transaction."""
    ACTIVE = "active"
    COMMITTED = "committed"
    CANCELED = "canceled"


class RollbackKind(str, Enum):
    """The undo action for a recorded mutation."""
    REMOVE_FILE = "remove_file"
    REMOVE_DIR = "remove_dir"


@dataclass(frozen=True)
class RollbackOperation:
    """A single undo step."""

    kind: RollbackKind
    path: Path

    @classmethod
    def remove_file(cls, path: str | Path) -> "RollbackOperation":
        return cls(RollbackKind.REMOVE_FILE, Path(path))

    @classmethod
    def remove_dir(cls, path: str | Path) -> "RollbackOperation":
        return cls(RollbackKind.REMOVE_DIR, Path(path))


class Transaction:
    """Undo log plus a finalize-once state machine."""

    def __init__(self) -> None:
        self.state = TransactionState.ACTIVE
        self._operations: list[RollbackOperation] = []
        self._closed = False

    # -- Context manager ------------------------------------------------------

    def __enter__(self) -> "Transaction":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -- Introspection --------------------------------------------------------

    @property
    def operations(self) -> list[RollbackOperation]:
        """A copy of the recorded undo operations, oldest first."""
        return list(self._operations)

    @property
    def is_active(self) -> bool:
        return self.state is TransactionState.ACTIVE

    # -- Recording ------------------------------------------------------------

    def add_operation(self, operation: RollbackOperation) -> None:
        self._require_active("record an operation")
        self._operations.append(operation)

    def create_directory(self, path: str | Path) -> list[Path]:
        """Create *path* and any missing ancestors.

        Only directories that did not exist before are recorded, shallowest
        first, so rollback never removes a pre-existing directory.

        Returns:
            The directories actually created, shallowest first.

        Raises:
            FileOperationError: If a directory cannot be created.
        """
        self._require_active("create a directory")
        target = Path(path)
        missing: list[Path] = []
        for candidate in (target, *target.parents):
            if candidate.is_dir():
                break
            missing.append(candidate)

        created: list[Path] = []
        for directory in reversed(missing):
            try:
                directory.mkdir()
            except OSError as exc:
                raise FileOperationError(FileOperation.MKDIR, directory, exc) from exc
            self._operations.append(RollbackOperation.remove_dir(directory))
            created.append(directory)
        return created

    def write_file(self, path: str | Path, data: bytes) -> Path:
        """Create a new file at *path* holding *data*.

        The file must not already exist.

        Raises:
            FileOperationError: If the file exists or cannot be written.
        """
        self._require_active("write a file")
        target = Path(path)
        try:
            handle = target.open("xb")
        except OSError as exc:
            raise FileOperationError(FileOperation.WRITE, target, exc) from exc
        # Recorded as soon as the file exists so a failed write is undone too.
        self._operations.append(RollbackOperation.remove_file(target))
        with handle:
            try:
                handle.write(data)
            except OSError as exc:
                raise FileOperationError(FileOperation.WRITE, target, exc) from exc
        return target

    # -- Finalisation ---------------------------------------------------------

    def commit(self) -> None:
        """Mark the transaction successful and discard the undo log."""
        self._require_active("commit")
        self._operations.clear()
        self.state = TransactionState.COMMITTED
        logger.debug("Transaction committed")

    def cancel(self) -> None:
        """Mark the transaction aborted; the undo log runs on close."""
        self._require_active("cancel")
        self.state = TransactionState.CANCELED
        logger.debug("Transaction canceled with %d operation(s) to undo", len(self._operations))

    def close(self) -> None:
        """Finalise the transaction, rolling back unless it was committed."""
        if self._closed:
            return
        self._closed = True
        if self.state is TransactionState.ACTIVE:
            self.cancel()
        if self.state is TransactionState.CANCELED:
            self._rollback()

    def _rollback(self) -> None:
        if self._operations:
            logger.debug("Rolling back %d operation(s)", len(self._operations))
        while self._operations:
            operation = self._operations.pop()
            try:
                if operation.kind is RollbackKind.REMOVE_FILE:
                    logger.debug("Removing file: %s", operation.path)
                    operation.path.unlink()
                else:
                    logger.debug("Removing directory: %s", operation.path)
                    shutil.rmtree(operation.path)
            except FileNotFoundError:
                continue
            except OSError as exc:
                logger.warning("Rollback failed for %s: %s", operation.path, exc)

    def _require_active(self, action: str) -> None:
        if self.state is not TransactionState.ACTIVE:
            raise TransactionError(f"Cannot {action}: transaction is already {self.state.value}")


# ---------------------------------------------------------------------------
# Applying a staged tree
# ---------------------------------------------------------------------------

def apply_vfs(vfs: VirtualFileSystem, destination_root: str | Path, trx: Transaction) -> list[Path]:
    """Materialise *vfs* under *destination_root* inside *trx*.

    Every directory entry is created before any file is written; a file's
    parent is created on demand when it was not staged as a directory.

    Returns:
        Every path created, in creation order.

    Raises:
        FileOperationError: On the first failed mutation.  The caller's
            transaction is left active so closing it rolls everything back.
    """
    root = Path(destination_root)
    created: list[Path] = []

    for entry in vfs.directories():
        for directory in trx.create_directory(root / entry.destination):
            print_created(directory)
            created.append(directory)

    for entry in vfs.files():
        target = root / entry.destination
        for directory in trx.create_directory(target.parent):
            print_created(directory)
            created.append(directory)
        trx.write_file(target, entry.data)
        print_created(target)
        created.append(target)

    return created
