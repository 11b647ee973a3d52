"""Singleton info-surface session with restore-after-restart.

At most one :class:`Session` is live per manager. Identity (category, title)
is always re-derived from the target folder; only the folder path itself is
persisted.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
import itertools
import logging
import os
from pathlib import Path

from . import config
from .address import display_label
from .errors import FilesystemError, IdentityCollisionError, PartialRenameError
from .fs import safe_exists
from .identity import AppFolder, classify
from .kinds import DEFAULT_REGISTRY, INFO_KIND
from .mutations import delete_app, update_app_info
from .navigation import MESSAGE_ERROR, MESSAGE_INFO, NavigationState

logger = logging.getLogger(__name__)

SURFACE_VIEW_TYPE = "appnav.info"
INFO_LABEL = DEFAULT_REGISTRY.descriptor(INFO_KIND).label


@dataclass(eq=False)
class Session:
    """One info surface bound to an app folder."""

    target_folder: Path
    surface_id: str
    folder: AppFolder
    visible: bool = True
    disposed: bool = False

    @property
    def title(self) -> str:
        return display_label(self.folder.title, INFO_LABEL)


def _ignore(*_args: object) -> None:
    return None


@dataclass(frozen=True)
class SessionCallbacks:
    """Host hooks for the (out-of-scope) info surface renderer."""

    render: Callable[[Session], None] = _ignore
    reveal: Callable[[Session], None] = _ignore
    close: Callable[[Session], None] = _ignore
    show_message: Callable[[str, str], None] = _ignore


class SessionManager:
    """Own the single live info session and keep its persisted record in sync."""

    def __init__(
        self,
        callbacks: SessionCallbacks = SessionCallbacks(),
        navigation: NavigationState | None = None,
        persist: bool = True,
    ) -> None:
        self.callbacks = callbacks
        self.navigation = navigation
        self.persist = persist
        self.session: Session | None = None
        self._surface_ids = itertools.count(1)

    def _notify_active(self, session: Session) -> None:
        if self.navigation is not None:
            self.navigation.on_info_surface_active(session.target_folder)

    def _create(self, target_folder: Path) -> Session:
        session = Session(
            target_folder=target_folder,
            surface_id=f"{SURFACE_VIEW_TYPE}-{next(self._surface_ids)}",
            folder=classify(target_folder),
        )
        self.session = session
        if self.persist:
            config.save_session_record(target_folder)
        self.callbacks.render(session)
        self._notify_active(session)
        return session

    def open(self, target_folder: str | os.PathLike[str]) -> Session:
        """Show the info surface for ``target_folder``.

        A visible live session for the same folder is refocused and returned
        unchanged; any other live session is disposed before a new one is made.
        """
        target = Path(target_folder)
        live = self.session
        if live is not None and live.target_folder == target and live.visible:
            self.callbacks.reveal(live)
            self._notify_active(live)
            return live
        if live is not None:
            self.dispose(live)
        return self._create(target)

    def revive(self, persisted_target_folder: str | os.PathLike[str]) -> Session:
        """Recreate a session from its persisted target folder."""
        if self.session is not None:
            self.dispose(self.session)
        return self._create(Path(persisted_target_folder))

    def revive_persisted(self) -> Session | None:
        """Revive from the config record, ``None`` when nothing was persisted."""
        target = config.load_session_record()
        if target is None:
            return None
        return self.revive(target)

    def dispose(self, session: Session) -> None:
        """Dispose ``session``; disposing twice is a no-op."""
        if session.disposed:
            return
        session.disposed = True
        session.visible = False
        if self.session is session:
            self.session = None
            if self.persist:
                config.clear_session_record()
        self.callbacks.close(session)

    def set_visible(self, session: Session, visible: bool) -> None:
        """Record a host view-state change for ``session``."""
        if session.disposed:
            return
        session.visible = visible
        if visible:
            self._notify_active(session)

    def submit_update(self, data: Mapping[str, object]) -> Path | None:
        """Apply an info-form payload to the live session's folder.

        Returns the folder path after the update, ``None`` on failure. Any
        namespace rename that reached the disk disposes the session and
        re-points navigation, even when a later write failed.
        """
        session = self.session
        if session is None:
            return None
        try:
            update = update_app_info(session.target_folder, data)
        except IdentityCollisionError as exc:
            self.callbacks.show_message(MESSAGE_ERROR, str(exc))
            return None
        except PartialRenameError as exc:
            logger.warning("app info write failed after rename to %s: %s", exc.path, exc)
            self.callbacks.show_message(MESSAGE_ERROR, f"Failed to save app info: {exc}")
            self.dispose(session)
            if self.navigation is not None:
                self.navigation.on_folder_renamed(exc.previous_path, exc.path)
            return None
        except FilesystemError as exc:
            logger.warning("app info update failed for %s: %s", session.target_folder, exc)
            self.callbacks.show_message(MESSAGE_ERROR, f"Failed to save app info: {exc}")
            if not safe_exists(session.target_folder):
                self.dispose(session)
            return None

        self.callbacks.show_message(MESSAGE_INFO, "App info updated")
        if update.renamed:
            self.dispose(session)
            if self.navigation is not None:
                self.navigation.on_folder_renamed(update.previous_path, update.path)
        return update.path

    def delete_target(self) -> bool:
        """Delete the live session's app folder and dispose the session."""
        session = self.session
        if session is None:
            return False
        target = session.target_folder
        try:
            delete_app(target)
        except FilesystemError as exc:
            self.callbacks.show_message(MESSAGE_ERROR, f"Failed to delete app: {exc}")
            if safe_exists(target):
                return False
        else:
            self.callbacks.show_message(MESSAGE_INFO, f"Deleted '{target.name}'")
        self.dispose(session)
        navigation = self.navigation
        if navigation is not None:
            folder = navigation.context.active_folder
            if folder is not None and folder.path == target:
                navigation.reset()
        return True


__all__ = [
    "SURFACE_VIEW_TYPE",
    "Session",
    "SessionCallbacks",
    "SessionManager",
]
