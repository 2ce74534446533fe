"""PySide6 pieces of the desktop host."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import QCoreApplication, QEvent, QObject, Qt, QTimer
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QWidget

from ..bridge import ChannelBridge
from ..log import logger
from ..persistence import HostStore
from ..platform import linkshelf_file
from .host import WINDOW_WIDTH, DesktopHost

HOST_STORE_FILENAME = "host-store.json"
RESIZE_SAVE_DELAY_MS = 80


class QtWindowAdapter:
    """Wraps a top-level ``QWidget`` for :class:`~.host.DesktopHost`."""

    def __init__(self, widget: QWidget) -> None:
        self._widget = widget

    def content_height(self) -> int:
        return self._widget.height()

    def set_content_size(self, width: int, height: int) -> None:
        self._widget.resize(width, height)

    def is_always_on_top(self) -> bool:
        flags = self._widget.windowFlags()
        return bool(flags & Qt.WindowType.WindowStaysOnTopHint)

    def set_always_on_top(self, value: bool) -> None:
        visible = self._widget.isVisible()
        self._widget.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, value)
        # Changing window flags hides the widget.
        if visible:
            self._widget.show()

    def center(self) -> None:
        screen = self._widget.screen()
        if screen is None:
            logger.debug("no screen to centre the window on")
            return
        frame = self._widget.frameGeometry()
        frame.moveCenter(screen.availableGeometry().center())
        self._widget.move(frame.topLeft())
        self._widget.activateWindow()


class ResizeRecorder(QObject):
    """Saves the window height once the user stops resizing.

    Every resize restarts a short single-shot timer; only the last size of a
    drag reaches :meth:`~.host.DesktopHost.window_resized`.
    """

    def __init__(self, widget: QWidget, host: DesktopHost) -> None:
        super().__init__(widget)
        self._widget = widget
        self._host = host
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(RESIZE_SAVE_DELAY_MS)
        self._timer.timeout.connect(self._save)
        widget.installEventFilter(self)

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802
        if watched is self._widget and event.type() == QEvent.Type.Resize:
            self._timer.start()
        return super().eventFilter(watched, event)

    def _save(self) -> None:
        self._host.window_resized(self._widget.height())


def qt_clipboard_write(text: str) -> None:
    """Put *text* on the system clipboard via Qt."""
    QGuiApplication.clipboard().setText(text)


def qt_quit() -> None:
    QCoreApplication.quit()


def create_host(
    widget: QWidget,
    bridge: ChannelBridge,
    store_path: Path | None = None,
) -> DesktopHost:
    """Wire a Qt window to *bridge*.

    Applies the stored height and pin state to *widget*, centres it, and
    registers every host handler on the bridge. User resizes are saved to
    the host store from then on.
    """
    store = HostStore(store_path or linkshelf_file(HOST_STORE_FILENAME))
    window = QtWindowAdapter(widget)
    host = DesktopHost(store, qt_clipboard_write, qt_quit, window=window)
    window.set_content_size(WINDOW_WIDTH, host.initial_height())
    window.set_always_on_top(host.initial_always_on_top())
    window.center()
    ResizeRecorder(widget, host)
    host.attach(bridge)
    return host
