"""
Postcard Scan Extractor - Tk window
License: GPLv3
"""

import logging
import tkinter as tk
from pathlib import Path
from typing import Optional

import cv2
from PIL import Image, ImageTk

from . import APP_NAME
from .commands import Command, command_for_key, dispatch
from .session import ExtractorSession

logger = logging.getLogger(__name__)


class PostcardExtractorApp:
    def __init__(self, root: tk.Tk, session: ExtractorSession):
        self.root = root
        self.session = session

        self.tk_img: Optional[ImageTk.PhotoImage] = None
        self._render_after_id = None
        self._canvas_size = (0, 0)

        self._build_ui()
        self._bind_events()
        self._render()

    # ---------- UI ----------
    def _build_ui(self):
        self.root.title(APP_NAME)
        self.root.resizable(False, False)
        self.canvas = tk.Canvas(self.root, bg="#646464", highlightthickness=0, cursor="none")
        self.canvas.pack(fill="both", expand=True)
        self.image_item = self.canvas.create_image(0, 0, anchor="nw")
        self.canvas.focus_set()

    def _bind_events(self):
        self.canvas.bind("<Motion>", self.on_mouse_move)
        self.canvas.bind("<ButtonPress-1>", lambda e: self._run(Command.COMMIT_CORNER))
        self.canvas.bind("<ButtonPress-3>", self.on_right_click)
        self.root.bind("<Key>", self.on_key)
        self.root.protocol("WM_DELETE_WINDOW", lambda: self._run(Command.QUIT))

    # ---------- events ----------
    def on_mouse_move(self, event):
        x = float(self.canvas.canvasx(event.x))
        y = float(self.canvas.canvasy(event.y))
        self._run(Command.MOVE_CURSOR, (x, y))

    def on_right_click(self, event):
        self.on_mouse_move(event)
        self._run(Command.CLEAR_CORNERS)

    def on_key(self, event):
        cmd = command_for_key(event.keysym)
        if cmd is None:
            return
        self._run(cmd)
        return "break"

    def _run(self, cmd: Command, pos=None):
        if cmd is Command.QUIT:
            self.root.destroy()
        dispatch(self.session, cmd, pos)
        self._schedule_render()

    # ---------- render ----------
    def _schedule_render(self):
        if self._render_after_id is not None:
            self.root.after_cancel(self._render_after_id)
        self._render_after_id = self.root.after(self.session.cfg.redraw_delay_ms, self._render)

    def _render(self):
        self._render_after_id = None
        frame = self.session.frame
        if frame is None:
            return
        h, w = frame.shape[:2]
        if (w, h) != self._canvas_size:
            self.canvas.config(width=w, height=h)
            self._canvas_size = (w, h)

        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        self.tk_img = ImageTk.PhotoImage(Image.fromarray(rgb))
        self.canvas.itemconfigure(self.image_item, image=self.tk_img)
        self._update_title()

    def _update_title(self):
        s = self.session
        if not s.playlist:
            self.root.title(APP_NAME)
            return
        name = Path(s.current_path()).name
        self.root.title(
            f"{APP_NAME} - {name} ({s.idx + 1}/{len(s.playlist)})"
            f"  zoom: {s.zoom_level:g}  corners: {len(s.collector)}  next postcard: #{s.postcard_idx}"
        )


def run(session: ExtractorSession) -> None:
    root = tk.Tk()
    _ = PostcardExtractorApp(root, session)
    logger.info("Application initialized")
    root.mainloop()
