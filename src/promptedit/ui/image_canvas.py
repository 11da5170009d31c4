from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Optional, Tuple

from PIL import Image, ImageTk


def fit_size(img_w: int, img_h: int, box_w: int, box_h: int) -> Tuple[int, int]:
    """Largest size with the image's aspect ratio that fits inside the box."""
    if img_w <= 0 or img_h <= 0 or box_w <= 2 or box_h <= 2:
        return (1, 1)
    scale = min(box_w / img_w, box_h / img_h)
    new_w = max(1, int(img_w * scale))
    new_h = max(1, int(img_h * scale))
    return new_w, new_h


class ImageCanvas(ttk.Frame):
    """A resizable canvas that shows a PIL image scaled to fit, or a centred message."""

    def __init__(self, master, *, placeholder: str = "No image loaded", bg: str = "#1f2430"):
        super().__init__(master)
        self._canvas = tk.Canvas(self, highlightthickness=0, bg=bg)
        self._canvas.pack(fill="both", expand=True)

        self._photo: Optional[ImageTk.PhotoImage] = None
        self._pil: Optional[Image.Image] = None
        self._placeholder = placeholder
        self._message: Optional[str] = None

        self._canvas.bind("<Configure>", self._on_resize)

        self._text_id = self._canvas.create_text(
            0, 0,
            anchor="center",
            justify="center",
            text=placeholder,
            fill="#9aa0ac",
            font=("TkDefaultFont", 11),
        )

    def set_image(self, pil: Optional[Image.Image]) -> None:
        self._pil = pil
        self._message = None
        self._redraw()

    def show_message(self, text: str) -> None:
        """Hide any image and show ``text`` (e.g. while a request is running)."""
        self._pil = None
        self._message = text
        self._redraw()

    def clear(self) -> None:
        self.set_image(None)

    def _on_resize(self, _evt) -> None:
        self._redraw()

    def _redraw(self) -> None:
        self._canvas.delete("img")
        w = max(1, self._canvas.winfo_width())
        h = max(1, self._canvas.winfo_height())

        if self._pil is None:
            self._photo = None
            self._canvas.coords(self._text_id, w // 2, h // 2)
            self._canvas.itemconfigure(
                self._text_id,
                text=self._message or self._placeholder,
                width=max(1, w - 20),
                state="normal",
            )
            return

        self._canvas.itemconfigure(self._text_id, state="hidden")

        pil = self._pil
        new_w, new_h = fit_size(pil.width, pil.height, w, h)
        resized = pil.resize((new_w, new_h), Image.LANCZOS)

        self._photo = ImageTk.PhotoImage(resized)
        x = (w - new_w) // 2
        y = (h - new_h) // 2
        self._canvas.create_image(x, y, anchor="nw", image=self._photo, tags=("img",))
