from __future__ import annotations

import logging
import tkinter as tk
from tkinter import filedialog, messagebox, ttk
from typing import Optional

from promptedit.app.controller import EditController
from promptedit.app.image_io import load_preview, preview_from_data_uri, save_result
from promptedit.app.state import EditorState, WorkflowStatus
from promptedit.core.config import EditorSettings, configure_logging
from promptedit.core.models import DEFAULT_PROMPT, SelectedImage
from promptedit.services.gemini_client import GeminiImageEditor
from promptedit.ui.async_runner import AsyncRunner
from promptedit.ui.image_canvas import ImageCanvas

logger = logging.getLogger(__name__)

IMAGE_FILETYPES = [
    ("Image files", "*.jpg *.jpeg *.png *.gif *.bmp *.webp *.tif *.tiff *.heic *.heif"),
    ("All files", "*.*"),
]


class PromptEditApp(ttk.Frame):
    """Main window: upload an image, describe the edit, generate, save."""

    def __init__(self, master: tk.Tk, controller: EditController, runner: AsyncRunner):
        super().__init__(master)
        self.master = master
        self.controller = controller
        self.runner = runner

        # What is currently drawn, so re-renders skip decoding unchanged images
        self._shown_image: Optional[SelectedImage] = None
        self._shown_result: Optional[str] = None
        self._busy = False

        self._build_style()
        self._build_layout()
        self._bind_shortcuts()

        self.controller.subscribe(self._on_state)
        self.render(self.controller.state)

    # ---------- UI construction ----------

    def _build_style(self) -> None:
        style = ttk.Style(self.master)
        if "clam" in style.theme_names():
            style.theme_use("clam")
        style.configure("Alert.TLabel", foreground="#b42318")

    def _build_layout(self) -> None:
        self.pack(fill="both", expand=True)

        # Top toolbar
        toolbar = ttk.Frame(self, padding=(10, 8))
        toolbar.pack(side="top", fill="x")

        self.btn_upload = ttk.Button(toolbar, text="Upload", command=self.on_upload)
        self.btn_generate = ttk.Button(toolbar, text="Generate", command=self.on_generate)
        self.btn_save = ttk.Button(toolbar, text="Save result", command=self.on_save)
        self.btn_reset = ttk.Button(toolbar, text="Reset", command=self.on_reset)

        self.btn_upload.pack(side="left")
        ttk.Separator(toolbar, orient="vertical").pack(side="left", fill="y", padx=8)
        self.btn_generate.pack(side="left")
        self.btn_save.pack(side="left", padx=(6, 0))
        self.btn_reset.pack(side="left", padx=(12, 0))

        self.progress = ttk.Progressbar(toolbar, mode="indeterminate", length=120)
        self.progress.pack(side="right")

        # Status bar
        status = ttk.Frame(self, padding=(10, 6))
        status.pack(side="bottom", fill="x")

        self.status_var = tk.StringVar(value="Ready.")
        ttk.Label(status, textvariable=self.status_var).pack(side="left")

        # Main split area
        main = ttk.PanedWindow(self, orient="horizontal")
        main.pack(side="top", fill="both", expand=True, padx=10, pady=(0, 10))

        # Left pane: original + prompt + alert
        left = ttk.Frame(main)
        main.add(left, weight=1)

        lf_orig = ttk.LabelFrame(left, text="Original Image", padding=8)
        lf_orig.pack(fill="both", expand=True)

        self.original_canvas = ImageCanvas(lf_orig, placeholder="Click Upload to choose an image")
        self.original_canvas.pack(fill="both", expand=True)

        self.original_meta = ttk.Label(lf_orig, text="No file loaded.")
        self.original_meta.pack(side="bottom", anchor="w", pady=(6, 0))

        lf_prompt = ttk.LabelFrame(left, text="Editing Prompt", padding=8)
        lf_prompt.pack(fill="x", pady=(8, 0))

        self.prompt_text = tk.Text(lf_prompt, height=5, wrap="word")
        self.prompt_text.pack(fill="x")
        self.prompt_text.insert("1.0", self.controller.state.prompt)
        self.prompt_text.bind("<KeyRelease>", self._on_prompt_edited)
        self.prompt_text.bind("<<Paste>>", lambda e: self.after_idle(self._on_prompt_edited))

        self.error_var = tk.StringVar(value="")
        self.error_label = ttk.Label(
            left, textvariable=self.error_var, style="Alert.TLabel", wraplength=360, justify="left"
        )
        self.error_label.pack(fill="x", pady=(8, 0))

        # Right pane: result
        right = ttk.Frame(main)
        main.add(right, weight=2)

        lf_result = ttk.LabelFrame(right, text="Edited Image", padding=8)
        lf_result.pack(fill="both", expand=True)

        self.result_canvas = ImageCanvas(lf_result, placeholder="Your AI-edited image will appear here.")
        self.result_canvas.pack(fill="both", expand=True)

    def _bind_shortcuts(self) -> None:
        self.master.bind_all("<Control-o>", lambda e: self.on_upload())
        self.master.bind_all("<Command-o>", lambda e: self.on_upload())

        self.master.bind_all("<Control-Return>", lambda e: self.on_generate())
        self.master.bind_all("<Command-Return>", lambda e: self.on_generate())

        self.master.bind_all("<Control-s>", lambda e: self.on_save())
        self.master.bind_all("<Command-s>", lambda e: self.on_save())

    # ---------- Utilities ----------

    def set_status(self, text: str) -> None:
        self.status_var.set(text)

    def set_busy(self, busy: bool) -> None:
        if busy == self._busy:
            return
        self._busy = busy
        if busy:
            self.progress.start(12)
        else:
            self.progress.stop()

    def _prompt_value(self) -> str:
        return self.prompt_text.get("1.0", "end-1c")

    def _set_prompt_value(self, text: str) -> None:
        self.prompt_text.configure(state="normal")
        self.prompt_text.delete("1.0", "end")
        self.prompt_text.insert("1.0", text)

    def _on_state(self, state: EditorState) -> None:
        # Called on the event-loop thread; hand the snapshot to the Tk thread.
        self.master.after(0, self.render, state)

    def _on_background_error(self, err: BaseException) -> None:
        self.master.after(0, lambda: messagebox.showerror("Unexpected error", str(err) or type(err).__name__))

    # ---------- Rendering ----------

    def render(self, state: EditorState) -> None:
        self._render_original(state)
        self._render_result(state)

        self.btn_generate.configure(text="Generating..." if state.loading else "Generate")
        self.btn_generate.state(["!disabled"] if state.can_generate else ["disabled"])
        self.btn_save.state(["!disabled"] if state.result and not state.loading else ["disabled"])
        self.prompt_text.configure(state="disabled" if state.loading else "normal")

        self.error_var.set(state.error or "")
        self.set_busy(state.loading)

        if state.status is WorkflowStatus.LOADING:
            self.set_status("Generating...")
        elif state.status is WorkflowStatus.ERROR:
            self.set_status("Something went wrong.")
        elif state.result:
            self.set_status("Edit complete. Ready to save.")
        elif state.image is not None:
            self.set_status("Image loaded. Describe your edit and press Generate.")
        else:
            self.set_status("Ready.")

    def _render_original(self, state: EditorState) -> None:
        image = state.image
        if image is self._shown_image:
            return
        self._shown_image = image

        if image is None:
            self.original_canvas.clear()
            self.original_meta.configure(text="No file loaded.")
            return

        raw = image.raw_file
        try:
            pil = load_preview(raw.data)
        except Exception as e:
            logger.info("No preview for %s: %s", raw.name, e)
            self.original_canvas.show_message("Preview not available for this file type.")
            self.original_meta.configure(text=f"File: {raw.name}   Type: {image.media_type}")
            return

        self.original_canvas.set_image(pil)
        self.original_meta.configure(
            text=f"File: {raw.name}   Type: {image.media_type}   Size: {pil.width}x{pil.height}"
        )

    def _render_result(self, state: EditorState) -> None:
        if state.loading:
            self._shown_result = None
            self.result_canvas.show_message("Generating your image...")
            return

        if state.result == self._shown_result and state.result is not None:
            return
        self._shown_result = state.result

        if state.result is None:
            self.result_canvas.clear()
            return

        try:
            self.result_canvas.set_image(preview_from_data_uri(state.result))
        except Exception as e:
            logger.warning("Could not display edited image: %s", e)
            self.result_canvas.show_message("The edited image could not be displayed.")

    # ---------- Actions ----------

    def _on_prompt_edited(self, _evt=None) -> None:
        self.runner.call_soon(self.controller.set_prompt, self._prompt_value())

    def on_upload(self) -> None:
        path = filedialog.askopenfilename(title="Select an image", filetypes=IMAGE_FILETYPES)
        if not path:
            return
        self.set_status("Reading image...")
        self.runner.submit(self.controller.upload(path), on_error=self._on_background_error)

    def on_generate(self) -> None:
        if not self.controller.state.can_generate:
            return
        prompt = self._prompt_value()

        async def generate() -> None:
            self.controller.set_prompt(prompt)
            await self.controller.generate()

        self.runner.submit(generate(), on_error=self._on_background_error)

    def on_save(self) -> None:
        state = self.controller.state
        if not state.result or state.loading:
            return

        path = filedialog.asksaveasfilename(
            title="Save edited image",
            defaultextension=".png",
            initialfile="edited.png",
            filetypes=[("PNG", "*.png"), ("JPEG", "*.jpg *.jpeg"), ("WebP", "*.webp"), ("All files", "*.*")],
        )
        if not path:
            return

        try:
            saved = save_result(state.result, path)
        except (OSError, ValueError) as e:
            messagebox.showerror("Save failed", f"Could not save the edited image.\n\n{e}")
            self.set_status("Save failed.")
            return
        self.set_status(f"Saved: {saved}")

    def on_reset(self) -> None:
        self.runner.call_soon(self.controller.reset)
        self._set_prompt_value(DEFAULT_PROMPT)

    def on_close(self) -> None:
        self.runner.stop()
        self.master.destroy()


def run() -> None:
    settings = EditorSettings.from_env()
    configure_logging(settings.log_level)
    if not settings.api_key:
        logger.warning("GEMINI_API_KEY is not set; Generate will report an error.")

    editor = GeminiImageEditor(settings)
    controller = EditController(editor.edit_image)
    runner = AsyncRunner()

    root = tk.Tk()
    root.title("PromptEdit")
    root.geometry("1200x760")
    root.minsize(900, 600)

    app = PromptEditApp(root, controller, runner)
    root.protocol("WM_DELETE_WINDOW", app.on_close)

    root.mainloop()
