from __future__ import annotations

import tkinter as tk
from fractions import Fraction
from typing import Callable

from .bits import BitRole, bit_roles, bit_weight, to_bits
from .datatypes import QFormat

BIT_FONT = ("DejaVu Sans Mono", 15, "bold")
BIT_INDEX_FONT = ("DejaVu Sans Mono", 9)
CAPTION_FONT = ("DejaVu Sans", 11)
TOOLTIP_FONT = ("DejaVu Sans", 12)

PADDING = 12
BOX_TOP = 42
BOX_HEIGHT = 44
BOX_GAP = 6
MIN_BOX_WIDTH = 22
MAX_BOX_WIDTH = 48
CANVAS_HEIGHT = 120

ROLE_FILL = {
    BitRole.SIGN: "#fde7c2",
    BitRole.INTEGER: "#dcebfd",
    BitRole.FRACTION: "#e9e0fb",
}
HOVER_FILL = "#e5e7eb"


class HoverExplain:
    def __init__(self, widget: tk.Widget) -> None:
        self.widget = widget
        self._tooltip: tk.Toplevel | None = None
        self._label: tk.Label | None = None

    def show(self, text: str, x_root: int, y_root: int) -> None:
        if not text:
            self.hide()
            return
        if self._tooltip is None:
            self._tooltip = tk.Toplevel(self.widget)
            self._tooltip.overrideredirect(True)
            self._tooltip.attributes("-topmost", True)
            self._label = tk.Label(
                self._tooltip,
                bg="#fffdeb",
                fg="#1f2d3d",
                justify="left",
                padx=8,
                pady=6,
                relief="solid",
                bd=1,
                font=TOOLTIP_FONT,
            )
            self._label.pack()
        if self._label is not None:
            self._label.configure(text=text)
        self._tooltip.geometry(f"+{x_root + 16}+{y_root + 16}")

    def hide(self) -> None:
        if self._tooltip is not None:
            self._tooltip.destroy()
            self._tooltip = None
            self._label = None


class BitCanvas(tk.Canvas):
    """One clickable box per bit, MSB (index 0) on the left."""

    def __init__(
        self,
        parent: tk.Widget,
        on_toggle: Callable[[int], None] | None = None,
    ) -> None:
        super().__init__(
            parent,
            bg="#ffffff",
            bd=1,
            relief="solid",
            highlightthickness=0,
            height=CANVAS_HEIGHT,
        )
        self._on_toggle = on_toggle
        self._fmt: QFormat | None = None
        self._bit_text = ""
        self._hover_index: int | None = None
        self._render_cache: tuple[QFormat, str, int | None, int] | None = None
        self._tooltip = HoverExplain(self)

        self.bind("<Configure>", lambda _e: self._redraw(), add=True)
        self.bind("<Motion>", self._on_motion, add=True)
        self.bind("<Leave>", self._on_leave, add=True)
        self.bind("<Button-1>", self._on_click, add=True)

    @staticmethod
    def _box_width(canvas_width: float, bit_count: int) -> float:
        if bit_count <= 0:
            return MAX_BOX_WIDTH
        fitted = (canvas_width - PADDING * 2) / bit_count - 4
        return max(MIN_BOX_WIDTH, min(MAX_BOX_WIDTH, fitted))

    @staticmethod
    def _hit_index(x: float, y: float, canvas_width: float, bit_count: int) -> int | None:
        if bit_count <= 0 or y < BOX_TOP or y > BOX_TOP + BOX_HEIGHT:
            return None
        box_width = BitCanvas._box_width(canvas_width, bit_count)
        stride = box_width + BOX_GAP
        idx = int((x - PADDING) // stride)
        if idx < 0 or idx >= bit_count:
            return None
        x0 = PADDING + idx * stride
        if x < x0 or x > x0 + box_width:
            return None
        return idx

    @staticmethod
    def _caption(fmt: QFormat) -> str:
        mode = "two's complement" if fmt.signed else "unsigned"
        return f"Total {fmt.total_bits} bits | {mode} | fraction bits: {fmt.n}"

    @staticmethod
    def _hover_text(fmt: QFormat, index: int, bit: str) -> str:
        role = bit_roles(fmt)[index]
        weight = bit_weight(fmt, index)
        return (
            f"Bit {index} ({role.value}) = {bit}\n"
            f"Weight: {_format_weight(weight)}\n"
            "Click to toggle."
        )

    def render(self, fmt: QFormat, scaled: int) -> None:
        self._fmt = fmt
        self._bit_text = to_bits(scaled, fmt)
        self._redraw()

    def clear(self) -> None:
        self._fmt = None
        self._bit_text = ""
        self._render_cache = None
        self._tooltip.hide()
        self.delete("all")

    def _redraw(self) -> None:
        if self._fmt is None:
            return
        width = self.winfo_width()
        render_key = (self._fmt, self._bit_text, self._hover_index, width)
        if self._render_cache == render_key:
            return
        self._render_cache = render_key

        fmt = self._fmt
        bit_count = fmt.total_bits
        roles = bit_roles(fmt)
        box_width = self._box_width(width, bit_count)
        self.delete("all")

        self.create_text(
            PADDING, 10, anchor="nw", text="Click a box to toggle the bit",
            fill="#6c7a89", font=CAPTION_FONT,
        )
        self.create_text(
            PADDING, 24, anchor="nw", text=self._caption(fmt),
            fill="#6c7a89", font=CAPTION_FONT,
        )

        for idx, bit in enumerate(self._bit_text):
            x0 = PADDING + idx * (box_width + BOX_GAP)
            x1 = x0 + box_width
            fill = HOVER_FILL if idx == self._hover_index else ROLE_FILL[roles[idx]]
            self.create_rectangle(x0, BOX_TOP, x1, BOX_TOP + BOX_HEIGHT, fill=fill, outline="#9ca3af")
            self.create_text(
                (x0 + x1) / 2, BOX_TOP + BOX_HEIGHT / 2, text=bit, font=BIT_FONT, fill="#1f2d3d",
            )
            self.create_text(
                (x0 + x1) / 2, BOX_TOP + BOX_HEIGHT + 10, text=str(idx),
                font=BIT_INDEX_FONT, fill="#6c7a89",
            )
            if fmt.n > 0 and idx == bit_count - fmt.n - 1:
                marker_x = x1 + BOX_GAP / 2
                self.create_line(
                    marker_x, BOX_TOP, marker_x, BOX_TOP + BOX_HEIGHT,
                    dash=(4, 4), fill="#3b82f6",
                )

        total_width = PADDING * 2 + bit_count * (box_width + BOX_GAP)
        self.configure(scrollregion=(0, 0, total_width, CANVAS_HEIGHT))

    def _on_motion(self, event: tk.Event) -> None:
        if self._fmt is None:
            return
        idx = self._hit_index(self.canvasx(event.x), event.y, self.winfo_width(), self._fmt.total_bits)
        if idx != self._hover_index:
            self._hover_index = idx
            self._redraw()
        if idx is None:
            self._tooltip.hide()
        else:
            self._tooltip.show(
                self._hover_text(self._fmt, idx, self._bit_text[idx]), event.x_root, event.y_root
            )

    def _on_leave(self, _event: tk.Event) -> None:
        self._tooltip.hide()
        if self._hover_index is not None:
            self._hover_index = None
            self._redraw()

    def _on_click(self, event: tk.Event) -> None:
        if self._fmt is None or self._on_toggle is None:
            return
        idx = self._hit_index(self.canvasx(event.x), event.y, self.winfo_width(), self._fmt.total_bits)
        if idx is not None:
            self._on_toggle(idx)

    def destroy(self) -> None:
        self._tooltip.hide()
        super().destroy()


def _format_weight(weight: Fraction) -> str:
    if weight.denominator == 1:
        return str(weight.numerator)
    return f"{'-' if weight < 0 else ''}2^-{weight.denominator.bit_length() - 1}"
