from __future__ import annotations

import argparse
import logging
import signal
import sys
import tkinter as tk
from tkinter import ttk
from typing import Sequence

from .datatypes import (
    MAX_DISPLAY_PRECISION,
    MAX_FORMAT_BITS,
    ConverterConfig,
    InputBase,
    QFormat,
)
from .engine import (
    ConversionResult,
    Status,
    convert,
    describe_format,
    status_message,
    toggle,
)
from .errors import InvalidFormatError, ParseError
from .formatting import format_source_text, group_hex
from .parsing import parse_numeral
from .visualizer import BitCanvas

logger = logging.getLogger(__name__)

UI_FONT = ("DejaVu Sans", 12)
UI_FONT_BOLD = ("DejaVu Sans", 12, "bold")
ENTRY_FONT = ("DejaVu Sans Mono", 18, "bold")
VALUE_FONT = ("DejaVu Sans Mono", 14)

SIGNED_CHOICES = ("signed", "unsigned")
PLACEHOLDER = "-"


def _make_copyable_entry(parent: tk.Widget, variable: tk.StringVar, bg: str) -> tk.Entry:
    entry = tk.Entry(
        parent,
        textvariable=variable,
        relief="flat",
        bd=0,
        highlightthickness=0,
        font=VALUE_FONT,
        fg="#1f2d3d",
        bg=bg,
        readonlybackground=bg,
    )
    entry.configure(state="readonly")
    return entry


class QFormatApp(tk.Tk):
    def __init__(self, config: ConverterConfig | None = None) -> None:
        super().__init__()
        config = config or ConverterConfig()
        self.title("Q Format Fixed-Point Converter")
        self.geometry("1100x620")
        self.minsize(820, 520)
        self.configure(bg="#f5f7fa")

        self._programmatic = False
        self._current: tuple[QFormat, int] | None = None

        self.value_var = tk.StringVar(value=config.value_text)
        self.base_var = tk.StringVar(value=config.input_base.key)
        self.signed_var = tk.StringVar(value=SIGNED_CHOICES[0] if config.signed else SIGNED_CHOICES[1])
        self.m_var = tk.StringVar(value=str(config.m))
        self.n_var = tk.StringVar(value=str(config.n))
        self.precision_var = tk.StringVar(value=str(config.precision))
        self.group_var = tk.BooleanVar(value=config.group_digits)

        self.binary_var = tk.StringVar()
        self.decimal_var = tk.StringVar()
        self.hex_var = tk.StringVar()
        self.pattern_var = tk.StringVar()
        self.format_info_var = tk.StringVar()
        self.status_var = tk.StringVar(value="Type a value to convert in real time.")

        self._build_ui()
        self._wire_events()
        self._install_signal_handlers()
        self._on_change()
        self.after(10, self._focus_value_entry)

    def _build_ui(self) -> None:
        root = tk.Frame(self, bg="#f5f7fa")
        root.pack(fill="both", expand=True, padx=16, pady=14)

        tk.Label(
            root,
            text="Fixed-Point Q Format Converter",
            bg="#f5f7fa",
            fg="#1d2a38",
            font=("DejaVu Sans", 20, "bold"),
        ).pack(anchor="w")
        tk.Label(
            root,
            text="m excludes the sign bit. Inputs are rounded half away from zero to 2^-n and saturated.",
            bg="#f5f7fa",
            fg="#4a6178",
            font=("DejaVu Sans", 11),
        ).pack(anchor="w", pady=(2, 10))

        controls = tk.Frame(root, bg="#f5f7fa")
        controls.pack(fill="x")

        tk.Label(controls, text="Value", bg="#f5f7fa", fg="#22313f", font=UI_FONT_BOLD).pack(side="left")
        self.entry = tk.Entry(
            controls,
            textvariable=self.value_var,
            width=24,
            font=ENTRY_FONT,
            relief="solid",
            bd=1,
            highlightthickness=1,
            highlightbackground="#b8b8b8",
        )
        self.entry.pack(side="left", padx=(8, 16), fill="x", expand=True)
        self._default_bg = self.entry.cget("bg")

        tk.Label(controls, text="Base", bg="#f5f7fa", fg="#22313f", font=UI_FONT_BOLD).pack(side="left")
        ttk.Combobox(
            controls,
            textvariable=self.base_var,
            values=[base.key for base in InputBase],
            width=5,
            state="readonly",
        ).pack(side="left", padx=(6, 12))

        ttk.Combobox(
            controls,
            textvariable=self.signed_var,
            values=list(SIGNED_CHOICES),
            width=9,
            state="readonly",
        ).pack(side="left", padx=(0, 12))

        for label, variable, upper in (
            ("m", self.m_var, MAX_FORMAT_BITS),
            ("n", self.n_var, MAX_FORMAT_BITS),
            ("Precision", self.precision_var, MAX_DISPLAY_PRECISION),
        ):
            tk.Label(controls, text=label, bg="#f5f7fa", fg="#22313f", font=UI_FONT_BOLD).pack(side="left")
            tk.Spinbox(
                controls,
                from_=0,
                to=upper,
                textvariable=variable,
                width=4,
                font=UI_FONT,
            ).pack(side="left", padx=(6, 12))

        tk.Checkbutton(
            controls,
            text="Group by 4",
            variable=self.group_var,
            bg="#f5f7fa",
            font=UI_FONT,
        ).pack(side="left")

        self.bit_canvas = BitCanvas(root, on_toggle=self._on_bit_toggle)
        self.bit_canvas.pack(fill="x", pady=(12, 8))

        summary = tk.Frame(root, bg="#f5f7fa")
        summary.pack(fill="x")
        self.binary_label_var = tk.StringVar(value="Binary:")
        self._build_value_row(summary, self.binary_label_var, self.binary_var)
        self._build_value_row(summary, tk.StringVar(value="Decimal:"), self.decimal_var)
        self._build_value_row(summary, tk.StringVar(value="Hex (pattern):"), self.hex_var)
        self._build_value_row(summary, tk.StringVar(value="Bit pattern:"), self.pattern_var)
        self._build_value_row(summary, tk.StringVar(value="Format:"), self.format_info_var)

        self.status_label = tk.Label(
            root,
            textvariable=self.status_var,
            bg="#f5f7fa",
            fg="#3f5368",
            anchor="w",
            font=UI_FONT,
        )
        self.status_label.pack(fill="x", pady=(8, 0))

    def _build_value_row(
        self,
        parent: tk.Widget,
        label_var: tk.StringVar,
        variable: tk.StringVar,
    ) -> tk.Entry:
        row = tk.Frame(parent, bg="#f5f7fa")
        row.pack(fill="x", pady=1)
        tk.Label(
            row,
            textvariable=label_var,
            width=14,
            anchor="w",
            bg="#f5f7fa",
            fg="#34495e",
            font=UI_FONT_BOLD,
        ).pack(side="left")
        value_entry = _make_copyable_entry(row, variable, bg="#f5f7fa")
        value_entry.pack(side="left", fill="x", expand=True, padx=(2, 0))
        return value_entry

    def _wire_events(self) -> None:
        for var in (
            self.value_var,
            self.base_var,
            self.signed_var,
            self.m_var,
            self.n_var,
            self.precision_var,
            self.group_var,
        ):
            var.trace_add("write", self._on_var_write)
        self.entry.bind("<FocusOut>", self._on_focus_out)
        self.entry.bind("<Return>", self._on_focus_out)
        self.entry.bind("<Control-u>", self._on_ctrl_u_key)
        self.entry.bind("<Control-U>", self._on_ctrl_u_key)
        self.bind_all("<Escape>", self._on_escape_quit, add=True)

    def _install_signal_handlers(self) -> None:
        def _on_sigint(_signum: int, _frame: object) -> None:
            self.after(0, self._quit_app)

        signal.signal(signal.SIGINT, _on_sigint)

    @staticmethod
    def _parse_int_field(text: str, lower: int, upper: int) -> int:
        try:
            value = int(text.strip() or "0")
        except ValueError:
            value = 0
        return max(lower, min(upper, value))

    def _read_config(self) -> ConverterConfig:
        return ConverterConfig.clamped(
            signed=self.signed_var.get() == SIGNED_CHOICES[0],
            m=self._parse_int_field(self.m_var.get(), 0, MAX_FORMAT_BITS),
            n=self._parse_int_field(self.n_var.get(), 0, MAX_FORMAT_BITS),
            input_base=self.base_var.get(),
            precision=self._parse_int_field(self.precision_var.get(), 0, MAX_DISPLAY_PRECISION),
            group_digits=bool(self.group_var.get()),
            value_text=self.value_var.get(),
        )

    def _on_var_write(self, *_args) -> None:
        if not self._programmatic:
            self._on_change()

    def _on_change(self) -> None:
        config = self._read_config()
        result = convert(
            config.value_text,
            config.input_base,
            (config.signed, config.m, config.n),
            config.precision,
            config.group_digits,
        )
        self.binary_label_var.set(f"Binary (Q{config.m}.{config.n}):")

        if result.status is Status.ERROR:
            self._show_error(result)
            return

        fmt = config.qformat
        self._set_invalid(False)
        self._current = (fmt, result.scaled)
        self._show_result(result, fmt)

    def _show_result(self, result: ConversionResult, fmt: QFormat) -> None:
        self.binary_var.set(result.binary or PLACEHOLDER)
        self.decimal_var.set(result.decimal or PLACEHOLDER)
        self.hex_var.set(group_hex(result.hex) if result.hex else PLACEHOLDER)
        self.pattern_var.set(result.pattern or PLACEHOLDER)
        self.format_info_var.set(describe_format(fmt))
        self.status_var.set(status_message(result))
        self.status_label.configure(fg="#b26a00" if result.overflow else "#2e7d32")
        self.bit_canvas.render(fmt, result.scaled)

    def _show_error(self, result: ConversionResult) -> None:
        self._current = None
        for var in (self.binary_var, self.decimal_var, self.hex_var, self.pattern_var):
            var.set(PLACEHOLDER)
        self.format_info_var.set(PLACEHOLDER)
        self.status_var.set(status_message(result))
        self.status_label.configure(fg="#bf2a2a")
        self.bit_canvas.clear()
        self._set_invalid(True)

    def _on_bit_toggle(self, index: int) -> None:
        if self._current is None:
            return
        fmt, scaled = self._current
        config = self._read_config()
        toggled = toggle(scaled, fmt, index, config.precision, config.group_digits)
        self._programmatic = True
        try:
            self.base_var.set(InputBase.DECIMAL.key)
            self.value_var.set(toggled.source_text)
        finally:
            self._programmatic = False
        self._on_change()

    def _set_invalid(self, is_invalid: bool) -> None:
        if is_invalid:
            self.entry.configure(bg="#ffeaea", highlightthickness=2, highlightbackground="#cc4444")
        else:
            self.entry.configure(bg=self._default_bg, highlightthickness=1, highlightbackground="#b8b8b8")

    def _on_focus_out(self, _event: tk.Event) -> None:
        base = InputBase.from_value(self.base_var.get())
        text = self.value_var.get()
        try:
            parse_numeral(text, base)
        except ParseError:
            return
        formatted = format_source_text(text, base)
        if formatted != text:
            self._programmatic = True
            try:
                self.value_var.set(formatted)
            finally:
                self._programmatic = False

    @staticmethod
    def _on_ctrl_u_key(event: tk.Event) -> str:
        widget = event.widget
        if isinstance(widget, tk.Entry):
            cursor_index = widget.index(tk.INSERT)
            widget.delete(0, cursor_index)
        return "break"

    def _on_escape_quit(self, _event: tk.Event) -> str:
        self._quit_app()
        return "break"

    def _quit_app(self) -> None:
        self.quit()
        self.destroy()

    def _focus_value_entry(self) -> None:
        self.entry.focus_set()
        self.entry.selection_range(0, tk.END)
        self.entry.icursor(tk.END)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qbits",
        description="Convert values to and from fixed-point Q format bit patterns.",
    )
    parser.add_argument("--format", default="Q3.5", help="Q format name, e.g. Q3.5 or UQ8.0")
    parser.add_argument("--base", choices=[base.key for base in InputBase], default="dec")
    parser.add_argument("--precision", type=int, default=6, help="decimal digits shown (0-18)")
    parser.add_argument("--no-group", action="store_true", help="do not group binary digits by 4")
    parser.add_argument("--value", default="-3.14159", help="initial value text")
    parser.add_argument("--print", dest="print_only", action="store_true", help="print and exit")
    parser.add_argument("--log-level", default="WARNING", help="logging level name")
    return parser


def _print_result(result: ConversionResult) -> int:
    if result.error is not None:
        print(f"error ({result.error.kind.value}): {result.error.message}", file=sys.stderr)
        return 2
    print(f"binary:  {result.binary}")
    print(f"hex:     {result.hex}")
    print(f"decimal: {result.decimal}")
    print(f"pattern: {result.pattern}")
    print(f"status:  {result.status.value}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        fmt = QFormat.parse(args.format)
    except InvalidFormatError as exc:
        parser.error(str(exc))
    if fmt.m > MAX_FORMAT_BITS or fmt.n > MAX_FORMAT_BITS:
        parser.error(f"{fmt.name}: m and n must each be at most {MAX_FORMAT_BITS}.")
    config = ConverterConfig.clamped(
        signed=fmt.signed,
        m=fmt.m,
        n=fmt.n,
        input_base=args.base,
        precision=args.precision,
        group_digits=not args.no_group,
        value_text=args.value,
    )
    logger.debug("Starting with %s", config)

    if args.print_only:
        return _print_result(
            convert(config.value_text, config.input_base, config.qformat, config.precision, config.group_digits)
        )

    app = QFormatApp(config)
    app.mainloop()
    return 0
